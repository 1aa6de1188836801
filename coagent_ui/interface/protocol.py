import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator

from coagent_ui.domain.models import AgentState, Response, ResponseStatus
from coagent_ui.shared.kernel.contracts import (
    UPDATE_RESPONSE_READY,
    UPDATE_STATE_SNAPSHOT,
    RenderUpdateType,
)


class RenderUpdate(BaseModel):
    """
    One inbound update for the rendering layer.

    A ``state.snapshot`` carries a complete ``AgentState`` that replaces the
    previous one; a ``response.ready`` carries a ``Response``. ``status`` is
    always the agent's own status; the rendering layer never changes it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Unique update identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Time the update was adapted",
    )
    thread_id: str = Field(default="", description="Conversation thread ID")
    seq_id: int = Field(default=0, description="Ordering within the thread")
    type: RenderUpdateType
    status: ResponseStatus
    state: AgentState | None = None
    response: Response | None = None

    @model_validator(mode="after")
    def _payload_matches_type(self) -> "RenderUpdate":
        if self.type == UPDATE_STATE_SNAPSHOT and self.state is None:
            raise ValueError("state.snapshot update requires state")
        if self.type == UPDATE_RESPONSE_READY and self.response is None:
            raise ValueError("response.ready update requires response")
        return self
