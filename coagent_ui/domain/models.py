"""
Agent progress and response models.

These are the shapes the agent process publishes and the renderers borrow for
the duration of one render pass. Every model is frozen: an update from the
agent replaces the previous snapshot instead of patching it.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, TypeAlias

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from coagent_ui.shared.kernel.contracts import (
    STATUS_COMPLETE,
    STATUS_EXECUTING,
    STATUS_IN_PROGRESS,
)
from coagent_ui.shared.kernel.types import JSONValue


class OpaquePayload(BaseModel):
    """JSON text blob for producer-defined tool results.

    The shape is never validated here; only a sub-renderer that knows the
    producer's format should call ``load()``.
    """

    model_config = ConfigDict(frozen=True)

    raw: str = Field(..., description="JSON encoded payload")

    @classmethod
    def wrap(cls, value: object) -> OpaquePayload:
        if isinstance(value, OpaquePayload):
            return value
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        try:
            raw = json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"payload is not JSON serialisable: {exc}") from exc
        return cls(raw=raw)

    def load(self) -> JSONValue:
        return json.loads(self.raw)


class StateItem(BaseModel):
    """One unit of agent progress."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Unique within an AgentState")
    timestamp: str = Field(..., description="Creation time as emitted by the agent")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: object) -> object:
        if isinstance(value, datetime):
            return value.isoformat()
        return value


def _require_text(value: str, field_name: str) -> str:
    if not value.strip():
        raise ValueError(f"{field_name} must not be blank")
    return value


class ToolStateItem(StateItem):
    kind: Literal["tool"] = "tool"
    tool: str = Field(..., description="Name of the invoked tool")
    reasoning: str | None = Field(None, description="Why the agent called the tool")
    result: OpaquePayload | None = Field(None, description="Opaque tool output")

    @field_validator("tool")
    @classmethod
    def _tool_not_blank(cls, value: str) -> str:
        return _require_text(value, "tool")

    @field_validator("result", mode="before")
    @classmethod
    def _wrap_result(cls, value: object) -> object:
        if value is None:
            return None
        return OpaquePayload.wrap(value)

    @field_serializer("result")
    def _dump_result(self, value: OpaquePayload | None) -> Any:
        return value.load() if value is not None else None


class TaskStateItem(StateItem):
    kind: Literal["task"] = "task"
    name: str = Field(..., description="Task title")
    description: str | None = Field(None, description="Optional task detail")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _require_text(value, "name")


class DegradedStateItem(BaseModel):
    """Placeholder for an item the agent emitted in a malformed shape."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["degraded"] = "degraded"
    id: str = Field(..., min_length=1)
    timestamp: str | None = None
    source: Literal["steps", "tasks"]
    original_id: str | None = None
    reason: str
    raw_preview: str = ""


StateItemModel: TypeAlias = Annotated[
    ToolStateItem | TaskStateItem | DegradedStateItem,
    Field(discriminator="kind"),
]
StepEntry: TypeAlias = Annotated[
    ToolStateItem | DegradedStateItem, Field(discriminator="kind")
]
TaskEntry: TypeAlias = Annotated[
    TaskStateItem | DegradedStateItem, Field(discriminator="kind")
]
AnyStateItem: TypeAlias = ToolStateItem | TaskStateItem | DegradedStateItem


class AgentState(BaseModel):
    """Snapshot of everything the agent has reported so far."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[StepEntry, ...] = Field(default_factory=tuple)
    tasks: tuple[TaskEntry, ...] = Field(default_factory=tuple)

    @field_validator("steps", "tasks", mode="before")
    @classmethod
    def _absent_is_empty(cls, value: object) -> object:
        return () if value is None else value

    @model_validator(mode="after")
    def _ids_unique(self) -> AgentState:
        seen: set[str] = set()
        for item in self.combined():
            if item.id in seen:
                raise ValueError(f"duplicate state item id: {item.id!r}")
            seen.add(item.id)
        return self

    def combined(self) -> tuple[AnyStateItem, ...]:
        """All items in render order: tool steps, then tasks."""
        return (*self.steps, *self.tasks)

    def newest(self) -> AnyStateItem | None:
        items = self.combined()
        return items[-1] if items else None

    @property
    def is_empty(self) -> bool:
        return not self.steps and not self.tasks


class ResponseStatus(str, Enum):
    IN_PROGRESS = STATUS_IN_PROGRESS
    EXECUTING = STATUS_EXECUTING
    COMPLETE = STATUS_COMPLETE

    @property
    def accepts_feedback(self) -> bool:
        return self is not ResponseStatus.COMPLETE


class Response(BaseModel):
    """A candidate or final agent output."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique per response")
    content: str = Field(..., description="Renderable text")
    metadata: dict[str, Any] | None = Field(
        None, description="Producer-defined metadata, never interpreted here"
    )
