"""
Local feedback state for responses.

awaiting-feedback -> (approve | reject | text) -> feedback-shown

The transition is one-shot per response id and lives only in the rendering
layer; the Response itself is never touched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from coagent_ui.domain.models import ResponseStatus
from coagent_ui.shared.kernel.contracts import (
    FEEDBACK_TOKEN_APPROVE,
    FEEDBACK_TOKEN_REJECT,
)
from coagent_ui.shared.kernel.tools.incident_logging import (
    CONTRACT_KIND_FEEDBACK,
    log_boundary_event,
)
from coagent_ui.shared.kernel.tools.logger import get_logger, log_event
from coagent_ui.shared.kernel.types import JSONObject

logger = get_logger(__name__)

FeedbackCallback = Callable[[str], None]


class FeedbackDecision(str, Enum):
    APPROVE = FEEDBACK_TOKEN_APPROVE
    REJECT = FEEDBACK_TOKEN_REJECT
    TEXT = "text"


class FeedbackPhase(str, Enum):
    AWAITING = "awaiting-feedback"
    SHOWN = "feedback-shown"


class FeedbackOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    response_id: str
    decision: FeedbackDecision
    value: str = Field(..., description="Exact value handed to the callback")


class FeedbackAlreadySubmittedError(RuntimeError):
    """Raised when feedback is submitted twice for the same response.

    ``outcome`` is ``None`` when the first submission is still being delivered.
    """

    def __init__(self, response_id: str, outcome: FeedbackOutcome | None = None):
        if outcome is None:
            detail = "delivery in progress"
        else:
            detail = outcome.decision.value
        super().__init__(
            f"feedback already submitted for response {response_id!r} ({detail})"
        )
        self.response_id = response_id
        self.outcome = outcome


class FeedbackClosedError(RuntimeError):
    """Raised when feedback is submitted for a response whose status is complete."""

    def __init__(self, response_id: str, status: ResponseStatus):
        super().__init__(
            f"response {response_id!r} no longer accepts feedback (status {status.value})"
        )
        self.response_id = response_id
        self.status = status


class FeedbackLedger:
    """Records which responses have received feedback, keyed by response id."""

    def __init__(self) -> None:
        self._outcomes: dict[str, FeedbackOutcome] = {}
        self._in_flight: set[str] = set()

    def __contains__(self, response_id: object) -> bool:
        return response_id in self._outcomes

    def __len__(self) -> int:
        return len(self._outcomes)

    def phase(self, response_id: str) -> FeedbackPhase:
        if response_id in self._outcomes:
            return FeedbackPhase.SHOWN
        return FeedbackPhase.AWAITING

    def outcome_for(self, response_id: str) -> FeedbackOutcome | None:
        return self._outcomes.get(response_id)

    def _log_refusal(self, response_id: str, error_code: str, detail: JSONObject) -> None:
        log_boundary_event(
            logger,
            component="feedback",
            item_id=response_id,
            contract_kind=CONTRACT_KIND_FEEDBACK,
            error_code=error_code,
            detail=detail,
            level=logging.WARNING,
        )

    def submit(
        self,
        response_id: str,
        decision: FeedbackDecision,
        callback: FeedbackCallback,
        *,
        status: ResponseStatus,
        text: str | None = None,
    ) -> FeedbackOutcome:
        existing = self._outcomes.get(response_id)
        if existing is not None or response_id in self._in_flight:
            self._log_refusal(
                response_id, "FEEDBACK_ALREADY_SUBMITTED", {"decision": decision.value}
            )
            raise FeedbackAlreadySubmittedError(response_id, existing)
        if not status.accepts_feedback:
            self._log_refusal(
                response_id,
                "FEEDBACK_AFTER_COMPLETE",
                {"decision": decision.value, "status": status.value},
            )
            raise FeedbackClosedError(response_id, status)

        if decision is FeedbackDecision.TEXT:
            if text is None or not text.strip():
                raise ValueError("free-text feedback must not be empty")
            value = text
        else:
            value = decision.value

        # A failing callback leaves the response awaiting so it can be retried.
        self._in_flight.add(response_id)
        try:
            callback(value)
        finally:
            self._in_flight.discard(response_id)
        outcome = FeedbackOutcome(response_id=response_id, decision=decision, value=value)
        self._outcomes[response_id] = outcome
        log_event(
            logger,
            event="feedback_submitted",
            message="feedback delivered to agent",
            fields={"response_id": response_id, "decision": decision.value},
        )
        return outcome
