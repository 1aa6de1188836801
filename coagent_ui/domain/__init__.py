from .feedback import (
    FeedbackAlreadySubmittedError,
    FeedbackClosedError,
    FeedbackCallback,
    FeedbackDecision,
    FeedbackLedger,
    FeedbackOutcome,
    FeedbackPhase,
)
from .models import (
    AgentState,
    AnyStateItem,
    DegradedStateItem,
    OpaquePayload,
    Response,
    ResponseStatus,
    StateItem,
    StateItemModel,
    TaskStateItem,
    ToolStateItem,
)

__all__ = [
    "AgentState",
    "AnyStateItem",
    "DegradedStateItem",
    "OpaquePayload",
    "Response",
    "ResponseStatus",
    "StateItem",
    "StateItemModel",
    "TaskStateItem",
    "ToolStateItem",
    "FeedbackAlreadySubmittedError",
    "FeedbackClosedError",
    "FeedbackCallback",
    "FeedbackDecision",
    "FeedbackLedger",
    "FeedbackOutcome",
    "FeedbackPhase",
]
