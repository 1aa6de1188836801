"""Rendering core for LangGraph agent progress, responses and user feedback."""

from coagent_ui.application.session import AgentViewSession
from coagent_ui.domain import (
    AgentState,
    FeedbackAlreadySubmittedError,
    FeedbackClosedError,
    FeedbackDecision,
    Response,
    ResponseStatus,
    TaskStateItem,
    ToolStateItem,
)
from coagent_ui.interface import (
    ResponseRenderer,
    ResponseRendererConfig,
    StateRenderer,
    StateRendererConfig,
    ViewNode,
)

__version__ = "0.1.0"

__all__ = [
    "AgentViewSession",
    "AgentState",
    "FeedbackAlreadySubmittedError",
    "FeedbackClosedError",
    "FeedbackDecision",
    "Response",
    "ResponseStatus",
    "TaskStateItem",
    "ToolStateItem",
    "ResponseRenderer",
    "ResponseRendererConfig",
    "StateRenderer",
    "StateRendererConfig",
    "ViewNode",
]
