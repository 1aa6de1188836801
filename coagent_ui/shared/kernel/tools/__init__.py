from .incident_logging import (
    CONTRACT_KIND_AGENT_STATE,
    CONTRACT_KIND_FEEDBACK,
    CONTRACT_KIND_RESPONSE,
    CONTRACT_KIND_STATE_ITEM,
    build_render_diagnostics,
    log_boundary_event,
)
from .logger import (
    bind_log_context,
    clear_log_context,
    get_log_context,
    get_logger,
    log_context,
    log_event,
)

__all__ = [
    "get_logger",
    "bind_log_context",
    "get_log_context",
    "clear_log_context",
    "log_context",
    "log_event",
    "CONTRACT_KIND_AGENT_STATE",
    "CONTRACT_KIND_STATE_ITEM",
    "CONTRACT_KIND_RESPONSE",
    "CONTRACT_KIND_FEEDBACK",
    "build_render_diagnostics",
    "log_boundary_event",
]
