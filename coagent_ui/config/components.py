"""
Default component text, icons and style hooks.

Mirrors the front-end component configuration so both sides agree on the
defaults a renderer falls back to when an option is left unset.
"""

STATE_LABELS = {
    "in_progress": "Working on it...",
    "complete": "Done",
    "empty": "No progress to show yet.",
}

RESPONSE_LABELS = {
    "approve": "Approve",
    "reject": "Reject",
    "approved": "You approved this response.",
    "rejected": "You rejected this response.",
    "submitted": "Feedback sent.",
    "feedback_prompt": "Anything to add?",
}

# Icon identifiers from the front-end icon registry
ICONS = {
    "in_progress": "loader",
    "complete": "check-circle",
    "tool": "wrench",
    "task": "list-checks",
    "degraded": "alert-triangle",
    "newest": "sparkles",
    "approve": "thumbs-up",
    "reject": "thumbs-down",
    "approved": "check",
    "rejected": "x",
    "submitted": "message-circle",
}

STYLE_HOOKS = {
    "container": "coagent-container",
    "header": "coagent-header",
    "item": "coagent-item",
    "newest_item": "coagent-item--newest",
    "skeleton": "coagent-skeleton",
    "empty": "coagent-empty",
    "content": "coagent-content",
    "feedback_controls": "coagent-feedback",
    "feedback_button": "coagent-feedback-button",
    "feedback_complete": "coagent-feedback-complete",
}

SKELETON_ROWS = 3
