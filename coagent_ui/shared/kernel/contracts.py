from __future__ import annotations

from typing import Final, Literal, TypeAlias

STATUS_IN_PROGRESS: Final = "inProgress"
STATUS_EXECUTING: Final = "executing"
STATUS_COMPLETE: Final = "complete"

ITEM_KIND_TOOL: Final = "tool"
ITEM_KIND_TASK: Final = "task"

FEEDBACK_TOKEN_APPROVE: Final = "approve"
FEEDBACK_TOKEN_REJECT: Final = "reject"

# Component names shared with the front-end component registry.
COMPONENT_CONVERSATION: Final = "conversation"
COMPONENT_AGENT_STATE: Final = "agent_state"
COMPONENT_HEADER: Final = "header"
COMPONENT_ICON: Final = "icon"
COMPONENT_ITEM_LIST: Final = "state_item_list"
COMPONENT_STATE_ITEM: Final = "state_item"
COMPONENT_TOOL_STEP: Final = "tool_step"
COMPONENT_TASK: Final = "task"
COMPONENT_DEGRADED_ITEM: Final = "degraded_item"
COMPONENT_SKELETON: Final = "skeleton"
COMPONENT_EMPTY: Final = "empty"
COMPONENT_TEXT: Final = "text"
COMPONENT_CODE: Final = "code"
COMPONENT_RESPONSE: Final = "response"
COMPONENT_CONTENT: Final = "content"
COMPONENT_FEEDBACK_CONTROLS: Final = "feedback_controls"
COMPONENT_FEEDBACK_BUTTON: Final = "feedback_button"
COMPONENT_FEEDBACK_INPUT: Final = "feedback_input"
COMPONENT_FEEDBACK_COMPLETE: Final = "feedback_complete"

RenderUpdateType: TypeAlias = Literal["state.snapshot", "response.ready"]

UPDATE_STATE_SNAPSHOT: Final = "state.snapshot"
UPDATE_RESPONSE_READY: Final = "response.ready"
