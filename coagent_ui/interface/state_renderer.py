"""
Agent progress view.

Projects the latest ``AgentState`` snapshot and a ``ResponseStatus`` into a
``ViewNode`` tree:

    agent_state
    ├── header            status label + icon
    └── state_item_list   one state_item per step/task, in emission order
        or skeleton       while in progress with nothing to show
        or empty          once finished with nothing to show

Rendering is pure. A sub-renderer failure affects only the item it failed on.
"""

from __future__ import annotations

import logging

from coagent_ui.config import components
from coagent_ui.domain.models import (
    AgentState,
    AnyStateItem,
    DegradedStateItem,
    ResponseStatus,
    TaskStateItem,
    ToolStateItem,
)
from coagent_ui.interface.contracts import (
    ItemRenderer,
    SkeletonRenderer,
    StateRenderContext,
    StateRendererConfig,
)
from coagent_ui.interface.formatters import format_result_preview, format_timestamp
from coagent_ui.interface.parsers import SequenceName, degrade_item
from coagent_ui.interface.view_tree import ViewNode, text_node
from coagent_ui.shared.kernel.contracts import (
    COMPONENT_AGENT_STATE,
    COMPONENT_CODE,
    COMPONENT_DEGRADED_ITEM,
    COMPONENT_EMPTY,
    COMPONENT_HEADER,
    COMPONENT_ICON,
    COMPONENT_ITEM_LIST,
    COMPONENT_SKELETON,
    COMPONENT_STATE_ITEM,
    COMPONENT_TASK,
    COMPONENT_TOOL_STEP,
)
from coagent_ui.shared.kernel.tools.incident_logging import (
    CONTRACT_KIND_STATE_ITEM,
    log_boundary_event,
)
from coagent_ui.shared.kernel.tools.logger import get_logger

logger = get_logger(__name__)


def _icon(name: str) -> ViewNode:
    return ViewNode(component=COMPONENT_ICON, props={"name": name})


def _render_tool_step(item: ToolStateItem, context: StateRenderContext) -> ViewNode:
    children = [_icon(context.icons.tool), text_node(item.tool, role="title")]
    if item.reasoning:
        children.append(text_node(item.reasoning, role="reasoning"))
    preview = format_result_preview(item.result)
    if preview is not None:
        children.append(ViewNode(component=COMPONENT_CODE, text=preview))
    return ViewNode(
        component=COMPONENT_TOOL_STEP,
        props={"tool": item.tool, "time": format_timestamp(item.timestamp)},
        children=tuple(children),
    )


def _render_task(item: TaskStateItem, context: StateRenderContext) -> ViewNode:
    children = [_icon(context.icons.task), text_node(item.name, role="title")]
    if item.description:
        children.append(text_node(item.description, role="description"))
    return ViewNode(
        component=COMPONENT_TASK,
        props={"name": item.name, "time": format_timestamp(item.timestamp)},
        children=tuple(children),
    )


def _source_of(item: AnyStateItem) -> SequenceName:
    if isinstance(item, DegradedStateItem):
        return item.source
    return "steps" if isinstance(item, ToolStateItem) else "tasks"


def render_degraded_item(
    item: DegradedStateItem, context: StateRenderContext
) -> ViewNode:
    return ViewNode(
        component=COMPONENT_DEGRADED_ITEM,
        props={"reason": item.reason, "original_id": item.original_id},
        children=(_icon(context.icons.degraded), text_node(item.reason, role="reason")),
    )


def render_default_item(item: AnyStateItem, context: StateRenderContext) -> ViewNode:
    if isinstance(item, ToolStateItem):
        return _render_tool_step(item, context)
    if isinstance(item, TaskStateItem):
        return _render_task(item, context)
    return render_degraded_item(item, context)


def render_default_skeleton(context: StateRenderContext) -> ViewNode:
    rows = tuple(
        ViewNode(component=COMPONENT_SKELETON, props={"row": row})
        for row in range(components.SKELETON_ROWS)
    )
    return ViewNode(
        component=COMPONENT_SKELETON,
        props={"class_name": context.styles.skeleton, "rows": components.SKELETON_ROWS},
        children=rows,
    )


class StateRenderer:
    def __init__(self, config: StateRendererConfig | None = None):
        self.config = config or StateRendererConfig()

    @property
    def item_renderer(self) -> ItemRenderer:
        return self.config.item_renderer or render_default_item

    @property
    def skeleton_renderer(self) -> SkeletonRenderer:
        return self.config.skeleton_renderer or render_default_skeleton

    def render(self, state: AgentState | None, status: ResponseStatus) -> ViewNode:
        items = state.combined() if state is not None else ()
        newest = items[-1] if items else None
        context = StateRenderContext(
            status=status,
            labels=self.config.labels,
            icons=self.config.icons,
            styles=self.config.styles,
            newest_item_id=newest.id if newest is not None else None,
        )

        if items:
            body = ViewNode(
                component=COMPONENT_ITEM_LIST,
                props={"count": len(items)},
                children=tuple(
                    self._render_item(item, index, context, state)
                    for index, item in enumerate(items)
                ),
            )
        elif status is ResponseStatus.IN_PROGRESS:
            body = self.skeleton_renderer(context)
        else:
            body = ViewNode(
                component=COMPONENT_EMPTY,
                props={"class_name": context.styles.empty},
                text=context.labels.empty,
            )

        return ViewNode(
            component=COMPONENT_AGENT_STATE,
            props={
                "status": status.value,
                "collapsed": self.config.default_collapsed,
                "max_height": self.config.max_height,
                "class_name": context.styles.container,
            },
            children=(self._render_header(context), body),
        )

    def _render_header(self, context: StateRenderContext) -> ViewNode:
        if context.status is ResponseStatus.COMPLETE:
            label, icon = context.labels.complete, context.icons.complete
        else:
            label, icon = context.labels.in_progress, context.icons.in_progress
        return ViewNode(
            component=COMPONENT_HEADER,
            props={"class_name": context.styles.header},
            children=(_icon(icon), text_node(label, role="status")),
        )

    def _render_item(
        self,
        item: AnyStateItem,
        index: int,
        context: StateRenderContext,
        state: AgentState | None,
    ) -> ViewNode:
        is_newest = context.is_newest(item)
        try:
            child = self.item_renderer(item, context)
        except Exception as exc:
            log_boundary_event(
                logger,
                component="state_renderer",
                item_id=item.id,
                contract_kind=CONTRACT_KIND_STATE_ITEM,
                error_code="ITEM_RENDER_FAILED",
                state=state,
                detail={"index": index, "error": repr(exc)},
                level=logging.WARNING,
            )
            fallback = degrade_item(
                {"id": item.id, "timestamp": item.timestamp},
                source=_source_of(item),
                index=index,
                reason=f"could not render item: {exc}",
            )
            child = render_degraded_item(fallback, context)

        class_name = context.styles.item
        if is_newest:
            class_name = f"{class_name} {context.styles.newest_item}"
        return ViewNode(
            component=COMPONENT_STATE_ITEM,
            props={
                "item_id": item.id,
                "kind": item.kind,
                "index": index,
                "newest": is_newest,
                "badge": context.icons.newest if is_newest else None,
                "class_name": class_name,
            },
            children=(child,),
        )
