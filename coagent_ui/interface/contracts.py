"""
Renderer configuration surface.

Each override point is an explicit field. ``None`` means "unset": the renderer
falls back to the default documented on the field. Overrides are independent;
replacing one never changes what another produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from coagent_ui.config import components, settings
from coagent_ui.domain.feedback import FeedbackDecision, FeedbackOutcome
from coagent_ui.domain.models import AnyStateItem, Response, ResponseStatus
from coagent_ui.interface.view_tree import ViewNode


class StateLabels(BaseModel):
    model_config = ConfigDict(frozen=True)

    in_progress: str = Field(
        components.STATE_LABELS["in_progress"],
        description="Header text while the agent is still working",
    )
    complete: str = Field(
        components.STATE_LABELS["complete"],
        description="Header text once the agent reports completion",
    )
    empty: str = Field(
        components.STATE_LABELS["empty"],
        description="Shown when a finished state has no items",
    )


class ResponseLabels(BaseModel):
    model_config = ConfigDict(frozen=True)

    approve: str = components.RESPONSE_LABELS["approve"]
    reject: str = components.RESPONSE_LABELS["reject"]
    approved: str = components.RESPONSE_LABELS["approved"]
    rejected: str = components.RESPONSE_LABELS["rejected"]
    submitted: str = components.RESPONSE_LABELS["submitted"]
    feedback_prompt: str = components.RESPONSE_LABELS["feedback_prompt"]


class IconSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    in_progress: str = components.ICONS["in_progress"]
    complete: str = components.ICONS["complete"]
    tool: str = components.ICONS["tool"]
    task: str = components.ICONS["task"]
    degraded: str = components.ICONS["degraded"]
    newest: str = components.ICONS["newest"]
    approve: str = components.ICONS["approve"]
    reject: str = components.ICONS["reject"]
    approved: str = components.ICONS["approved"]
    rejected: str = components.ICONS["rejected"]
    submitted: str = components.ICONS["submitted"]


class StyleHooks(BaseModel):
    """CSS class names attached to each structural slot."""

    model_config = ConfigDict(frozen=True)

    container: str = components.STYLE_HOOKS["container"]
    header: str = components.STYLE_HOOKS["header"]
    item: str = components.STYLE_HOOKS["item"]
    newest_item: str = components.STYLE_HOOKS["newest_item"]
    skeleton: str = components.STYLE_HOOKS["skeleton"]
    empty: str = components.STYLE_HOOKS["empty"]
    content: str = components.STYLE_HOOKS["content"]
    feedback_controls: str = components.STYLE_HOOKS["feedback_controls"]
    feedback_button: str = components.STYLE_HOOKS["feedback_button"]
    feedback_complete: str = components.STYLE_HOOKS["feedback_complete"]


@dataclass(frozen=True)
class StateRenderContext:
    status: ResponseStatus
    labels: StateLabels
    icons: IconSet
    styles: StyleHooks
    newest_item_id: str | None = None

    def is_newest(self, item: AnyStateItem) -> bool:
        return self.newest_item_id is not None and item.id == self.newest_item_id


@dataclass(frozen=True)
class ResponseRenderContext:
    status: ResponseStatus
    labels: ResponseLabels
    icons: IconSet
    styles: StyleHooks
    response_id: str


class ItemRenderer(Protocol):
    def __call__(self, item: AnyStateItem, context: StateRenderContext, /) -> ViewNode: ...


class SkeletonRenderer(Protocol):
    def __call__(self, context: StateRenderContext, /) -> ViewNode: ...


class ContentRenderer(Protocol):
    def __call__(self, response: Response, context: ResponseRenderContext, /) -> ViewNode: ...


class FeedbackButtonRenderer(Protocol):
    def __call__(
        self, decision: FeedbackDecision, context: ResponseRenderContext, /
    ) -> ViewNode: ...


class CompletedFeedbackRenderer(Protocol):
    def __call__(
        self, outcome: FeedbackOutcome, context: ResponseRenderContext, /
    ) -> ViewNode: ...


@dataclass(frozen=True)
class StateRendererConfig:
    """
    item_renderer: one node per state item. Default: tool steps show tool name,
        reasoning and a result preview; tasks show name and description;
        degraded items show a placeholder.
    skeleton_renderer: loading placeholder while in progress with no items.
        Default: ``SKELETON_ROWS`` shimmer rows.
    labels / icons / styles: default to ``config.components``.
    default_collapsed: initial collapsed flag for the container.
    max_height: CSS max-height in pixels, ``None`` for unbounded.
    """

    item_renderer: ItemRenderer | None = None
    skeleton_renderer: SkeletonRenderer | None = None
    labels: StateLabels = field(default_factory=StateLabels)
    icons: IconSet = field(default_factory=IconSet)
    styles: StyleHooks = field(default_factory=StyleHooks)
    default_collapsed: bool = settings.DEFAULT_COLLAPSED
    max_height: int | None = settings.DEFAULT_MAX_HEIGHT


@dataclass(frozen=True)
class ResponseRendererConfig:
    """
    content_renderer: renders ``Response.content``. Default: plain text.
    feedback_button_renderer: one approve or reject control. Default: labelled
        button carrying its feedback token.
    completed_feedback_renderer: shown once feedback was given. Default:
        approved / rejected / submitted message with icon.
    labels / icons / styles: default to ``config.components``.
    default_collapsed: initial collapsed flag for the container.
    max_height: CSS max-height in pixels, ``None`` for unbounded.
    """

    content_renderer: ContentRenderer | None = None
    feedback_button_renderer: FeedbackButtonRenderer | None = None
    completed_feedback_renderer: CompletedFeedbackRenderer | None = None
    labels: ResponseLabels = field(default_factory=ResponseLabels)
    icons: IconSet = field(default_factory=IconSet)
    styles: StyleHooks = field(default_factory=StyleHooks)
    default_collapsed: bool = settings.DEFAULT_COLLAPSED
    max_height: int | None = settings.DEFAULT_MAX_HEIGHT
