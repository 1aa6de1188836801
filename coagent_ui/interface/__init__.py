from .contracts import (
    IconSet,
    ResponseLabels,
    ResponseRenderContext,
    ResponseRendererConfig,
    StateLabels,
    StateRenderContext,
    StateRendererConfig,
    StyleHooks,
)
from .response_renderer import ResponseRenderer
from .state_renderer import StateRenderer
from .view_tree import ViewNode

__all__ = [
    "IconSet",
    "ResponseLabels",
    "ResponseRenderContext",
    "ResponseRendererConfig",
    "StateLabels",
    "StateRenderContext",
    "StateRendererConfig",
    "StyleHooks",
    "ResponseRenderer",
    "StateRenderer",
    "ViewNode",
]
