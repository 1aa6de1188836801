from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from coagent_ui.shared.kernel.contracts import COMPONENT_TEXT
from coagent_ui.shared.kernel.types import JSONObject


class ViewNode(BaseModel):
    """
    One node of the visual tree handed to the front-end.

    ``component`` names an entry in the front-end component registry, ``props``
    are passed through verbatim, ``text`` is the node's own text content.
    """

    model_config = ConfigDict(frozen=True)

    component: str
    props: dict[str, Any] = Field(default_factory=dict)
    text: str | None = None
    children: tuple[ViewNode, ...] = Field(default_factory=tuple)

    def walk(self) -> Iterator[ViewNode]:
        """Depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, component: str) -> list[ViewNode]:
        return [node for node in self.walk() if node.component == component]

    def find(self, component: str) -> ViewNode | None:
        return next((node for node in self.walk() if node.component == component), None)

    def texts(self) -> list[str]:
        return [node.text for node in self.walk() if node.text]

    def to_payload(self) -> JSONObject:
        return self.model_dump(mode="json", exclude_none=True)


def text_node(text: str, *, class_name: str | None = None, **props: Any) -> ViewNode:
    if class_name:
        props["class_name"] = class_name
    return ViewNode(component=COMPONENT_TEXT, text=text, props=props)
