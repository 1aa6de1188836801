import pytest
from pydantic import ValidationError

from coagent_ui.domain.models import AgentState, Response, ResponseStatus
from coagent_ui.interface.protocol import RenderUpdate
from coagent_ui.interface.view_tree import ViewNode, text_node


def test_render_update_serialization() -> None:
    update = RenderUpdate(
        thread_id="test_thread",
        seq_id=1,
        type="response.ready",
        status=ResponseStatus.EXECUTING,
        response=Response(id="r1", content="hello"),
    )
    json_str = update.model_dump_json()
    assert "test_thread" in json_str
    assert "response.ready" in json_str
    assert '"executing"' in json_str


def test_render_update_payload_must_match_type() -> None:
    with pytest.raises(ValidationError):
        RenderUpdate(type="state.snapshot", status="complete")
    with pytest.raises(ValidationError):
        RenderUpdate(type="response.ready", status="complete", state=AgentState())
    with pytest.raises(ValidationError):
        RenderUpdate(type="state.delta", status="complete", state=AgentState())


def test_view_node_walk_and_payload() -> None:
    tree = ViewNode(
        component="root",
        children=(
            text_node("first", class_name="a"),
            ViewNode(component="group", children=(text_node("second"),)),
        ),
    )

    assert [node.component for node in tree.walk()] == ["root", "text", "group", "text"]
    assert tree.texts() == ["first", "second"]
    assert tree.find("group") is not None
    assert tree.find("missing") is None

    payload = tree.to_payload()
    assert "text" not in payload
    assert payload["children"][0] == {
        "component": "text",
        "props": {"class_name": "a"},
        "text": "first",
        "children": [],
    }
