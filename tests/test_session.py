import pytest

from coagent_ui.application.session import AgentViewSession
from coagent_ui.domain.feedback import FeedbackAlreadySubmittedError, FeedbackClosedError
from coagent_ui.domain.models import AgentState, Response, ResponseStatus, TaskStateItem
from coagent_ui.interface.protocol import RenderUpdate


def _snapshot(*task_ids: str) -> AgentState:
    return AgentState(
        tasks=tuple(
            TaskStateItem(id=task_id, timestamp="T0", name=task_id) for task_id in task_ids
        )
    )


def test_snapshots_replace_previous_state_wholesale() -> None:
    session = AgentViewSession(thread_id="thread_1")

    session.apply(RenderUpdate(type="state.snapshot", status="inProgress", state=_snapshot("a", "b")))
    session.apply(RenderUpdate(type="state.snapshot", status="inProgress", state=_snapshot("c")))

    items = session.render().find_all("state_item")
    assert [node.props["item_id"] for node in items] == ["c"]


def test_render_without_response_has_only_state_view() -> None:
    session = AgentViewSession()

    view = session.render()

    assert view.component == "conversation"
    assert [child.component for child in view.children] == ["agent_state"]
    assert view.find("skeleton") is not None


def test_feedback_survives_unrelated_state_updates() -> None:
    received: list[str] = []
    session = AgentViewSession()
    session.apply(
        RenderUpdate(
            type="response.ready",
            status="executing",
            response=Response(id="r1", content="Done"),
        ),
        on_feedback=received.append,
    )
    assert session.render().find("feedback_controls") is not None

    session.approve()
    session.apply(RenderUpdate(type="state.snapshot", status="executing", state=_snapshot("t9")))
    view = session.render()

    assert received == ["approve"]
    assert view.find("feedback_controls") is None
    assert view.find("feedback_complete") is not None
    with pytest.raises(FeedbackAlreadySubmittedError):
        session.reject()


def test_new_response_gets_fresh_feedback_window() -> None:
    received: list[str] = []
    session = AgentViewSession()
    session.set_response({"id": "r1", "content": "Draft"}, "executing", received.append)
    session.submit_text("shorter please")

    session.set_response({"id": "r2", "content": "Shorter draft"}, "executing", received.append)

    assert session.render().find("feedback_controls") is not None
    assert received == ["shorter please"]


def test_update_state_parses_raw_payloads() -> None:
    session = AgentViewSession()

    session.update_state({"tasks": [{"id": "t1", "timestamp": "T0", "name": "Plan"}]}, "complete")

    assert session.status is ResponseStatus.COMPLETE
    assert session.state is not None and session.state.tasks[0].id == "t1"


def test_feedback_requires_response_and_callback() -> None:
    session = AgentViewSession()
    with pytest.raises(RuntimeError):
        session.approve()

    session.set_response({"id": "r1", "content": "Done"}, "executing")
    with pytest.raises(RuntimeError, match="no feedback callback"):
        session.reject()


def test_rejected_response_leaves_session_unchanged() -> None:
    old_calls: list[str] = []
    new_calls: list[str] = []
    session = AgentViewSession()
    session.set_response({"id": "r1", "content": "Draft"}, "executing", old_calls.append)

    with pytest.raises(TypeError):
        session.set_response({"id": "r2", "content": "Next"}, "bogus", new_calls.append)

    assert session.response is not None and session.response.id == "r1"
    assert session.status is ResponseStatus.EXECUTING
    session.approve()
    assert old_calls == ["approve"]
    assert new_calls == []


def test_rejected_state_update_leaves_session_unchanged() -> None:
    session = AgentViewSession()
    session.update_state({"tasks": [{"id": "t1", "timestamp": "T0", "name": "Plan"}]}, "executing")

    with pytest.raises(TypeError):
        session.update_state({"tasks": []}, "paused")
    with pytest.raises(TypeError):
        session.update_state(["not", "a", "mapping"], "complete")

    assert session.status is ResponseStatus.EXECUTING
    assert session.state is not None and [task.id for task in session.state.tasks] == ["t1"]


def test_complete_response_takes_no_feedback() -> None:
    received: list[str] = []
    session = AgentViewSession()
    session.set_response({"id": "r1", "content": "Final"}, "complete", received.append)

    assert session.render().find("feedback_controls") is None
    with pytest.raises(FeedbackClosedError):
        session.approve()
    assert received == []
