import pytest

from coagent_ui.domain.feedback import (
    FeedbackAlreadySubmittedError,
    FeedbackClosedError,
    FeedbackDecision,
    FeedbackPhase,
)
from coagent_ui.domain.models import Response, ResponseStatus
from coagent_ui.interface.contracts import ResponseLabels, ResponseRendererConfig
from coagent_ui.interface.response_renderer import ResponseRenderer
from coagent_ui.interface.view_tree import ViewNode


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, value: str) -> None:
        self.calls.append(value)


def _response(response_id: str = "r1", content: str = "Done") -> Response:
    return Response(id=response_id, content=content)


def test_executing_response_offers_feedback_then_shows_approval() -> None:
    renderer = ResponseRenderer()
    response = _response()
    callback = _Recorder()

    first = renderer.render(response, ResponseStatus.EXECUTING, callback)

    content = first.find("content")
    assert content is not None and content.text == "Done"
    buttons = first.find_all("feedback_button")
    assert [button.props["action"] for button in buttons] == ["approve", "reject"]
    assert first.props["feedback_phase"] == FeedbackPhase.AWAITING.value

    renderer.approve(response, ResponseStatus.EXECUTING, callback)
    second = renderer.render(response, ResponseStatus.EXECUTING, callback)

    assert callback.calls == ["approve"]
    assert second.find("feedback_controls") is None
    completed = second.find("feedback_complete")
    assert completed is not None
    assert completed.text == ResponseLabels().approved
    assert second.props["feedback_phase"] == FeedbackPhase.SHOWN.value


def test_reject_shows_distinct_message() -> None:
    renderer = ResponseRenderer()
    response = _response()
    callback = _Recorder()

    renderer.reject(response, ResponseStatus.IN_PROGRESS, callback)
    view = renderer.render(response, ResponseStatus.IN_PROGRESS, callback)

    completed = view.find("feedback_complete")
    assert callback.calls == ["reject"]
    assert completed is not None
    assert completed.text == ResponseLabels().rejected
    assert completed.props["decision"] == "reject"


def test_free_text_is_passed_through_literally() -> None:
    renderer = ResponseRenderer()
    callback = _Recorder()

    outcome = renderer.submit_text(
        _response(), ResponseStatus.EXECUTING, "  use the 2023 numbers ", callback
    )

    assert callback.calls == ["  use the 2023 numbers "]
    assert outcome.decision is FeedbackDecision.TEXT
    view = renderer.render(_response(), ResponseStatus.EXECUTING, callback)
    completed = view.find("feedback_complete")
    assert completed is not None and completed.text == ResponseLabels().submitted


def test_no_controls_without_callback_or_after_completion() -> None:
    renderer = ResponseRenderer()
    response = _response()

    assert renderer.render(response, ResponseStatus.EXECUTING).find("feedback_controls") is None
    assert (
        renderer.render(response, ResponseStatus.COMPLETE, _Recorder()).find(
            "feedback_controls"
        )
        is None
    )


def test_feedback_fires_once_per_response() -> None:
    renderer = ResponseRenderer()
    response = _response()
    callback = _Recorder()

    renderer.approve(response, ResponseStatus.EXECUTING, callback)
    with pytest.raises(FeedbackAlreadySubmittedError):
        renderer.reject(response, ResponseStatus.IN_PROGRESS, callback)
    with pytest.raises(FeedbackAlreadySubmittedError):
        renderer.approve(response, ResponseStatus.EXECUTING, callback)

    assert callback.calls == ["approve"]


def test_feedback_is_keyed_by_response_id() -> None:
    renderer = ResponseRenderer()
    callback = _Recorder()

    renderer.approve(_response("r1"), ResponseStatus.EXECUTING, callback)
    other = renderer.render(_response("r2"), ResponseStatus.EXECUTING, callback)

    assert other.find("feedback_controls") is not None


def test_completed_feedback_persists_after_status_change() -> None:
    renderer = ResponseRenderer()
    response = _response()
    renderer.approve(response, ResponseStatus.EXECUTING, _Recorder())

    view = renderer.render(response, ResponseStatus.COMPLETE)

    assert view.find("feedback_complete") is not None


def test_content_override_leaves_controls_alone() -> None:
    response = _response(content="**bold**")
    callback = _Recorder()
    config = ResponseRendererConfig(
        content_renderer=lambda resp, context: ViewNode(
            component="markdown", text=resp.content
        )
    )

    custom = ResponseRenderer(config).render(response, ResponseStatus.EXECUTING, callback)
    default = ResponseRenderer().render(response, ResponseStatus.EXECUTING, callback)

    assert custom.find("markdown") is not None
    assert custom.find("content") is None
    assert custom.find("feedback_controls") == default.find("feedback_controls")


def test_button_and_label_overrides() -> None:
    config = ResponseRendererConfig(
        labels=ResponseLabels(approve="Ship it"),
        feedback_button_renderer=lambda decision, context: ViewNode(
            component="icon_button", props={"action": decision.value}
        ),
    )
    view = ResponseRenderer(config).render(_response(), ResponseStatus.EXECUTING, _Recorder())

    assert [node.props["action"] for node in view.find_all("icon_button")] == [
        "approve",
        "reject",
    ]
    assert view.find("feedback_button") is None
    assert view.find("content") == ResponseRenderer().render(
        _response(), ResponseStatus.EXECUTING
    ).find("content")


def test_completed_feedback_override() -> None:
    config = ResponseRendererConfig(
        completed_feedback_renderer=lambda outcome, context: ViewNode(
            component="toast", text=outcome.value
        )
    )
    renderer = ResponseRenderer(config)
    renderer.reject(_response(), ResponseStatus.EXECUTING, _Recorder())

    view = renderer.render(_response(), ResponseStatus.EXECUTING, _Recorder())

    toast = view.find("toast")
    assert toast is not None and toast.text == "reject"


def test_complete_status_blocks_feedback_actions() -> None:
    renderer = ResponseRenderer()
    response = _response()
    callback = _Recorder()

    assert renderer.render(response, ResponseStatus.COMPLETE, callback).find(
        "feedback_controls"
    ) is None
    with pytest.raises(FeedbackClosedError):
        renderer.approve(response, ResponseStatus.COMPLETE, callback)
    with pytest.raises(FeedbackClosedError):
        renderer.submit_text(response, ResponseStatus.COMPLETE, "late note", callback)

    assert callback.calls == []
    assert renderer.ledger.phase(response.id) is FeedbackPhase.AWAITING


def test_callback_rerender_cannot_fire_second_decision() -> None:
    renderer = ResponseRenderer()
    response = _response()
    calls: list[str] = []

    def eager_host(value: str) -> None:
        calls.append(value)
        if len(calls) == 1:
            with pytest.raises(FeedbackAlreadySubmittedError):
                renderer.reject(response, ResponseStatus.EXECUTING, eager_host)

    renderer.approve(response, ResponseStatus.EXECUTING, eager_host)

    assert calls == ["approve"]
    completed = renderer.render(response, ResponseStatus.EXECUTING, eager_host).find(
        "feedback_complete"
    )
    assert completed is not None and completed.props["decision"] == "approve"
