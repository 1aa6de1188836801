import pytest

from coagent_ui.domain.feedback import (
    FeedbackAlreadySubmittedError,
    FeedbackClosedError,
    FeedbackDecision,
    FeedbackLedger,
    FeedbackPhase,
)
from coagent_ui.domain.models import ResponseStatus

EXECUTING = ResponseStatus.EXECUTING


def test_ledger_moves_from_awaiting_to_shown() -> None:
    ledger = FeedbackLedger()
    received: list[str] = []

    assert ledger.phase("r1") is FeedbackPhase.AWAITING
    outcome = ledger.submit("r1", FeedbackDecision.APPROVE, received.append, status=EXECUTING)

    assert received == ["approve"]
    assert outcome.value == "approve"
    assert ledger.phase("r1") is FeedbackPhase.SHOWN
    assert ledger.outcome_for("r1") == outcome
    assert "r1" in ledger
    assert len(ledger) == 1


def test_second_submit_is_rejected_without_calling_back() -> None:
    ledger = FeedbackLedger()
    received: list[str] = []
    ledger.submit("r1", FeedbackDecision.REJECT, received.append, status=EXECUTING)

    with pytest.raises(FeedbackAlreadySubmittedError) as excinfo:
        ledger.submit(
            "r1", FeedbackDecision.TEXT, received.append, status=EXECUTING, text="again"
        )

    assert excinfo.value.outcome.decision is FeedbackDecision.REJECT
    assert received == ["reject"]


def test_empty_text_feedback_is_rejected() -> None:
    ledger = FeedbackLedger()
    received: list[str] = []

    with pytest.raises(ValueError):
        ledger.submit(
            "r1", FeedbackDecision.TEXT, received.append, status=EXECUTING, text="   "
        )

    assert received == []
    assert ledger.phase("r1") is FeedbackPhase.AWAITING


def test_failing_callback_keeps_response_awaiting() -> None:
    ledger = FeedbackLedger()

    def broken(value: str) -> None:
        raise ConnectionError("agent unreachable")

    with pytest.raises(ConnectionError):
        ledger.submit("r1", FeedbackDecision.APPROVE, broken, status=EXECUTING)

    assert ledger.phase("r1") is FeedbackPhase.AWAITING
    received: list[str] = []
    ledger.submit("r1", FeedbackDecision.APPROVE, received.append, status=EXECUTING)
    assert received == ["approve"]


def test_complete_response_refuses_feedback() -> None:
    ledger = FeedbackLedger()
    received: list[str] = []

    with pytest.raises(FeedbackClosedError):
        ledger.submit(
            "r1", FeedbackDecision.APPROVE, received.append, status=ResponseStatus.COMPLETE
        )

    assert received == []
    assert ledger.phase("r1") is FeedbackPhase.AWAITING


def test_reentrant_submit_is_rejected_while_delivering() -> None:
    ledger = FeedbackLedger()
    received: list[str] = []
    nested_errors: list[Exception] = []

    def double_click(value: str) -> None:
        received.append(value)
        try:
            ledger.submit("r1", FeedbackDecision.REJECT, double_click, status=EXECUTING)
        except FeedbackAlreadySubmittedError as exc:
            nested_errors.append(exc)

    outcome = ledger.submit("r1", FeedbackDecision.APPROVE, double_click, status=EXECUTING)

    assert received == ["approve"]
    assert outcome.decision is FeedbackDecision.APPROVE
    assert len(nested_errors) == 1
    assert nested_errors[0].outcome is None
    assert ledger.phase("r1") is FeedbackPhase.SHOWN


def test_failed_delivery_does_not_block_retry() -> None:
    ledger = FeedbackLedger()
    attempts: list[str] = []

    def flaky(value: str) -> None:
        attempts.append(value)
        if len(attempts) == 1:
            raise ConnectionError("agent unreachable")

    with pytest.raises(ConnectionError):
        ledger.submit("r1", FeedbackDecision.REJECT, flaky, status=EXECUTING)
    ledger.submit("r1", FeedbackDecision.REJECT, flaky, status=EXECUTING)

    assert attempts == ["reject", "reject"]
    assert ledger.outcome_for("r1") is not None
