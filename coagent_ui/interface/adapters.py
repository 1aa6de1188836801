"""
LangGraph / LangChain bridge.

Turns what a running graph produces (state values, ``astream_events`` v2
chunks, chat messages, interrupts) into the inputs the renderers take, and
turns submitted feedback back into a ``Command`` that resumes the graph.
Transport stays with the host.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from langchain_core.messages import AIMessage, BaseMessage
from langgraph.types import Command, Interrupt
from pydantic import BaseModel

from coagent_ui.config import settings
from coagent_ui.domain.feedback import FeedbackCallback, FeedbackDecision, FeedbackOutcome
from coagent_ui.domain.models import AgentState, Response, ResponseStatus
from coagent_ui.interface.parsers import parse_agent_state
from coagent_ui.interface.protocol import RenderUpdate
from coagent_ui.shared.kernel.contracts import UPDATE_RESPONSE_READY, UPDATE_STATE_SNAPSHOT
from coagent_ui.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)

_STATE_KEYS = ("steps", "tasks")
_TOKENS = frozenset({FeedbackDecision.APPROVE.value, FeedbackDecision.REJECT.value})
_INTERRUPT_CONTENT_KEYS = ("content", "message", "question", "description")


def _as_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        dumped = value.model_dump(mode="json")
        if not isinstance(dumped, dict):
            raise TypeError(f"{context} BaseModel must dump to dict, got {type(dumped)!r}")
        return dumped
    raise TypeError(f"{context} must be Mapping|BaseModel, got {type(value)!r}")


def agent_state_from_graph_values(values: object) -> AgentState | None:
    """Build a snapshot from graph state values; ``None`` when they carry no progress."""
    mapping = _as_mapping(values, "graph state")
    if not any(key in mapping for key in _STATE_KEYS):
        return None
    return parse_agent_state({key: mapping.get(key) for key in _STATE_KEYS})


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, Mapping) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str):
                parts.append(text)
    return "".join(parts)


def response_from_message(message: BaseMessage) -> Response:
    if not isinstance(message, AIMessage):
        raise TypeError(f"response message must be an AIMessage, got {type(message)!r}")
    if not message.id:
        raise TypeError("response message has no id; feedback cannot be keyed")
    metadata = dict(message.response_metadata) if message.response_metadata else None
    return Response(id=message.id, content=_message_text(message), metadata=metadata)


def _interrupt_id(interrupt: Interrupt) -> str | None:
    for attr in ("id", "interrupt_id"):
        value = getattr(interrupt, attr, None)
        if isinstance(value, str) and value:
            return value
    return None


def response_from_interrupt(interrupt: Interrupt) -> Response:
    """A paused graph asking the user to approve or comment becomes a Response."""
    interrupt_id = _interrupt_id(interrupt)
    if interrupt_id is None:
        raise TypeError("interrupt has no id; feedback cannot be keyed")

    value = interrupt.value
    if isinstance(value, str):
        return Response(id=interrupt_id, content=value)
    payload = _as_mapping(value, "interrupt value")
    content = next(
        (
            payload[key]
            for key in _INTERRUPT_CONTENT_KEYS
            if isinstance(payload.get(key), str)
        ),
        "",
    )
    return Response(id=interrupt_id, content=content, metadata=dict(payload))


def feedback_to_command(outcome: FeedbackOutcome) -> Command:
    return Command(
        resume={
            "response_id": outcome.response_id,
            "decision": outcome.decision.value,
            "feedback": outcome.value,
        }
    )


def resume_callback(
    response_id: str, send: Callable[[Command], object]
) -> FeedbackCallback:
    """Feedback callback that resumes the paused graph through ``send``."""

    def _callback(value: str) -> None:
        if value in _TOKENS:
            decision = FeedbackDecision(value)
        else:
            decision = FeedbackDecision.TEXT
        outcome = FeedbackOutcome(response_id=response_id, decision=decision, value=value)
        send(feedback_to_command(outcome))

    return _callback


def adapt_langgraph_event(
    event: Mapping[str, object],
    *,
    status: ResponseStatus = ResponseStatus.IN_PROGRESS,
    thread_id: str = "",
    seq_id: int = 0,
) -> RenderUpdate | None:
    """
    Map one ``astream_events`` v2 chunk to a render update.

    - custom event named ``settings.EMIT_STATE_EVENT`` -> state snapshot
    - ``on_chain_end`` whose output carries steps/tasks -> state snapshot
    - ``on_chat_model_end`` with an AIMessage -> response (unless tagged ``hide_stream``)
    Everything else is ignored.
    """
    kind = event.get("event")
    if not isinstance(kind, str):
        raise TypeError("Invalid LangGraph event: missing string 'event'")

    data_raw = event.get("data")
    data: Mapping[str, object] = data_raw if isinstance(data_raw, Mapping) else {}
    tags_raw = event.get("tags")
    tags = tags_raw if isinstance(tags_raw, list) else []

    state: AgentState | None = None
    response: Response | None = None

    if kind == "on_custom_event":
        if event.get("name") != settings.EMIT_STATE_EVENT:
            return None
        state = parse_agent_state(data)
    elif kind == "on_chain_end":
        output = data.get("output")
        if isinstance(output, Command):
            output = output.update
        if not isinstance(output, Mapping | BaseModel):
            return None
        state = agent_state_from_graph_values(output)
    elif kind == "on_chat_model_end":
        if "hide_stream" in tags:
            return None
        output = data.get("output")
        if not isinstance(output, AIMessage):
            return None
        response = response_from_message(output)
    else:
        return None

    if state is not None:
        update_type = UPDATE_STATE_SNAPSHOT
    elif response is not None:
        update_type = UPDATE_RESPONSE_READY
    else:
        return None

    log_event(
        logger,
        event="render_update_adapted",
        message="adapted langgraph event",
        level=logging.DEBUG,
        fields={"source_event": kind, "update_type": update_type, "seq_id": seq_id},
    )
    return RenderUpdate(
        thread_id=thread_id,
        seq_id=seq_id,
        type=update_type,
        status=status,
        state=state,
        response=response,
    )
