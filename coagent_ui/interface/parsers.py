"""
Boundary parsing for payloads coming from the agent process.

Item-level faults never fail a snapshot: a malformed step or task becomes a
``DegradedStateItem`` so the rest of the state still renders. Faults in the
envelope itself (a snapshot that is not a mapping, an invalid response or
status) raise ``TypeError``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Literal

from pydantic import BaseModel, TypeAdapter, ValidationError

from coagent_ui.domain.models import (
    AgentState,
    AnyStateItem,
    DegradedStateItem,
    Response,
    ResponseStatus,
    StateItemModel,
    TaskStateItem,
    ToolStateItem,
)
from coagent_ui.shared.kernel.contracts import ITEM_KIND_TASK, ITEM_KIND_TOOL
from coagent_ui.shared.kernel.tools.incident_logging import (
    CONTRACT_KIND_AGENT_STATE,
    CONTRACT_KIND_RESPONSE,
    CONTRACT_KIND_STATE_ITEM,
    log_boundary_event,
)
from coagent_ui.shared.kernel.tools.logger import get_logger

logger = get_logger(__name__)

SequenceName = Literal["steps", "tasks"]

_ITEM_ADAPTER: TypeAdapter[AnyStateItem] = TypeAdapter(StateItemModel)
_EXPECTED_KIND: dict[str, str] = {"steps": ITEM_KIND_TOOL, "tasks": ITEM_KIND_TASK}
_RAW_PREVIEW_LIMIT = 200
_STATUS_ALIASES = {
    "inprogress": ResponseStatus.IN_PROGRESS,
    "executing": ResponseStatus.EXECUTING,
    "complete": ResponseStatus.COMPLETE,
    "completed": ResponseStatus.COMPLETE,
}


def _raw_preview(raw: object) -> str:
    try:
        text = json.dumps(raw, ensure_ascii=False, sort_keys=True, default=str)
    except (TypeError, ValueError):
        # mixed key types or circular references
        text = repr(raw)
    if len(text) > _RAW_PREVIEW_LIMIT:
        return text[: _RAW_PREVIEW_LIMIT - 1] + "…"
    return text


def _validation_reason(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid state item"


def _infer_kind(payload: Mapping[str, object], source: SequenceName) -> str:
    kind = payload.get("kind")
    if isinstance(kind, str) and kind:
        return kind
    if "tool" in payload:
        return ITEM_KIND_TOOL
    if "name" in payload:
        return ITEM_KIND_TASK
    return _EXPECTED_KIND[source]


def degrade_item(
    raw: object,
    *,
    source: SequenceName,
    index: int,
    reason: str,
) -> DegradedStateItem:
    original_id: str | None = None
    timestamp: str | None = None
    if isinstance(raw, Mapping):
        raw_id = raw.get("id")
        raw_ts = raw.get("timestamp")
        original_id = raw_id if isinstance(raw_id, str) and raw_id else None
        timestamp = raw_ts if isinstance(raw_ts, str) else None
    return DegradedStateItem(
        id=f"degraded:{source}:{index}",
        timestamp=timestamp,
        source=source,
        original_id=original_id,
        reason=reason,
        raw_preview=_raw_preview(raw),
    )


def parse_state_item(raw: object, *, source: SequenceName, index: int) -> AnyStateItem:
    expected = ToolStateItem if source == "steps" else TaskStateItem
    if isinstance(raw, expected | DegradedStateItem):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(mode="json")
    if not isinstance(raw, Mapping):
        return degrade_item(
            raw,
            source=source,
            index=index,
            reason=f"expected mapping, got {type(raw).__name__}",
        )

    kind = _infer_kind(raw, source)
    if kind != _EXPECTED_KIND[source]:
        return degrade_item(
            raw,
            source=source,
            index=index,
            reason=f"{kind!r} item is not allowed in {source}",
        )

    try:
        return _ITEM_ADAPTER.validate_python({**raw, "kind": kind})
    except ValidationError as exc:
        return degrade_item(
            raw, source=source, index=index, reason=_validation_reason(exc)
        )


def _parse_sequence(
    raw: Mapping[str, object],
    source: SequenceName,
    seen_ids: set[str],
) -> list[AnyStateItem]:
    value = raw.get(source)
    if value is None:
        return []
    if not isinstance(value, Sequence) or isinstance(value, str | bytes):
        log_boundary_event(
            logger,
            component="agent_state",
            item_id=None,
            contract_kind=CONTRACT_KIND_AGENT_STATE,
            error_code="SEQUENCE_NOT_A_LIST",
            detail={"sequence": source, "type": type(value).__name__},
            level=logging.WARNING,
        )
        return []

    items: list[AnyStateItem] = []
    for index, entry in enumerate(value):
        item = parse_state_item(entry, source=source, index=index)
        if item.id in seen_ids:
            item = degrade_item(
                entry if isinstance(entry, Mapping) else {"id": item.id},
                source=source,
                index=index,
                reason=f"duplicate id {item.id!r}",
            )
        seen_ids.add(item.id)
        if isinstance(item, DegradedStateItem):
            log_boundary_event(
                logger,
                component="agent_state",
                item_id=item.original_id,
                contract_kind=CONTRACT_KIND_STATE_ITEM,
                error_code="STATE_ITEM_DEGRADED",
                detail={"sequence": source, "index": index, "reason": item.reason},
                level=logging.WARNING,
            )
        items.append(item)
    return items


def parse_agent_state(raw: object) -> AgentState | None:
    if raw is None:
        return None
    if isinstance(raw, AgentState):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(mode="json")
    if not isinstance(raw, Mapping):
        log_boundary_event(
            logger,
            component="agent_state",
            item_id=None,
            contract_kind=CONTRACT_KIND_AGENT_STATE,
            error_code="AGENT_STATE_NOT_A_MAPPING",
            detail={"type": type(raw).__name__},
            level=logging.ERROR,
        )
        raise TypeError(f"agent state must be a mapping, got {type(raw)!r}")

    seen_ids: set[str] = set()
    steps = _parse_sequence(raw, "steps", seen_ids)
    tasks = _parse_sequence(raw, "tasks", seen_ids)
    return AgentState(steps=tuple(steps), tasks=tuple(tasks))


def parse_response(raw: object) -> Response:
    if isinstance(raw, Response):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(mode="json")
    if not isinstance(raw, Mapping):
        raise TypeError(f"response must be a mapping, got {type(raw)!r}")
    try:
        return Response.model_validate(raw)
    except ValidationError as exc:
        response_id = raw.get("id")
        log_boundary_event(
            logger,
            component="response",
            item_id=response_id if isinstance(response_id, str) else None,
            contract_kind=CONTRACT_KIND_RESPONSE,
            error_code="RESPONSE_INVALID",
            detail={"reason": _validation_reason(exc)},
            level=logging.ERROR,
        )
        raise TypeError(f"response validation failed: {exc}") from exc


def parse_status(raw: object) -> ResponseStatus:
    if isinstance(raw, ResponseStatus):
        return raw
    if not isinstance(raw, str):
        raise TypeError(f"response status must be a string, got {type(raw)!r}")
    normalized = raw.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
    status = _STATUS_ALIASES.get(normalized)
    if status is None:
        raise TypeError(f"unsupported response status: {raw!r}")
    return status
