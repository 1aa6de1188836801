from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence

from coagent_ui.shared.kernel.types import JSONObject

CONTRACT_KIND_AGENT_STATE = "agent_state"
CONTRACT_KIND_STATE_ITEM = "state_item"
CONTRACT_KIND_RESPONSE = "response"
CONTRACT_KIND_FEEDBACK = "feedback"


def _item_ids(items: object) -> list[str]:
    if not isinstance(items, Sequence) or isinstance(items, str | bytes):
        return []
    ids: list[str] = []
    for item in items:
        raw_id = item.get("id") if isinstance(item, Mapping) else getattr(item, "id", None)
        if isinstance(raw_id, str) and raw_id:
            ids.append(raw_id)
    return ids


def _sequence_length(items: object) -> int:
    if isinstance(items, Sequence) and not isinstance(items, str | bytes):
        return len(items)
    return 0


def build_render_diagnostics(state: object, *, component: str) -> JSONObject:
    """Summarise a state snapshot so a degraded render can be replayed from logs."""
    if isinstance(state, Mapping):
        steps = state.get("steps")
        tasks = state.get("tasks")
    else:
        steps = getattr(state, "steps", None)
        tasks = getattr(state, "tasks", None)

    return {
        "component": component,
        "step_count": _sequence_length(steps),
        "task_count": _sequence_length(tasks),
        "step_ids": _item_ids(steps),
        "task_ids": _item_ids(tasks),
    }


def log_boundary_event(
    logger: logging.Logger,
    *,
    component: str,
    item_id: str | None,
    contract_kind: str,
    error_code: str,
    state: object | None = None,
    detail: JSONObject | None = None,
    level: int = logging.INFO,
) -> JSONObject:
    payload: JSONObject = {
        "component": component,
        "item_id": item_id,
        "contract_kind": contract_kind,
        "error_code": error_code,
    }
    if detail is not None:
        payload["detail"] = detail
    if state is not None:
        payload["replay"] = build_render_diagnostics(state, component=component)

    logger.log(
        level,
        "BOUNDARY_EVENT %s",
        json.dumps(payload, sort_keys=True, ensure_ascii=True, default=str),
    )
    return payload
