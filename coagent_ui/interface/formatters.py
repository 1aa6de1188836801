from __future__ import annotations

import json
from datetime import datetime

from coagent_ui.config import settings
from coagent_ui.domain.models import OpaquePayload


def _truncate(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)].rstrip() + "…"


def format_result_preview(
    payload: OpaquePayload | None, *, limit: int = settings.RESULT_PREVIEW_LIMIT
) -> str | None:
    if payload is None:
        return None
    try:
        decoded = payload.load()
    except ValueError:
        return _truncate(payload.raw, limit)
    if isinstance(decoded, str):
        return _truncate(decoded, limit)
    text = json.dumps(decoded, ensure_ascii=False, indent=2, sort_keys=True)
    return _truncate(text, limit)


def format_timestamp(timestamp: str | None) -> str:
    if not timestamp:
        return ""
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    return parsed.strftime("%H:%M:%S")
