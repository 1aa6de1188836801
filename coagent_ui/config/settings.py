import os

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv())


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Logging
LOG_SERVICE = os.getenv("LOG_SERVICE", "coagent-ui-core")
APP_ENV = os.getenv("APP_ENV", "dev")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
LOG_REDACT_KEYS = os.getenv("LOG_REDACT_KEYS", "")

# Renderer defaults
DEFAULT_COLLAPSED = _env_flag("COAGENT_UI_DEFAULT_COLLAPSED", False)
DEFAULT_MAX_HEIGHT = _env_int("COAGENT_UI_MAX_HEIGHT", None)
RESULT_PREVIEW_LIMIT = _env_int("COAGENT_UI_RESULT_PREVIEW_LIMIT", 400) or 400

# Name of the custom event the agent graph dispatches to publish intermediate state
EMIT_STATE_EVENT = os.getenv("COAGENT_UI_EMIT_STATE_EVENT", "emit_state")
