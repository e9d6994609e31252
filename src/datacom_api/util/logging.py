from __future__ import annotations

import json
import logging
from uuid import uuid4

try:
    import orjson as _orjson
except Exception:  # pragma: no cover - optional acceleration
    _orjson = None

_SENSITIVE_FIELD_TOKENS = (
    "authorization",
    "token",
    "secret",
    "password",
    "api_key",
    "apikey",
)
_TRUNCATED_SUFFIX = "...<truncated>"
_MAX_LOG_STRING_CHARS = 2048
SEARCH_ID_LEN = 12


def _is_sensitive_key(key: str) -> bool:
    lowered = str(key).strip().lower()
    return any(token in lowered for token in _SENSITIVE_FIELD_TOKENS)


def _sanitize_log_value(key: str, value):
    if _is_sensitive_key(key):
        return "<redacted>"
    if isinstance(value, str) and len(value) > _MAX_LOG_STRING_CHARS:
        return value[:_MAX_LOG_STRING_CHARS] + _TRUNCATED_SUFFIX
    return value


def _serialize_structured_payload(payload: dict[str, object]) -> str:
    if _orjson is not None:
        try:
            return _orjson.dumps(payload, default=str).decode("utf-8")
        except Exception:
            # Keep logging best-effort even for unusual payload objects.
            pass
    return json.dumps(payload, default=str, ensure_ascii=False, separators=(",", ":"))


def new_search_id(path: str | None = None) -> str:
    """Short id tagging the log events of one search, named after its endpoint.

    C{"searchContact.json"} gives C{"searchcontact_<12 hex chars>"}.
    """
    token = uuid4().hex[:SEARCH_ID_LEN]
    endpoint = str(path or "").strip().rstrip("/").rsplit("/", 1)[-1]
    stem = endpoint.split(".", 1)[0].lower()
    if stem:
        return f"{stem}_{token}"
    return token


def log_structured_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields,
) -> dict[str, object]:
    payload: dict[str, object] = {"event": str(event)}
    payload.update({k: _sanitize_log_value(k, v) for k, v in fields.items() if v is not None})
    logger.log(level, _serialize_structured_payload(payload))
    return payload
