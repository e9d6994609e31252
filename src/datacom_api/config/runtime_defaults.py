from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Any, Mapping

from datacom_api.config.loader import (
    load_packaged_runtime_defaults_detailed,
    load_runtime_defaults_override_detailed,
)
from datacom_api.util.logging import log_structured_event

_MAX_CONFIG_STRING_LENGTH = 256
_MAX_CONFIG_INT = 10_000_000
_MAX_PAGE_SIZE = 100
RUNTIME_DEFAULTS_SCHEMA_VERSION = 1
_RUNTIME_DEFAULTS_LOG = logging.getLogger("datacom_api.config.runtime_defaults")


@dataclass(frozen=True)
class ClientDefaults:
    base_uri: str = "https://www.jigsaw.com/rest/"
    page_size: int = 50
    max_offset: int = 100_000
    size_only_page_size: int = 0


@dataclass(frozen=True)
class ServiceDefaults:
    connect_timeout_seconds: int = 10
    request_timeout_seconds: int = 60


@dataclass(frozen=True)
class RuntimeDefaults:
    client_defaults: ClientDefaults
    service_defaults: ServiceDefaults


_BUILTIN_RUNTIME_DEFAULTS = RuntimeDefaults(
    client_defaults=ClientDefaults(),
    service_defaults=ServiceDefaults(),
)


def _log_runtime_defaults_source(source: str, *, error_kind: str | None, schema_status: str, used_fallback: bool) -> None:
    level = logging.WARNING if used_fallback else logging.DEBUG
    log_structured_event(
        _RUNTIME_DEFAULTS_LOG,
        level,
        "runtime_defaults_source",
        source=source,
        schema_status=schema_status,
        error_kind=error_kind,
        used_fallback=bool(used_fallback),
    )


def _to_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}


def _schema_status(payload: Mapping[str, Any], *, require_schema: bool) -> tuple[bool, str]:
    raw = _to_mapping(payload.get("meta")).get("schema_version")
    if raw is None:
        if require_schema:
            return False, "missing"
        return True, "absent"
    try:
        version = int(raw)
    except Exception:
        return False, "mismatch"
    if version != RUNTIME_DEFAULTS_SCHEMA_VERSION:
        return False, "mismatch"
    return True, "ok"


def _parse_positive_int(raw: Any, default: int) -> int:
    try:
        parsed = int(raw)
    except Exception:
        return int(default)
    if parsed <= 0:
        return int(default)
    return min(parsed, _MAX_CONFIG_INT)


def _parse_bounded_int(raw: Any, default: int, *, low: int, high: int) -> int:
    try:
        parsed = int(raw)
    except Exception:
        return int(default)
    if parsed < low or parsed > high:
        return int(default)
    return parsed


def _parse_small_string(raw: Any, default: str) -> str:
    if raw is None:
        return str(default)
    value = str(raw).strip()
    if not value or len(value) > _MAX_CONFIG_STRING_LENGTH:
        return str(default)
    return value


def parse_runtime_defaults(payload: Mapping[str, Any] | None, *, base: RuntimeDefaults | None = None) -> RuntimeDefaults:
    root = _to_mapping(payload)
    runtime_base = _BUILTIN_RUNTIME_DEFAULTS if base is None else base

    client_raw = _to_mapping(root.get("client"))
    client_builtin = runtime_base.client_defaults
    client_defaults = ClientDefaults(
        base_uri=_parse_small_string(client_raw.get("base_uri"), client_builtin.base_uri),
        page_size=_parse_bounded_int(
            client_raw.get("page_size"),
            client_builtin.page_size,
            low=0,
            high=_MAX_PAGE_SIZE,
        ),
        max_offset=_parse_positive_int(client_raw.get("max_offset"), client_builtin.max_offset),
        size_only_page_size=_parse_bounded_int(
            client_raw.get("size_only_page_size"),
            client_builtin.size_only_page_size,
            low=0,
            high=_MAX_PAGE_SIZE,
        ),
    )

    service_raw = _to_mapping(root.get("service"))
    service_builtin = runtime_base.service_defaults
    service_defaults = ServiceDefaults(
        connect_timeout_seconds=_parse_positive_int(
            service_raw.get("connect_timeout_seconds"),
            service_builtin.connect_timeout_seconds,
        ),
        request_timeout_seconds=_parse_positive_int(
            service_raw.get("request_timeout_seconds"),
            service_builtin.request_timeout_seconds,
        ),
    )
    return RuntimeDefaults(client_defaults=client_defaults, service_defaults=service_defaults)


@lru_cache(maxsize=1)
def get_runtime_defaults() -> RuntimeDefaults:
    packaged = load_packaged_runtime_defaults_detailed()
    packaged_payload = packaged.get("payload")
    if not packaged.get("ok", False) or not isinstance(packaged_payload, Mapping):
        packaged_error = packaged.get("error_kind")
        fallback_reason = f"packaged_{packaged_error}" if isinstance(packaged_error, str) else "packaged_load_error"
        _log_runtime_defaults_source(
            "builtin_fallback",
            error_kind=fallback_reason,
            schema_status="missing",
            used_fallback=True,
        )
        return _BUILTIN_RUNTIME_DEFAULTS

    schema_ok, schema_state = _schema_status(packaged_payload, require_schema=True)
    if not schema_ok:
        _log_runtime_defaults_source(
            "builtin_fallback",
            error_kind="packaged_schema_" + schema_state,
            schema_status=schema_state,
            used_fallback=True,
        )
        return _BUILTIN_RUNTIME_DEFAULTS

    parsed = parse_runtime_defaults(packaged_payload)
    source = "packaged_toml"
    error_kind = None

    override = load_runtime_defaults_override_detailed()
    if override is not None:
        override_payload = override.get("payload")
        override_error = override.get("error_kind")
        if override.get("ok", False) and isinstance(override_payload, Mapping):
            override_schema_ok, override_schema_state = _schema_status(override_payload, require_schema=False)
            if override_schema_ok:
                parsed = parse_runtime_defaults(override_payload, base=parsed)
                source = "override_toml"
            else:
                error_kind = "override_schema_mismatch"
            schema_state = override_schema_state
        else:
            error_kind = f"override_{override_error}" if isinstance(override_error, str) else "override_invalid_shape"
    _log_runtime_defaults_source(
        source,
        error_kind=error_kind,
        schema_status=schema_state,
        used_fallback=error_kind is not None,
    )
    return parsed


def clear_runtime_defaults_cache() -> None:
    get_runtime_defaults.cache_clear()
