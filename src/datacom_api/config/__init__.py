from datacom_api.config.loader import (
    RUNTIME_DEFAULTS_PATH_ENV_VAR,
    load_runtime_defaults_override_detailed,
    load_toml,
    resolve_runtime_defaults_path,
)
from datacom_api.config.runtime_defaults import (
    RUNTIME_DEFAULTS_SCHEMA_VERSION,
    ClientDefaults,
    RuntimeDefaults,
    ServiceDefaults,
    clear_runtime_defaults_cache,
    get_runtime_defaults,
    parse_runtime_defaults,
)

__all__ = [
    "RUNTIME_DEFAULTS_PATH_ENV_VAR",
    "RUNTIME_DEFAULTS_SCHEMA_VERSION",
    "resolve_runtime_defaults_path",
    "load_runtime_defaults_override_detailed",
    "load_toml",
    "ClientDefaults",
    "RuntimeDefaults",
    "ServiceDefaults",
    "parse_runtime_defaults",
    "get_runtime_defaults",
    "clear_runtime_defaults_cache",
]
