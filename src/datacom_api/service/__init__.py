from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "WebserviceOpener",
    "QueryParameters",
    "PROXY_URL_ENV_VAR",
    "build_session",
    "resolve_proxy_url",
]

_SYMBOL_TO_MODULE = {
    "WebserviceOpener": "datacom_api.service.opener",
    "QueryParameters": "datacom_api.service.query_parameters",
    "PROXY_URL_ENV_VAR": "datacom_api.service.transport",
    "build_session": "datacom_api.service.transport",
    "resolve_proxy_url": "datacom_api.service.transport",
}


def __getattr__(name: str) -> Any:
    module_name = _SYMBOL_TO_MODULE.get(name)
    if module_name is None:
        raise AttributeError(name)
    module = import_module(module_name)
    return getattr(module, name)
