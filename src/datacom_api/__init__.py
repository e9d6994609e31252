from datacom_api._version import VERSION, __version__

from importlib import import_module
from typing import Any

__all__ = [
    "VERSION",
    "__version__",
    "Client",
    "PagingMaths",
    "PageMarker",
    "SearchBase",
    "SearchContact",
    "SearchCompany",
    "DataComError",
    "InvalidArgument",
    "ParamError",
    "TokenFailError",
    "WebserviceError",
]

_SYMBOL_TO_MODULE = {
    "Client": "datacom_api.client",
    "PagingMaths": "datacom_api.paging.maths",
    "PageMarker": "datacom_api.paging.maths",
    "SearchBase": "datacom_api.responses.search",
    "SearchContact": "datacom_api.responses.search",
    "SearchCompany": "datacom_api.responses.search",
    "DataComError": "datacom_api.errors",
    "InvalidArgument": "datacom_api.errors",
    "ParamError": "datacom_api.errors",
    "TokenFailError": "datacom_api.errors",
    "WebserviceError": "datacom_api.errors",
}


def __getattr__(name: str) -> Any:
    module_name = _SYMBOL_TO_MODULE.get(name)
    if module_name is None:
        raise AttributeError(name)
    module = import_module(module_name)
    return getattr(module, name)


def __dir__():
    return sorted(set(globals()) | set(__all__))
