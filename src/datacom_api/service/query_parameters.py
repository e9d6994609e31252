from __future__ import annotations

from collections.abc import Mapping
from typing import Any

"""
Search options as the service expects them on the query string
===============================================================

Options are passed around in snake_case (C{page_size=50}); the service
wants camelCase (C{pageSize=50}). Lists are joined with commas and
unset options are left out.
"""


def camelize(name: str) -> str:
    head, *rest = str(name).split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(_encode_value(item) for item in value)
    return str(value)


class QueryParameters(Mapping):
    def __init__(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        merged = dict(options or {})
        merged.update(kwargs)
        self._params = {
            camelize(key): _encode_value(value)
            for key, value in merged.items()
            if value is not None
        }

    def __getitem__(self, key: str) -> str:
        return self._params[key]

    def __iter__(self):
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return "QueryParameters(%r)" % (self._params,)

    def to_dict(self) -> dict[str, str]:
        return dict(self._params)
