from datacom_api.util.json import json_backend, json_loads
from datacom_api.util.logging import log_structured_event, new_search_id

__all__ = [
    "json_backend",
    "json_loads",
    "log_structured_event",
    "new_search_id",
]
