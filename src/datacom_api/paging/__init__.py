from datacom_api.paging.maths import (
    DEFAULT_MAX_OFFSET,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TOTAL_RECORDS,
    CacheKey,
    CacheKind,
    PageMarker,
    PagingMaths,
)

__all__ = [
    "DEFAULT_MAX_OFFSET",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TOTAL_RECORDS",
    "CacheKey",
    "CacheKind",
    "PageMarker",
    "PagingMaths",
]
