from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Optional, Union

from datacom_api.errors import InvalidArgument

"""
Pagination arithmetic for offset-capped search results
======================================================

A search service returns at most C{page_size} records per request, refuses
offsets above C{max_offset}, and only tells us how many records matched
(C{total_records}) once we have asked. L{PagingMaths} turns those three
numbers into page counts and page/offset conversions, memoizing every
answer until one of the numbers changes.
"""

DEFAULT_PAGE_SIZE = 50
DEFAULT_TOTAL_RECORDS = 100_000
DEFAULT_MAX_OFFSET = 1_000_000


class PageMarker(str, Enum):
    FIRST = "first"
    LAST = "last"


class CacheKind(Enum):
    ANY_RECORDS = "any_records"
    TOTAL_PAGES = "total_pages"
    PAGE_INDEX = "page_index"
    PAGE_FROM_OFFSET = "page_from_offset"
    OFFSET_FROM_PAGE = "offset_from_page"
    RECORDS_PER_PAGE = "records_per_page"


@dataclass(frozen=True)
class CacheKey:
    kind: CacheKind
    argument: Optional[Hashable] = None

    def __str__(self) -> str:
        if self.argument is None:
            return self.kind.value
        return "%s:%s" % (self.kind.value, self.argument)


_ANY_RECORDS_KEY = CacheKey(CacheKind.ANY_RECORDS)
_TOTAL_PAGES_KEY = CacheKey(CacheKind.TOTAL_PAGES)

PageArgument = Union[int, str, PageMarker, None]


def _non_negative_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, received {value!r}", value=value)
    if value < 0:
        raise InvalidArgument(f"{name} must be >= 0, received {value}", value=value, bound=0)
    return value


def _marker(page: Any) -> Optional[PageMarker]:
    if isinstance(page, PageMarker):
        return page
    if isinstance(page, str):
        try:
            return PageMarker(page.strip().lower())
        except ValueError:
            return None
    return None


class PagingMaths:
    """
    Memoized page/offset arithmetic
    ===============================

    >>> maths = PagingMaths(page_size=3, max_offset=100_000, total_records=5)
    >>> maths.total_pages()
    2
    >>> maths.page_from_offset(3)
    2
    >>> maths.offset_from_page(2)
    5

    Every conversion returns C{None} when there are no records at all,
    before any argument is checked. Setting C{page_size}, C{max_offset} or
    C{total_records} drops every memoized value under the same lock that
    guards lookups, so a reader never sees a mix of old and new answers.
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_offset: int = DEFAULT_MAX_OFFSET,
        total_records: int = DEFAULT_TOTAL_RECORDS,
    ) -> None:
        self._lock = threading.RLock()
        self._cache: Dict[CacheKey, Any] = {}
        self._cache_hits = 0
        self._cache_misses = 0
        self._page_size = _non_negative_int(page_size, "page_size")
        self._max_offset = _non_negative_int(max_offset, "max_offset")
        self._total_records = _non_negative_int(total_records, "total_records")

    def __repr__(self) -> str:
        return "<%s page_size=%d max_offset=%d total_records=%d>" % (
            self.__class__.__name__,
            self._page_size,
            self._max_offset,
            self._total_records,
        )

    # Configuration

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        value = _non_negative_int(value, "page_size")
        with self._lock:
            self._page_size = value
            self._cache.clear()

    @property
    def max_offset(self) -> int:
        return self._max_offset

    @max_offset.setter
    def max_offset(self, value: int) -> None:
        value = _non_negative_int(value, "max_offset")
        with self._lock:
            self._max_offset = value
            self._cache.clear()

    @property
    def total_records(self) -> int:
        return self._total_records

    @total_records.setter
    def total_records(self, value: int) -> None:
        value = _non_negative_int(value, "total_records")
        with self._lock:
            self._total_records = value
            self._cache.clear()

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def cache_hits(self) -> int:
        return int(self._cache_hits)

    @property
    def cache_misses(self) -> int:
        return int(self._cache_misses)

    def cached_keys(self):
        with self._lock:
            return tuple(self._cache)

    def _cached(self, key: CacheKey, compute: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._cache:
                self._cache_hits += 1
                return self._cache[key]
            self._cache_misses += 1
            value = compute()
            self._cache[key] = value
            return value

    def _reachable_records(self) -> int:
        return min(self._total_records, self._max_offset)

    # Derived values

    def any_records(self) -> bool:
        return self._cached(
            _ANY_RECORDS_KEY,
            lambda: self._page_size > 0 and self._max_offset > 0 and self._total_records > 0,
        )

    def total_pages(self) -> int:
        return self._cached(_TOTAL_PAGES_KEY, self._compute_total_pages)

    def _compute_total_pages(self) -> int:
        if not self.any_records():
            return 0
        pages, remainder = divmod(self._reachable_records(), self._page_size)
        if remainder:
            pages += 1
        return pages

    def _resolve_page_number(self, page: PageArgument) -> int:
        marker = _marker(page)
        if marker is PageMarker.FIRST:
            return 1
        if marker is PageMarker.LAST:
            return self.total_pages()
        if page is None:
            raise InvalidArgument("Page index can't be None", value=page, bound=1)
        if isinstance(page, bool):
            raise InvalidArgument(f"Page index must be an integer, received {page!r}", value=page)
        try:
            number = int(page)
        except (TypeError, ValueError):
            raise InvalidArgument(f"Page index must be an integer, 'first' or 'last', received {page!r}", value=page)
        if number == 0:
            raise InvalidArgument("Page index can't be 0, pages are numbered from 1", value=page, bound=1)
        if number < 0:
            raise InvalidArgument(f"Page index must be >= 1, received {number}", value=page, bound=1)
        return number

    def page_index(self, page: PageArgument) -> Optional[int]:
        """
        Resolve a page number or marker to a page number
        ================================================

        C{"first"} is page 1 and C{"last"} is L{total_pages}. Returns
        C{None} for a page beyond the last one.

        @raise InvalidArgument: for 0, None, or anything that is not a page number
        """
        with self._lock:
            if not self.any_records():
                return None
            number = self._resolve_page_number(page)
            return self._cached(
                CacheKey(CacheKind.PAGE_INDEX, number),
                lambda: None if number > self.total_pages() else number,
            )

    def page_from_offset(self, offset: int) -> Optional[int]:
        """
        Return the page that holds the record at C{offset}
        ==================================================

        @raise InvalidArgument: if the offset is negative or above C{max_offset}
        """
        with self._lock:
            if not self.any_records():
                return None
            self._check_offset(offset)
            return self._cached(
                CacheKey(CacheKind.PAGE_FROM_OFFSET, offset),
                # Offsets are zero-based: offset == page_size is the first record of page 2.
                lambda: offset // self._page_size + 1,
            )

    def _check_offset(self, offset: Any) -> None:
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidArgument(f"Offset must be an integer, received {offset!r}", value=offset)
        if offset < 0:
            raise InvalidArgument(f"Offset must be >= 0, received {offset}", value=offset, bound=0)
        if offset > self._max_offset:
            raise InvalidArgument(
                f"Offset must not be greater than max_offset ({self._max_offset}), received {offset}",
                value=offset,
                bound=self._max_offset,
            )

    def offset_from_page(self, page: PageArgument) -> Optional[int]:
        """
        Return the offset for a page
        ============================

        Every page but the last starts at C{(page - 1) * page_size}. The
        last page reports the capped record count instead, so callers can
        tell it apart by its offset. Returns C{None} past the last page.

        The upper bound check compares the page against C{max_offset}.

        @raise InvalidArgument: for 0, None, or a value above C{max_offset}
        """
        with self._lock:
            if not self.any_records():
                return None
            number = self._resolve_page_number(page)
            if number > self._max_offset:
                raise InvalidArgument(
                    f"Page can't be greater than max_offset ({self._max_offset}), received {number}",
                    value=page,
                    bound=self._max_offset,
                )
            return self._cached(
                CacheKey(CacheKind.OFFSET_FROM_PAGE, number),
                lambda: self._compute_offset_from_page(number),
            )

    def _compute_offset_from_page(self, number: int) -> Optional[int]:
        if self.page_index(number) is None:
            return None
        if number == self.total_pages():
            return self._reachable_records()
        return (number - 1) * self._page_size

    def records_per_page(self, page: PageArgument) -> Optional[int]:
        """Number of records held by C{page}, or None past the last page."""
        with self._lock:
            if not self.any_records():
                return None
            number = self._resolve_page_number(page)
            return self._cached(
                CacheKey(CacheKind.RECORDS_PER_PAGE, number),
                lambda: self._compute_records_per_page(number),
            )

    def _compute_records_per_page(self, number: int) -> Optional[int]:
        if self.page_index(number) is None:
            return None
        last = self.total_pages()
        if number == last:
            return self._reachable_records() - (last - 1) * self._page_size
        return self._page_size
