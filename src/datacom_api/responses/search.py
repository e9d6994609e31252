from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple

from datacom_api.errors import InvalidArgument, WebserviceError
from datacom_api.paging.maths import PageArgument, PagingMaths
from datacom_api.util.logging import log_structured_event, new_search_id

LOG = logging.getLogger(__name__)


class SearchBase(object):
    """
    A lazy, restartable view over one paged search
    ==============================================

    Searches are created by the client, you will not need to build one
    by hand:

        >>> search = client.search_contact(company_name="Acme")
        >>> search.size
        1234
        >>> for contact, index in search.iter_with_index():
        ...     print(index, contact["lastname"])

    The page size is copied from the client when the search is created
    and never changes afterwards, even if the client's setting does.
    The total size is read from the first response that carries it and
    kept from then on.

    Pages are fetched one at a time, at offsets 0, page_size,
    2 * page_size and so on, until a short page comes back, the total
    has been seen, or the next offset is past L{real_max_offset}.
    """

    PATH: Optional[str] = None
    RECORDS_KEY = "records"
    TOTAL_HITS_KEY = "totalHits"

    def __init__(self, client, options: Optional[Mapping[str, Any]] = None) -> None:
        self.client = client
        self._options = MappingProxyType(dict(options or {}))
        # Cache page size, it MUST NOT change between requests
        self._page_size = int(client.page_size)
        self._max_offset = int(client.max_offset)
        self._size: Optional[int] = None
        self._size_lock = threading.Lock()
        self._real_max_offset: Optional[int] = None
        self._paging_maths: Optional[PagingMaths] = None
        self.search_id = new_search_id(self.PATH or self.__class__.__name__)

    def __repr__(self) -> str:
        return "<%s page_size=%d size=%s>" % (
            self.__class__.__name__,
            self._page_size,
            "?" if self._size is None else self._size,
        )

    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def max_offset(self) -> int:
        return self._max_offset

    def _log_event(self, event: str, **fields) -> None:
        if not LOG.isEnabledFor(logging.DEBUG):
            return
        log_structured_event(LOG, logging.DEBUG, event, search_id=self.search_id, path=self.PATH, **fields)

    def perform_request(self, params: Mapping[str, Any]) -> Mapping[str, Any]:
        return self.client.perform_request(self.PATH, params)

    def _observe_size(self, response: Mapping[str, Any]) -> None:
        if self._size is not None:
            return
        raw = response.get(self.TOTAL_HITS_KEY) if isinstance(response, Mapping) else None
        if raw is None:
            return
        with self._size_lock:
            if self._size is None:
                self._size = int(raw)
                self._log_event("search_size_observed", size=self._size)

    @property
    def size(self) -> int:
        """
        The total number of matching records
        ====================================

        The first access makes one count-only request (offset 0, the
        client's size-only page size) unless an earlier page already
        reported the total.
        """
        if self._size is not None:
            return self._size
        params = dict(self._options)
        params.update(offset=0, page_size=self.client.size_only_page_size)
        self._observe_size(self.perform_request(params))
        if self._size is None:
            raise WebserviceError("Count response carries no %s field" % self.TOTAL_HITS_KEY)
        return self._size

    @property
    def real_max_offset(self) -> int:
        """The largest page-aligned offset the service will accept."""
        if self._real_max_offset is None:
            self._require_page_size()
            self._real_max_offset = self._max_offset - (self._max_offset % self._page_size)
        return self._real_max_offset

    @property
    def max_size(self) -> int:
        return self.real_max_offset + self._page_size

    @property
    def real_size(self) -> int:
        size = self.size
        return self.max_size if size > self.real_max_offset else size

    def max_records_reachable(self) -> int:
        return self.max_size

    def effective_size(self) -> int:
        return self.real_size

    def _require_page_size(self) -> None:
        if self._page_size <= 0:
            raise InvalidArgument(
                f"page_size must be > 0 to page through results, received {self._page_size}",
                value=self._page_size,
                bound=1,
            )

    @property
    def paging_maths(self) -> PagingMaths:
        if self._paging_maths is None:
            self._require_page_size()
            self._paging_maths = PagingMaths(
                page_size=self._page_size,
                max_offset=self._max_offset,
                total_records=self.size,
            )
        return self._paging_maths

    @property
    def total_pages(self) -> int:
        return self.paging_maths.total_pages()

    def transform_request(self, response: Mapping[str, Any]) -> List[Any]:
        records = response.get(self.RECORDS_KEY) if isinstance(response, Mapping) else None
        return list(records or [])

    def at_offset(self, offset: int) -> List[Any]:
        params = dict(self._options)
        params.update(offset=offset, page_size=self._page_size)
        response = self.perform_request(params)
        self._observe_size(response)
        records = self.transform_request(response)
        self._log_event(
            "search_page_fetched",
            offset=offset,
            page_size=self._page_size,
            records=len(records),
        )
        return records

    page_at = at_offset

    def page(self, index: PageArgument) -> List[Any]:
        """
        Return the records of one page
        ==============================

        Pages are numbered from 1; "first" and "last" are accepted too.
        A page past the end, or any page of an empty search, is empty.

        @raise InvalidArgument: for page 0 or None
        """
        number = self.paging_maths.page_index(index)
        if number is None:
            return []
        return self.at_offset((number - 1) * self._page_size)

    def iter_with_index(self) -> Iterator[Tuple[Any, int]]:
        self._require_page_size()
        real_max_offset = self.real_max_offset
        total_records = 0
        current_offset = 0

        while current_offset <= real_max_offset:
            records = self.at_offset(current_offset)

            for index, record in enumerate(records):
                yield record, current_offset + index

            records_per_previous_page = len(records)
            current_offset += self._page_size
            total_records += records_per_previous_page

            if records_per_previous_page != self._page_size or total_records == self.size:
                break

    def each_with_index(self, visitor: Callable[[Any, int], Any]) -> None:
        for record, index in self.iter_with_index():
            visitor(record, index)

    for_each = each_with_index

    def __iter__(self) -> Iterator[Any]:
        for record, _ in self.iter_with_index():
            yield record

    def all(self) -> List[Any]:
        """
        Load every reachable record into a list
        =======================================

        This holds the whole result set in memory: check L{real_size}
        before calling it on a large search. The list always has
        L{real_size} slots: records past that point, served because the
        result set grew after it was counted, are not fetched.
        """
        all_records: List[Any] = [None] * self.real_size
        for record, index in self.iter_with_index():
            if index >= len(all_records):
                break
            all_records[index] = record
        return all_records

    to_list = all


class SearchContact(SearchBase):
    PATH = "searchContact.json"
    RECORDS_KEY = "contacts"


class SearchCompany(SearchBase):
    PATH = "searchCompany.json"
    RECORDS_KEY = "companies"
