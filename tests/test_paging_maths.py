import threading

import pytest

from datacom_api.errors import InvalidArgument
from datacom_api.paging import CacheKey, CacheKind, PageMarker, PagingMaths


PAGE_SIZES = (1, 2, 3, 7, 50)
MAX_OFFSETS = (0, 1, 5, 10, 100)
TOTALS = (0, 1, 4, 5, 6, 99, 1000)


def _ceil_div(a, b):
    return a // b + (1 if a % b else 0)


def _configs():
    for page_size in PAGE_SIZES:
        for max_offset in MAX_OFFSETS:
            for total in TOTALS:
                yield page_size, max_offset, total


def test_defaults_match_documented_values():
    maths = PagingMaths()
    assert maths.page_size == 50
    assert maths.max_offset == 1_000_000
    assert maths.total_records == 100_000
    assert maths.total_pages() == 2000


def test_small_result_set_scenario():
    maths = PagingMaths(page_size=3, max_offset=100_000, total_records=5)

    assert maths.any_records() is True
    assert maths.total_pages() == 2
    assert maths.page_from_offset(0) == 1
    assert maths.page_from_offset(2) == 1
    assert maths.page_from_offset(3) == 2
    assert maths.page_from_offset(4) == 2
    assert maths.offset_from_page(1) == 0
    assert maths.offset_from_page(2) == 5


def test_no_records_scenario_returns_none_everywhere():
    maths = PagingMaths(page_size=3, max_offset=100_000, total_records=0)

    assert maths.any_records() is False
    assert maths.total_pages() == 0
    assert maths.page_index(1) is None
    assert maths.page_index("last") is None
    assert maths.page_from_offset(0) is None
    assert maths.offset_from_page(1) is None
    assert maths.records_per_page(1) is None


def test_no_records_suppresses_argument_errors():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=0)

    assert maths.page_index(0) is None
    assert maths.page_index(None) is None
    assert maths.page_from_offset(10_000) is None
    assert maths.offset_from_page(10_000) is None


@pytest.mark.parametrize("page_size,max_offset,total", list(_configs()))
def test_total_pages_follows_capped_ceiling_division(page_size, max_offset, total):
    maths = PagingMaths(page_size=page_size, max_offset=max_offset, total_records=total)

    if max_offset == 0 or total == 0:
        assert maths.any_records() is False
        assert maths.total_pages() == 0
    else:
        assert maths.any_records() is True
        assert maths.total_pages() == _ceil_div(min(total, max_offset), page_size)


@pytest.mark.parametrize("page_size,max_offset,total", [c for c in _configs() if c[1] and c[2]])
def test_page_boundaries_hold_for_every_config(page_size, max_offset, total):
    maths = PagingMaths(page_size=page_size, max_offset=max_offset, total_records=total)
    last = maths.total_pages()

    assert maths.page_from_offset(0) == 1
    assert maths.page_index("first") == 1
    assert maths.page_index("last") == last
    assert maths.page_index(last) == last
    assert maths.page_index(last + 1) is None
    assert maths.offset_from_page(last) == min(total, max_offset)
    assert maths.offset_from_page("last") == min(total, max_offset)
    for page in range(1, last):
        assert maths.offset_from_page(page) == (page - 1) * page_size
    assert sum(maths.records_per_page(page) for page in range(1, last + 1)) == min(total, max_offset)


def test_zero_page_size_means_no_records():
    maths = PagingMaths(page_size=0, max_offset=100, total_records=50)

    assert maths.any_records() is False
    assert maths.total_pages() == 0
    assert maths.page_from_offset(0) is None


def test_large_result_set_is_capped_by_max_offset():
    maths = PagingMaths(page_size=10, max_offset=25, total_records=100)

    assert maths.total_pages() == 3
    assert maths.offset_from_page(1) == 0
    assert maths.offset_from_page(2) == 10
    assert maths.offset_from_page(3) == 25
    assert [maths.records_per_page(page) for page in (1, 2, 3)] == [10, 10, 5]
    assert maths.records_per_page(4) is None


@pytest.mark.parametrize("page", [0, None])
def test_page_index_rejects_zero_and_none(page):
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)

    with pytest.raises(InvalidArgument) as excinfo:
        maths.page_index(page)
    assert excinfo.value.value == page
    assert excinfo.value.bound == 1


def test_page_index_rejects_negative_and_garbage():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)

    with pytest.raises(InvalidArgument):
        maths.page_index(-1)
    with pytest.raises(InvalidArgument):
        maths.page_index("middle")
    with pytest.raises(InvalidArgument):
        maths.page_index(True)


def test_page_index_accepts_markers_in_any_form():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=8)

    assert maths.page_index(PageMarker.FIRST) == 1
    assert maths.page_index(PageMarker.LAST) == 3
    assert maths.page_index(" LAST ") == 3
    assert maths.page_index("2") == 2


def test_page_from_offset_rejects_offsets_above_ceiling():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=50)

    assert maths.page_from_offset(10) == 4
    with pytest.raises(InvalidArgument) as excinfo:
        maths.page_from_offset(11)
    message = str(excinfo.value)
    assert "11" in message
    assert "10" in message
    assert excinfo.value.bound == 10


def test_page_from_offset_rejects_negative_offsets():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=50)

    with pytest.raises(InvalidArgument):
        maths.page_from_offset(-1)


def test_offset_from_page_bound_is_compared_against_max_offset():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=5)

    # Past the last page but within max_offset: no such page.
    assert maths.offset_from_page(10) is None
    with pytest.raises(InvalidArgument) as excinfo:
        maths.offset_from_page(11)
    assert "11" in str(excinfo.value)
    assert "10" in str(excinfo.value)


def test_offset_from_page_bound_applies_to_numeric_strings():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=5)

    assert maths.page_index("2") == 2
    assert maths.offset_from_page("1") == 0
    assert maths.offset_from_page("10") is None
    with pytest.raises(InvalidArgument) as excinfo:
        maths.offset_from_page("11")
    assert excinfo.value.bound == 10
    assert "11" in str(excinfo.value)


@pytest.mark.parametrize("method", ["page_from_offset", "offset_from_page", "records_per_page", "page_index"])
@pytest.mark.parametrize("argument", [[1], {"page": 1}, 1.5j])
def test_unhashable_or_odd_arguments_raise_invalid_argument(method, argument):
    maths = PagingMaths(page_size=3, max_offset=10, total_records=5)

    with pytest.raises(InvalidArgument):
        getattr(maths, method)(argument)
    assert maths.cached_keys() == (CacheKey(CacheKind.ANY_RECORDS),)


def test_offset_from_page_rejects_zero_and_none():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=5)

    with pytest.raises(InvalidArgument):
        maths.offset_from_page(0)
    with pytest.raises(InvalidArgument):
        maths.offset_from_page(None)


def test_offset_from_page_for_single_page_reports_total():
    maths = PagingMaths(page_size=50, max_offset=100_000, total_records=2)

    assert maths.total_pages() == 1
    assert maths.offset_from_page(1) == 2


def test_repeated_calls_hit_the_cache():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)

    first = (maths.total_pages(), maths.page_index(2), maths.page_from_offset(4), maths.offset_from_page(2))
    hits_before = maths.cache_hits
    misses_before = maths.cache_misses
    second = (maths.total_pages(), maths.page_index(2), maths.page_from_offset(4), maths.offset_from_page(2))

    assert first == second
    assert maths.cache_hits > hits_before
    assert maths.cache_misses == misses_before


def test_cache_entries_use_tagged_keys():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)
    maths.page_index(2)
    maths.page_from_offset(4)

    keys = maths.cached_keys()
    assert CacheKey(CacheKind.ANY_RECORDS) in keys
    assert CacheKey(CacheKind.TOTAL_PAGES) in keys
    assert CacheKey(CacheKind.PAGE_INDEX, 2) in keys
    assert CacheKey(CacheKind.PAGE_FROM_OFFSET, 4) in keys
    assert str(CacheKey(CacheKind.PAGE_INDEX, 7)) == "page_index:7"
    assert str(CacheKey(CacheKind.TOTAL_PAGES)) == "total_pages"


def test_failed_lookups_are_not_cached():
    maths = PagingMaths(page_size=3, max_offset=10, total_records=5)

    with pytest.raises(InvalidArgument):
        maths.page_from_offset(11)
    assert CacheKey(CacheKind.PAGE_FROM_OFFSET, 11) not in maths.cached_keys()


@pytest.mark.parametrize(
    "field,value,expected_pages",
    [
        ("page_size", 1, 5),
        ("max_offset", 4, 2),
        ("total_records", 10, 4),
    ],
)
def test_changing_configuration_invalidates_cache(field, value, expected_pages):
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)
    assert maths.total_pages() == 2
    assert maths.offset_from_page("last") == 5

    setattr(maths, field, value)

    assert maths.cached_keys() == ()
    assert maths.total_pages() == expected_pages
    assert maths.offset_from_page("last") == min(maths.total_records, maths.max_offset)


def test_emptying_result_set_after_use_returns_none():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)
    assert maths.page_index(1) == 1

    maths.total_records = 0

    assert maths.page_index(1) is None
    assert maths.total_pages() == 0


def test_setters_reject_negative_and_non_integer_values():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)

    with pytest.raises(InvalidArgument):
        maths.page_size = -1
    with pytest.raises(InvalidArgument):
        maths.max_offset = "10"
    with pytest.raises(InvalidArgument):
        PagingMaths(total_records=-5)
    assert maths.page_size == 3


def test_clear_cache_keeps_configuration():
    maths = PagingMaths(page_size=3, max_offset=100, total_records=5)
    maths.total_pages()

    maths.clear_cache()

    assert maths.cached_keys() == ()
    assert maths.total_pages() == 2


def test_concurrent_mutation_never_serves_stale_answers():
    maths = PagingMaths(page_size=1, max_offset=1_000_000, total_records=1)
    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            with maths._lock:
                expected = maths.total_records
                got = maths.total_pages()
            if got != expected:
                errors.append((expected, got))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for total in range(2, 400):
        maths.total_records = total
    stop.set()
    for thread in threads:
        thread.join()

    assert errors == []
    assert maths.total_pages() == 399
