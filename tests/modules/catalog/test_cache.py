"""Tests for the query cache."""

from bookcatalog.modules.catalog.cache import BOOKS_QUERY_KEY, QueryCache


def test_get_missing_key_returns_none():
    cache = QueryCache()

    assert cache.get(BOOKS_QUERY_KEY) is None
    assert BOOKS_QUERY_KEY not in cache


def test_set_then_get(make_book):
    cache = QueryCache()
    books = [make_book(1)]

    cache.set(BOOKS_QUERY_KEY, books)

    assert cache.get(BOOKS_QUERY_KEY) is books
    assert BOOKS_QUERY_KEY in cache


def test_invalidate_drops_value_and_bumps_generation(make_book):
    cache = QueryCache()
    cache.set(BOOKS_QUERY_KEY, [make_book(1)])

    cache.invalidate(BOOKS_QUERY_KEY)

    assert cache.get(BOOKS_QUERY_KEY) is None
    assert cache.generation(BOOKS_QUERY_KEY) == 1


def test_invalidate_unknown_key_is_harmless():
    cache = QueryCache()

    cache.invalidate(("other",))

    assert cache.generation(("other",)) == 1
    assert cache.generation(BOOKS_QUERY_KEY) == 0
