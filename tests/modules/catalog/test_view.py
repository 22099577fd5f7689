"""Tests for catalog search, filtering and pagination."""

from bookcatalog.modules.book.schemas import BookStatus
from bookcatalog.modules.catalog.view import (
    PAGE_SIZE,
    CatalogView,
    filter_books,
    genre_options,
    paginate,
    total_pages,
)


def test_search_matches_title_or_author_case_insensitively(make_book):
    books = [
        make_book(1, title="Dune", author="Frank Herbert"),
        make_book(2, title="Emma", author="Jane Austen"),
        make_book(3, title="Children of Dune", author="Frank Herbert"),
    ]

    assert [b.id for b in filter_books(books, search="dune")] == ["book-1", "book-3"]
    assert [b.id for b in filter_books(books, search="AUSTEN")] == ["book-2"]
    assert filter_books(books, search="") == books


def test_search_does_not_match_genre(make_book):
    books = [make_book(1, title="Dune", genre="Science Fiction")]

    assert filter_books(books, search="science") == []


def test_genre_and_status_filters_combine(make_book):
    books = [
        make_book(1, genre="Fantasy", status=BookStatus.AVAILABLE),
        make_book(2, genre="Fantasy", status=BookStatus.ISSUED),
        make_book(3, genre="Classic", status=BookStatus.ISSUED),
    ]

    assert [b.id for b in filter_books(books, genre="Fantasy")] == ["book-1", "book-2"]
    assert [b.id for b in filter_books(books, status="Issued")] == ["book-2", "book-3"]
    assert [b.id for b in filter_books(books, genre="Fantasy", status=BookStatus.ISSUED)] == ["book-2"]


def test_genre_filter_is_exact(make_book):
    books = [make_book(1, genre="Fantasy")]

    assert filter_books(books, genre="fantasy") == []


def test_total_pages_never_below_one():
    assert total_pages(0) == 1
    assert total_pages(10) == 1
    assert total_pages(11) == 2
    assert total_pages(25) == 3


def test_paginate_slices_pages(make_book):
    books = [make_book(i) for i in range(25)]

    third = paginate(books, 3)

    assert third.page == 3
    assert third.total_pages == 3
    assert third.total == 25
    assert [b.id for b in third.items] == [f"book-{i}" for i in range(20, 25)]
    assert third.has_previous
    assert not third.has_next


def test_paginate_clamps_out_of_range_page(make_book):
    books = [make_book(i) for i in range(5)]

    assert paginate(books, 7).page == 1
    assert paginate(books, 0).page == 1
    assert paginate([], 3).items == []


def test_genre_options_distinct_in_first_seen_order(make_book):
    books = [make_book(1, genre="Fantasy"), make_book(2, genre="Classic"), make_book(3, genre="Fantasy")]

    assert genre_options(books) == ["Fantasy", "Classic"]


def test_filter_change_resets_page(make_book):
    books = [make_book(i, title=f"Book {i}", genre="Fantasy" if i % 2 else "Classic") for i in range(30)]
    view = CatalogView()

    view.set_page(3)
    assert view.render(books).page == 3

    view.set_search("book")
    assert view.filters.page == 1

    view.set_page(2)
    view.set_genre("Fantasy")
    assert view.filters.page == 1

    view.set_page(2)
    view.set_status(BookStatus.ISSUED)
    assert view.filters.page == 1
    assert view.filters.status == "Issued"


def test_render_lists_genres_of_whole_collection(make_book):
    books = [make_book(1, genre="Fantasy"), make_book(2, genre="Classic", title="Other")]
    view = CatalogView()
    view.set_search("other")

    page = view.render(books)

    assert [b.id for b in page.items] == ["book-2"]
    assert page.genres == ["Fantasy", "Classic"]


def test_default_page_size():
    assert PAGE_SIZE == 10
    assert CatalogView().page_size == 10


def test_filtering_twice_gives_the_same_result(make_book):
    books = [
        make_book(1, title="Dune", author="Frank Herbert", genre="Science Fiction", status=BookStatus.AVAILABLE),
        make_book(2, title="Children of Dune", author="Frank Herbert", genre="Science Fiction", status=BookStatus.ISSUED),
        make_book(3, title="Dune Messiah", author="Frank Herbert", genre="Science Fiction", status=BookStatus.ISSUED),
        make_book(4, title="The Dune Encyclopedia", author="Willis McNelly", genre="Reference", status=BookStatus.ISSUED),
        make_book(5, title="Emma", author="Jane Austen", genre="Romance", status=BookStatus.ISSUED),
    ]
    criteria = {"search": "dune", "genre": "Science Fiction", "status": "Issued"}

    once = filter_books(books, **criteria)

    assert [b.id for b in once] == ["book-2", "book-3"]
    assert filter_books(once, **criteria) == once
