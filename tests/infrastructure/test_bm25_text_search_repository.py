"""
Tests for BM25TextSearchRepository.

Uses real rank_bm25 scoring over small hand-built catalogs.
"""

import pytest

from library_booking.domain.entities import Book
from library_booking.infrastructure.search import BM25TextSearchRepository


@pytest.fixture
def books():
    return [
        Book.create_new(isbn="111", title="Python Programming", author="Guido Rossum"),
        Book.create_new(isbn="222", title="Cooking with Python Snakes", author="Jane Doe"),
        Book.create_new(isbn="333", title="Gardening Basics", author="Alan Green"),
    ]


@pytest.fixture
def repo(books):
    index = BM25TextSearchRepository()
    index.build_index(books)
    return index


class TestReadiness:

    def test_not_ready_before_build(self):
        assert BM25TextSearchRepository().is_ready() is False

    def test_ready_after_build_even_when_empty(self):
        index = BM25TextSearchRepository()
        index.build_index([])

        assert index.is_ready() is True
        assert index.search("anything") == []


class TestSearch:

    def test_returns_only_matching_books(self, repo, books):
        hits = repo.search("gardening")

        assert [hit.book_id for hit in hits] == [books[2].id]

    def test_no_match_returns_empty(self, repo):
        assert repo.search("astronomy") == []

    def test_is_case_insensitive(self, repo, books):
        assert [hit.book_id for hit in repo.search("GARDENING")] == [books[2].id]

    def test_ranks_by_descending_score(self, repo, books):
        hits = repo.search("python programming")

        assert [hit.book_id for hit in hits] == [books[0].id, books[1].id]
        assert hits[0].score > hits[1].score

    def test_matches_author_and_isbn(self, repo, books):
        assert [hit.book_id for hit in repo.search("Rossum")] == [books[0].id]
        assert [hit.book_id for hit in repo.search("333")] == [books[2].id]

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_raises(self, repo, query):
        with pytest.raises(ValueError, match="cannot be empty"):
            repo.search(query)

    def test_punctuation_only_query_matches_nothing(self, repo):
        assert repo.search("!!!") == []


class TestUpsert:

    def test_new_book_becomes_searchable(self, repo):
        book = Book.create_new(isbn="444", title="Astronomy Today", author="Carl Sagan")

        repo.upsert(book)

        assert [hit.book_id for hit in repo.search("astronomy")] == [book.id]

    def test_updated_book_replaces_old_text(self, repo, books):
        gardening = books[2]
        gardening.overwrite_details(title="Beekeeping Basics", author="Alan Green")

        repo.upsert(gardening)

        assert repo.search("gardening") == []
        assert [hit.book_id for hit in repo.search("beekeeping")] == [gardening.id]

    def test_upsert_on_unbuilt_index_builds_it(self):
        index = BM25TextSearchRepository()
        book = Book.create_new(isbn="555", title="Solo")

        index.upsert(book)

        assert index.is_ready() is True
        assert [hit.book_id for hit in index.search("solo")] == [book.id]


class TestTokenlessBooks:

    def test_build_over_only_tokenless_books(self):
        index = BM25TextSearchRepository()

        index.build_index([Book.create_new(isbn="---", title="!", author="?")])

        assert index.is_ready() is True
        assert index.search("anything") == []

    def test_upsert_tokenless_book_into_empty_index(self):
        index = BM25TextSearchRepository()
        index.build_index([])

        index.upsert(Book.create_new(isbn="---", title="!", author="?"))

        assert index.search("anything") == []

    def test_tokenless_book_does_not_hide_others(self, repo, books):
        repo.upsert(Book.create_new(isbn="---", title="!", author="?"))

        assert [hit.book_id for hit in repo.search("gardening")] == [books[2].id]


class TestFailedRebuild:

    def test_failed_upsert_leaves_index_untouched(self, repo, books, monkeypatch):
        def broken_bm25(corpus):
            raise ZeroDivisionError("division by zero")

        monkeypatch.setattr(
            "library_booking.infrastructure.search.bm25_text_search_repository.BM25Okapi",
            broken_bm25,
        )
        newcomer = Book.create_new(isbn="444", title="Astronomy Today")

        with pytest.raises(RuntimeError, match="Failed to index book"):
            repo.upsert(newcomer)

        monkeypatch.undo()
        assert repo.search("astronomy") == []
        assert [hit.book_id for hit in repo.search("gardening")] == [books[2].id]

        repo.upsert(newcomer)
        assert [hit.book_id for hit in repo.search("astronomy")] == [newcomer.id]

    def test_failed_build_keeps_previous_index(self, repo, books, monkeypatch):
        def broken_bm25(corpus):
            raise ValueError("bad corpus")

        monkeypatch.setattr(
            "library_booking.infrastructure.search.bm25_text_search_repository.BM25Okapi",
            broken_bm25,
        )

        with pytest.raises(RuntimeError, match="Failed to build BM25 index"):
            repo.build_index([Book.create_new(isbn="999", title="Replacement")])

        assert [hit.book_id for hit in repo.search("gardening")] == [books[2].id]
