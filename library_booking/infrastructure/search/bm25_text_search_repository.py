"""
BM25-based implementation of the TextSearchRepository port.

BM25 (Best Match 25) scores documents by query term frequency, inverse
document frequency and document length normalization. The index covers
each book's title, author and ISBN.

Only books sharing at least one token with the query are returned. On
tiny catalogs BM25's IDF can be zero or negative for common terms, so
the score alone cannot tell a match from a miss.
"""

import logging
import re
import threading
from typing import Dict, List, Optional, Set
from uuid import UUID

import numpy as np
from rank_bm25 import BM25Okapi

from library_booking.domain.entities import Book
from library_booking.domain.ports import TextSearchRepository
from library_booking.domain.value_objects import SearchHit

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\w+")


class BM25TextSearchRepository(TextSearchRepository):
    """
    In-memory BM25 index over the catalog.

    BM25Okapi does not support incremental updates, so every upsert
    rebuilds the index from the stored tokenized corpus. Writes are
    serialized with a lock; searches read a consistent snapshot.
    """

    def __init__(self) -> None:
        self._index: Optional[BM25Okapi] = None
        self._book_ids: List[UUID] = []
        self._positions: Dict[UUID, int] = {}
        self._tokenized_corpus: List[List[str]] = []
        self._token_sets: List[Set[str]] = []
        self._built = False
        self._lock = threading.Lock()

    def build_index(self, books: List[Book]) -> None:
        """
        Build or rebuild the BM25 index from the full catalog.

        Raises:
            RuntimeError: If index building fails
        """
        with self._lock:
            snapshot = self._snapshot()
            try:
                self._book_ids = [book.id for book in books]
                self._positions = {book_id: i for i, book_id in enumerate(self._book_ids)}
                self._tokenized_corpus = [
                    self._tokenize(book.get_searchable_text()) for book in books
                ]
                self._rebuild()
            except Exception as e:
                self._restore(snapshot)
                raise RuntimeError(f"Failed to build BM25 index: {e}") from e

        logger.info(f"Built BM25 index over {len(self._book_ids)} books")

    def upsert(self, book: Book) -> None:
        """
        Add a book to the index or replace its indexed text.

        Raises:
            RuntimeError: If updating the index fails
        """
        tokens = self._tokenize(book.get_searchable_text())

        with self._lock:
            snapshot = self._snapshot()
            try:
                position = self._positions.get(book.id)
                if position is None:
                    self._positions[book.id] = len(self._book_ids)
                    self._book_ids.append(book.id)
                    self._tokenized_corpus.append(tokens)
                else:
                    self._tokenized_corpus[position] = tokens
                self._rebuild()
            except Exception as e:
                self._restore(snapshot)
                raise RuntimeError(f"Failed to index book {book.id}: {e}") from e

    def search(self, query_text: str) -> List[SearchHit]:
        """
        Rank the books matching the query.

        Returns:
            Hits ordered by BM25 score (descending); equal scores keep
            catalog order

        Raises:
            ValueError: If query_text is empty or blank
            RuntimeError: If search execution fails
        """
        if not query_text or not query_text.strip():
            raise ValueError("query_text cannot be empty")

        query_tokens = self._tokenize(query_text)

        with self._lock:
            index = self._index
            book_ids = list(self._book_ids)
            token_sets = list(self._token_sets)

        if index is None or not query_tokens:
            return []

        try:
            scores = np.asarray(index.get_scores(query_tokens), dtype=float)
            query_terms = set(query_tokens)
            matched = np.flatnonzero(
                [not query_terms.isdisjoint(doc_terms) for doc_terms in token_sets]
            )
            ranked = matched[np.argsort(-scores[matched], kind="stable")]
        except Exception as e:
            raise RuntimeError(f"BM25 search failed: {e}") from e

        return [SearchHit(book_id=book_ids[i], score=float(scores[i])) for i in ranked]

    def is_ready(self) -> bool:
        """Whether build_index has run (an empty catalog still counts as ready)."""
        return self._built

    def _rebuild(self) -> None:
        # Caller holds the lock
        token_sets = [set(tokens) for tokens in self._tokenized_corpus]
        # BM25Okapi divides by zero when no document has a single token
        index = BM25Okapi(self._tokenized_corpus) if any(self._tokenized_corpus) else None
        self._token_sets = token_sets
        self._index = index
        self._built = True

    def _snapshot(self) -> tuple:
        return (
            self._index,
            list(self._book_ids),
            dict(self._positions),
            [list(tokens) for tokens in self._tokenized_corpus],
            list(self._token_sets),
            self._built,
        )

    def _restore(self, snapshot: tuple) -> None:
        (
            self._index,
            self._book_ids,
            self._positions,
            self._tokenized_corpus,
            self._token_sets,
            self._built,
        ) = snapshot

    @staticmethod
    def _tokenize(text: str) -> List[str]:
        """Lowercase word tokens; punctuation (e.g. ISBN hyphens) splits tokens."""
        return _TOKEN_PATTERN.findall(text.lower())
