"""
Domain service for the book catalog.

The catalog owns books and their category memberships. Its central use
case is resolving book IDs into book profiles: each profile needs two
datastore reads (the book, then its category names), and listings need
one profile per book, so listings fan the per-book resolutions out over
a thread pool and join on all of them before answering.

Failure semantics of the fan-out:
- Any single failed resolution fails the whole listing
- Resolutions that have not started yet are cancelled, results of the
  ones already running are discarded
- Output order follows the requested IDs, never completion order
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional
from uuid import UUID

from library_booking.domain.entities import Book, BookProfile, CategoryMembership
from library_booking.domain.errors import ConflictError, NotFoundError
from library_booking.domain.ports import (
    BookRepository,
    CategoryRepository,
    TextSearchRepository,
)
from library_booking.domain.value_objects import CallerContext

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Orchestrates catalog reads and writes over the repository ports.

    Usage:
        service = CatalogService(
            book_repo=sqlite_books,
            category_repo=sqlite_categories,
            text_search=bm25_repo,
        )
        profiles = service.list_all_profiles()
    """

    def __init__(
        self,
        book_repo: BookRepository,
        category_repo: CategoryRepository,
        text_search: TextSearchRepository,
        max_workers: int = 8,
    ) -> None:
        """
        Initialize the catalog service.

        Args:
            book_repo: Repository for book records
            category_repo: Repository for category memberships
            text_search: Full-text search index over books
            max_workers: Upper bound on concurrent profile resolutions
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self._books = book_repo
        self._categories = category_repo
        self._text_search = text_search
        self._max_workers = max_workers

    def get_health_status(self) -> Dict[str, bool]:
        """
        Check the readiness of the catalog's collaborators.

        Returns:
            {"datastore": bool, "text_search": bool, "overall": bool}
        """
        try:
            self._books.count()
            datastore_ready = True
        except RuntimeError as e:
            logger.warning(f"Datastore health check failed: {e}")
            datastore_ready = False

        text_search_ready = self._text_search.is_ready()

        return {
            "datastore": datastore_ready,
            "text_search": text_search_ready,
            "overall": datastore_ready and text_search_ready,
        }

    # ------------------------------------------------------------------
    # Profile resolution
    # ------------------------------------------------------------------

    def get_book(self, book_id: UUID) -> Book:
        """
        Fetch a book or fail.

        Raises:
            NotFoundError: If the book does not exist
        """
        book = self._books.get_by_id(book_id)
        if book is None:
            raise NotFoundError("book not found")
        return book

    def resolve_profile(self, book_id: UUID) -> BookProfile:
        """
        Resolve a single book into its profile.

        Raises:
            NotFoundError: If the book does not exist
        """
        book = self.get_book(book_id)
        categories = self._categories.category_names_for_book(book.id)
        return BookProfile.from_book(book, categories)

    def resolve_profiles(self, book_ids: List[UUID]) -> List[BookProfile]:
        """
        Resolve many books concurrently.

        Args:
            book_ids: IDs to resolve; the output follows this order

        Returns:
            One profile per requested ID

        Raises:
            Whatever the first failed resolution raised; partial results
            are discarded
        """
        if not book_ids:
            return []

        logger.debug(f"Resolving {len(book_ids)} book profiles")

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(book_ids)),
            thread_name_prefix="profile",
        )
        try:
            futures: Dict[Future, UUID] = {
                executor.submit(self.resolve_profile, book_id): book_id
                for book_id in book_ids
            }
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)

            for future in done:
                error = future.exception()
                if error is not None:
                    logger.warning(
                        f"Profile resolution failed for book_id={futures[future]}: {error}"
                    )
                    raise error

            resolved = {futures[future]: future.result() for future in done}
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return [resolved[book_id] for book_id in book_ids]

    def list_all_profiles(self) -> List[BookProfile]:
        """Profiles of every book in the catalog."""
        return self.resolve_profiles(self._books.list_ids())

    def list_category_profiles(self, category_name: str) -> List[BookProfile]:
        """Profiles of every book that belongs to the category."""
        return self.resolve_profiles(self._categories.book_ids_in_category(category_name))

    def search_profiles(self, query: Optional[str]) -> List[BookProfile]:
        """
        Full-text search over the catalog.

        A blank query matches nothing and never reaches the search index.

        Returns:
            Profiles of the matching books, most relevant first
        """
        if query is None or not query.strip():
            return []

        hits = self._text_search.search(query)
        logger.debug(f"Search '{query}' matched {len(hits)} books")
        return self.resolve_profiles([hit.book_id for hit in hits])

    # ------------------------------------------------------------------
    # Catalog mutations (moderators only)
    # ------------------------------------------------------------------

    def create_book(
        self,
        caller: CallerContext,
        title: Optional[str],
        author: Optional[str],
        isbn: str,
    ) -> UUID:
        """
        Add a new book to the catalog.

        Returns:
            The new book's ID

        Raises:
            ForbiddenError: If the caller is not a moderator
            ConflictError: If a book with the same ISBN already exists
        """
        caller.require_moderator()

        if self._books.get_by_isbn(isbn) is not None:
            raise ConflictError("book already in collection")

        book = Book.create_new(isbn=isbn, title=title, author=author)
        try:
            self._books.save(book)
        except ValueError as e:
            # A concurrent create won the race on the ISBN constraint
            raise ConflictError("book already in collection") from e

        self._text_search.upsert(book)
        logger.info(f"Created book id={book.id} isbn={book.isbn}")
        return book.id

    def update_book(
        self,
        caller: CallerContext,
        book_id: UUID,
        title: Optional[str],
        author: Optional[str],
    ) -> UUID:
        """
        Overwrite a book's title and author.

        Both fields are replaced even when None. The ISBN is never touched.

        Raises:
            ForbiddenError: If the caller is not a moderator
            NotFoundError: If the book does not exist
        """
        caller.require_moderator()

        book = self.get_book(book_id)
        book.overwrite_details(title=title, author=author)
        self._books.save(book)

        self._text_search.upsert(book)
        logger.info(f"Updated book id={book.id}")
        return book.id

    def add_to_category(self, caller: CallerContext, book_id: UUID, category_name: str) -> None:
        """
        Put a book in a category. Adding an existing membership is a no-op.

        Raises:
            ForbiddenError: If the caller is not a moderator
            NotFoundError: If the book does not exist
        """
        caller.require_moderator()
        self.get_book(book_id)
        self._categories.add(CategoryMembership(category_name=category_name, book_id=book_id))

    def remove_from_category(self, caller: CallerContext, book_id: UUID, category_name: str) -> None:
        """
        Take a book out of a category. Removing a missing membership is a no-op.

        Raises:
            ForbiddenError: If the caller is not a moderator
            NotFoundError: If the book does not exist
        """
        caller.require_moderator()
        self.get_book(book_id)
        self._categories.remove(CategoryMembership(category_name=category_name, book_id=book_id))
