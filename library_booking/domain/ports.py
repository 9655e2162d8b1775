"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
The domain services depend only on these protocols; the SQLite and BM25
adapters in the infrastructure layer implement them.

Every call on a port is a potential blocking I/O operation. Adapters must
be safe to call from several threads at once, since profile resolution
fans out over a thread pool.
"""

from typing import Protocol, List, Optional
from uuid import UUID

from .entities import Book, Booking, CategoryMembership
from .value_objects import SearchHit


class BookRepository(Protocol):
    """
    Port for persisting and retrieving books.

    Implementations should handle:
    - Unique constraint on ISBN
    - Translating database errors into ValueError (constraint violation)
      or RuntimeError (anything else)
    """

    def save(self, book: Book) -> None:
        """
        Insert or update a book.

        Args:
            book: The book entity to persist

        Raises:
            ValueError: If the book violates catalog constraints (duplicate ISBN)
            RuntimeError: If a database error occurs
        """
        ...

    def get_by_id(self, book_id: UUID) -> Optional[Book]:
        """
        Retrieve a book by its ID.

        Returns:
            The Book entity if found, None otherwise
        """
        ...

    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        """
        Retrieve a book by exact (case-sensitive) ISBN.

        Returns:
            The Book entity if found, None otherwise
        """
        ...

    def list_ids(self) -> List[UUID]:
        """Return the distinct IDs of all books in the catalog."""
        ...

    def get_all(self) -> List[Book]:
        """Retrieve every book in the catalog."""
        ...

    def count(self) -> int:
        """Get the total number of books in the catalog."""
        ...


class CategoryRepository(Protocol):
    """
    Port for category membership records.

    A membership is either present or absent; adding an existing one and
    removing a missing one are both no-ops.
    """

    def add(self, membership: CategoryMembership) -> None:
        """Record that a book belongs to a category (idempotent)."""
        ...

    def remove(self, membership: CategoryMembership) -> None:
        """Delete the membership if present (idempotent)."""
        ...

    def category_names_for_book(self, book_id: UUID) -> List[str]:
        """Distinct category names the book belongs to, in no particular order."""
        ...

    def book_ids_in_category(self, category_name: str) -> List[UUID]:
        """Distinct IDs of the books that belong to the category."""
        ...


class BookingRepository(Protocol):
    """Port for persisting and querying bookings."""

    def save(self, booking: Booking) -> None:
        """
        Insert or update a booking.

        Raises:
            RuntimeError: If a database error occurs
        """
        ...

    def get_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """
        Retrieve a booking by its ID.

        Returns:
            The Booking entity if found, None otherwise
        """
        ...

    def find(
        self,
        user_id: Optional[str] = None,
        book_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        """
        Find bookings matching every given filter.

        None means "no restriction". status is compared verbatim against
        the stored value, so an unknown status simply matches nothing.

        Returns:
            Matching bookings, most recently updated first
        """
        ...


class TextSearchRepository(Protocol):
    """
    Port for relevance-ranked full-text search over books.

    The ranking algorithm is a black box to the domain: given a query,
    the port returns matching book IDs ordered by descending score.
    """

    def build_index(self, books: List[Book]) -> None:
        """
        Build or rebuild the index from the full catalog.

        Raises:
            RuntimeError: If index building fails
        """
        ...

    def upsert(self, book: Book) -> None:
        """
        Add a book to the index, replacing any previous version of it.

        Raises:
            RuntimeError: If updating the index fails
        """
        ...

    def search(self, query_text: str) -> List[SearchHit]:
        """
        Search the index.

        Args:
            query_text: Non-blank query string

        Returns:
            Hits for matching books only, ordered by descending score

        Raises:
            ValueError: If query_text is empty or blank
            RuntimeError: If search execution fails
        """
        ...

    def is_ready(self) -> bool:
        """Whether the index has been built (health checks)."""
        ...
