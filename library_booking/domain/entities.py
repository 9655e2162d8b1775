"""
Domain entities for the library booking system.

Entities are objects with a unique identity that runs through time and
different representations. Books and bookings are persisted; the book
profile is a read model assembled on demand from a book and its
category memberships.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from typing import Optional, List
from uuid import UUID

from .utils.uuid7 import uuid7


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BookingStatus(str, Enum):
    """
    Lifecycle states of a booking.

    No transition graph is enforced: an update may move a booking from
    any status to any other.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


@dataclass
class Book:
    """
    Represents a book in the catalog.

    The ISBN is unique across the catalog and never changes after the
    book is created. Title and author are overwritten as a pair on
    update, so either may end up as None.
    """

    id: UUID
    """Unique identifier for this book in our system"""

    isbn: str
    """International Standard Book Number (case-sensitive, unique)"""

    title: Optional[str] = None
    """Book title"""

    author: Optional[str] = None
    """Author name"""

    created_at: datetime = field(default_factory=_utcnow)
    """When this book was added to our catalog"""

    updated_at: datetime = field(default_factory=_utcnow)
    """When this book was last updated"""

    def __post_init__(self) -> None:
        """Validate book data."""
        if not self.isbn or not self.isbn.strip():
            raise ValueError("Book ISBN cannot be empty")

    def __eq__(self, other: object) -> bool:
        """Two books are equal if they have the same ID."""
        if not isinstance(other, Book):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on book ID."""
        return hash(self.id)

    def get_searchable_text(self) -> str:
        """Text indexed for full-text search: title, author and ISBN."""
        parts = [part for part in (self.title, self.author, self.isbn) if part]
        return " ".join(parts)

    def overwrite_details(self, title: Optional[str], author: Optional[str]) -> None:
        """Replace title and author, absent values included."""
        self.title = title
        self.author = author
        self.updated_at = _utcnow()

    @staticmethod
    def create_new(isbn: str, title: Optional[str] = None, author: Optional[str] = None) -> "Book":
        """
        Factory method to create a new book with auto-generated ID.

        Args:
            isbn: Book ISBN
            title: Book title
            author: Author name

        Returns:
            A new Book instance with a generated UUIDv7
        """
        return Book(id=uuid7(), isbn=isbn, title=title, author=author)


@dataclass(frozen=True)
class CategoryMembership:
    """A single (category_name, book_id) association."""

    category_name: str
    book_id: UUID

    def __post_init__(self) -> None:
        if not self.category_name or not self.category_name.strip():
            raise ValueError("category_name cannot be empty")


@dataclass(frozen=True)
class BookProfile:
    """
    Read model combining a book with the categories it belongs to.

    Timestamps are deliberately not part of the profile.
    """

    id: UUID
    isbn: str
    title: Optional[str]
    author: Optional[str]
    categories: List[str] = field(default_factory=list)

    @staticmethod
    def from_book(book: Book, categories: List[str]) -> "BookProfile":
        """Merge a book with its category names (sorted, deduplicated)."""
        return BookProfile(
            id=book.id,
            isbn=book.isbn,
            title=book.title,
            author=book.author,
            categories=sorted(set(categories)),
        )


@dataclass
class Booking:
    """
    A user's request to reserve copies of a book.

    user_id and book_id never change after creation. quantity and status
    are replaced as a pair by updates, so either may be None when the
    caller omitted it.
    """

    id: UUID
    """Unique identifier for this booking"""

    user_id: str
    """Identity of the user who created the booking"""

    book_id: UUID
    """The booked book"""

    quantity: Optional[int] = None
    """Number of copies requested"""

    status: Optional[BookingStatus] = BookingStatus.PENDING
    """Current lifecycle status"""

    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate booking data."""
        if not self.user_id:
            raise ValueError("Booking must have a user_id")

        if self.quantity is not None and self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Booking):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def overwrite(self, quantity: Optional[int], status: Optional[BookingStatus]) -> None:
        """Replace quantity and status unconditionally."""
        if quantity is not None and quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        self.quantity = quantity
        self.status = status
        self.updated_at = _utcnow()

    @staticmethod
    def create_pending(user_id: str, book_id: UUID, quantity: int) -> "Booking":
        """Create a new booking in the pending state."""
        return Booking(
            id=uuid7(),
            user_id=user_id,
            book_id=book_id,
            quantity=quantity,
            status=BookingStatus.PENDING,
        )
