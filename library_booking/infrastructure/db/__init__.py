"""
SQLite adapters for the repository ports.

- SqliteBookRepository: books, with a UNIQUE ISBN constraint
- SqliteCategoryRepository: (category_name, book_id) memberships
- SqliteBookingRepository: bookings, listed most recently updated first
"""

from .sqlite_book_repository import SqliteBookRepository
from .sqlite_booking_repository import SqliteBookingRepository
from .sqlite_category_repository import SqliteCategoryRepository

__all__ = [
    "SqliteBookRepository",
    "SqliteBookingRepository",
    "SqliteCategoryRepository",
]
