"""
Domain layer - Core business logic and entities.

This layer contains the business entities, value objects and errors, and
defines the ports (interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Book, BookProfile, Booking, BookingStatus, CategoryMembership
from .errors import ConflictError, ForbiddenError, InternalError, LibraryError, NotFoundError
from .value_objects import CallerContext, SearchHit

__all__ = [
    # Entities
    "Book",
    "BookProfile",
    "Booking",
    "BookingStatus",
    "CategoryMembership",
    # Value Objects
    "CallerContext",
    "SearchHit",
    # Errors
    "LibraryError",
    "NotFoundError",
    "ConflictError",
    "ForbiddenError",
    "InternalError",
]
