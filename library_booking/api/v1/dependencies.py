"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of repositories and services
for use with FastAPI's Depends() system, and turns the identity headers
set by the upstream authentication layer into a CallerContext.

Note: We use module-level singletons instead of @lru_cache with Depends()
parameters, which is an antipattern that can cause unexpected behavior.
"""

import os
from pathlib import Path
from typing import Optional

from fastapi import Header, HTTPException, status

from library_booking.domain.ports import (
    BookRepository,
    BookingRepository,
    CategoryRepository,
    TextSearchRepository,
)
from library_booking.domain.services import BookingService, CatalogService
from library_booking.domain.value_objects import CallerContext
from library_booking.infrastructure.db import (
    SqliteBookRepository,
    SqliteBookingRepository,
    SqliteCategoryRepository,
)
from library_booking.infrastructure.search import BM25TextSearchRepository

# Configuration from environment
DB_PATH = Path(os.getenv("DB_PATH", "data/library.db"))
PROFILE_WORKERS = int(os.getenv("PROFILE_WORKERS", "8"))

# Module-level singletons (initialized lazily)
_book_repository: Optional[BookRepository] = None
_category_repository: Optional[CategoryRepository] = None
_booking_repository: Optional[BookingRepository] = None
_text_search: Optional[TextSearchRepository] = None
_catalog_service: Optional[CatalogService] = None
_booking_service: Optional[BookingService] = None


def get_book_repository() -> BookRepository:
    """Provide a singleton instance of the book repository."""
    global _book_repository
    if _book_repository is None:
        _book_repository = SqliteBookRepository(DB_PATH)
    return _book_repository


def get_category_repository() -> CategoryRepository:
    """Provide a singleton instance of the category repository."""
    global _category_repository
    if _category_repository is None:
        _category_repository = SqliteCategoryRepository(DB_PATH)
    return _category_repository


def get_booking_repository() -> BookingRepository:
    """Provide a singleton instance of the booking repository."""
    global _booking_repository
    if _booking_repository is None:
        _booking_repository = SqliteBookingRepository(DB_PATH)
    return _booking_repository


def get_text_search() -> TextSearchRepository:
    """Provide the BM25 index, built from the current catalog on first use."""
    global _text_search
    if _text_search is None:
        index = BM25TextSearchRepository()
        index.build_index(get_book_repository().get_all())
        _text_search = index
    return _text_search


def get_catalog_service() -> CatalogService:
    """Provide the Catalog Service with all dependencies wired."""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService(
            book_repo=get_book_repository(),
            category_repo=get_category_repository(),
            text_search=get_text_search(),
            max_workers=PROFILE_WORKERS,
        )
    return _catalog_service


def get_booking_service() -> BookingService:
    """Provide the Booking Service with all dependencies wired."""
    global _booking_service
    if _booking_service is None:
        _booking_service = BookingService(
            booking_repo=get_booking_repository(),
            catalog=get_catalog_service(),
        )
    return _booking_service


def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_moderator: bool = Header(default=False),
) -> CallerContext:
    """
    Build the caller context from the identity headers.

    Token verification happens upstream; a request reaching this service
    without a user id was not authenticated.
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="authentication required",
        )
    return CallerContext(user_id=x_user_id, is_moderator=x_moderator)


def reset_dependencies() -> None:
    """
    Reset all singletons. Useful for testing.

    This allows tests to inject mock dependencies by resetting
    the module state between test cases.
    """
    global _book_repository, _category_repository, _booking_repository
    global _text_search, _catalog_service, _booking_service

    _book_repository = None
    _category_repository = None
    _booking_repository = None
    _text_search = None
    _catalog_service = None
    _booking_service = None
