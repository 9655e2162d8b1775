"""
API endpoints for the book catalog.

This module defines the FastAPI routes for listing, searching, creating
and updating books and for managing category memberships. It handles
HTTP concerns and delegates to the CatalogService; domain errors are
translated by the handlers in ``errors``.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from library_booking.api.v1 import schemas as api
from library_booking.api.v1.converters import domain_profile_to_api, domain_profiles_to_api
from library_booking.api.v1.dependencies import get_caller, get_catalog_service
from library_booking.domain.services import CatalogService
from library_booking.domain.value_objects import CallerContext

router = APIRouter(prefix="/books")


@router.get("", response_model=api.BooksResponse)
def get_all_books(
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.BooksResponse:
    """Profiles of every book in the catalog."""
    profiles = service.list_all_profiles()
    return api.BooksResponse(
        message="books retrieved successfully",
        books=domain_profiles_to_api(profiles),
    )


@router.post("", response_model=api.BookIdResponse)
def add_book(
    request: api.BookCreateRequest,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.BookIdResponse:
    """
    Create a new book (moderators only).

    Raises:
        403: Caller is not a moderator
        409: A book with this ISBN already exists
    """
    book_id = service.create_book(
        caller,
        title=request.title,
        author=request.author,
        isbn=request.isbn,
    )
    return api.BookIdResponse(message="book successfully added", book=book_id)


@router.post("/search", response_model=api.BooksResponse)
def search_books(
    search: str = Query(default="", description="Full-text query; blank returns no books"),
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.BooksResponse:
    """Full-text search; results are ordered by relevance."""
    profiles = service.search_profiles(search)
    return api.BooksResponse(
        message="search results",
        books=domain_profiles_to_api(profiles),
    )


@router.get("/category/{category_name}", response_model=api.BooksResponse)
def get_books_in_category(
    category_name: str,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.BooksResponse:
    """Profiles of every book in the category."""
    profiles = service.list_category_profiles(category_name)
    return api.BooksResponse(
        message="books retrieved successfully",
        books=domain_profiles_to_api(profiles),
    )


@router.get("/{book_id}", response_model=api.BookResponse)
def get_book(
    book_id: UUID,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.BookResponse:
    """
    Get a book profile by its unique identifier.

    Raises:
        404: Book not found
    """
    profile = service.resolve_profile(book_id)
    return api.BookResponse(
        message="successfully retrieved book",
        book=domain_profile_to_api(profile),
    )


@router.patch("/{book_id}", response_model=api.BookIdResponse)
def update_book(
    book_id: UUID,
    request: api.BookUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.BookIdResponse:
    """
    Overwrite title and author (moderators only). The ISBN cannot change.

    Raises:
        403: Caller is not a moderator
        404: Book not found
    """
    updated_id = service.update_book(
        caller,
        book_id,
        title=request.title,
        author=request.author,
    )
    return api.BookIdResponse(message="book updated successfully", book=updated_id)


@router.post("/{book_id}/category", response_model=api.MessageResponse)
def add_to_category(
    book_id: UUID,
    request: api.CategoryRequest,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.MessageResponse:
    """Put the book in a category (moderators only, idempotent)."""
    service.add_to_category(caller, book_id, request.category_name)
    return api.MessageResponse(message="book added to category")


@router.delete("/{book_id}/category", response_model=api.MessageResponse)
def remove_from_category(
    book_id: UUID,
    request: api.CategoryRequest,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
) -> api.MessageResponse:
    """Take the book out of a category (moderators only, idempotent)."""
    service.remove_from_category(caller, book_id, request.category_name)
    return api.MessageResponse(message="book removed from category")
