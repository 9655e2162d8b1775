"""
Request and response bodies of the v1 API.

Field validation lives here: the domain services assume their inputs were
already checked.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


StatusValue = Literal['pending', 'approved', 'rejected', 'cancelled']


# request bodies

class BookCreateRequest(BaseModel):
    """Request body for POST /books."""
    title: str = Field(min_length=1, description="Book title")
    author: str = Field(min_length=1, description="Author name")
    isbn: str = Field(min_length=1, description="ISBN, unique across the catalog")


class BookUpdateRequest(BaseModel):
    """
    Request body for PATCH /books/{book_id}.

    Both fields are written as given; an omitted field is cleared.
    """
    title: str | None = Field(default=None, min_length=1)
    author: str | None = Field(default=None, min_length=1)


class CategoryRequest(BaseModel):
    """Request body for POST/DELETE /books/{book_id}/category."""
    category_name: str = Field(min_length=1)


class BookingCreateRequest(BaseModel):
    """
    Request body for POST /books/{book_id}/bookings.

    Any status sent by the client is ignored: new bookings are pending.
    """
    quantity: int = Field(ge=1, description="Number of copies requested")


class BookingUpdateRequest(BaseModel):
    """
    Request body for PATCH /books/bookings/{booking_id}.

    Both fields are written as given; an omitted field is cleared.
    """
    quantity: int | None = Field(default=None, ge=1)
    status: StatusValue | None = None


# response bodies

class BookProfile(BaseModel):
    """A book together with the names of its categories."""
    id: UUID = Field(description="Unique identifier for this book")
    title: str | None = Field(default=None, description="Book title")
    author: str | None = Field(default=None, description="Author name")
    isbn: str = Field(description="ISBN")
    categories: list[str] = Field(default_factory=list, description="Category names")


class Booking(BaseModel):
    id: UUID
    user_id: str
    book_id: UUID
    quantity: int | None = None
    status: StatusValue | None = None
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str


class BooksResponse(MessageResponse):
    books: list[BookProfile]


class BookResponse(MessageResponse):
    book: BookProfile


class BookIdResponse(MessageResponse):
    book: UUID


class BookingsResponse(MessageResponse):
    bookings: list[Booking]


class BookingIdResponse(MessageResponse):
    booking: UUID


class ErrorResponse(BaseModel):
    """Body of every failed request."""
    error: str = Field(description="Machine-stable error kind")
    detail: str = Field(description="Human-readable message")
