"""
API endpoints for bookings.

Routes under /books/bookings must be registered before the catalog's
/books/{book_id} routes, so this router is included first.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from library_booking.api.v1 import schemas as api
from library_booking.api.v1.converters import api_status_to_domain, domain_bookings_to_api
from library_booking.api.v1.dependencies import get_booking_service, get_caller
from library_booking.domain.services import BookingService
from library_booking.domain.value_objects import CallerContext

router = APIRouter()


@router.get("/books/bookings", response_model=api.BookingsResponse)
def get_all_bookings(
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingsResponse:
    """Every booking, most recently updated first (moderators only)."""
    bookings = service.list_all(caller)
    return api.BookingsResponse(
        message="successfully retrieved bookings",
        bookings=domain_bookings_to_api(bookings),
    )


@router.patch("/books/bookings/{booking_id}", response_model=api.BookingIdResponse)
def update_booking(
    booking_id: UUID,
    request: api.BookingUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingIdResponse:
    """
    Overwrite quantity and status; omitted fields are cleared.

    Raises:
        404: Booking not found
    """
    updated_id = service.update(
        caller,
        booking_id,
        quantity=request.quantity,
        status=api_status_to_domain(request.status),
    )
    return api.BookingIdResponse(message="successfully updated booking", booking=updated_id)


@router.get("/books/bookings/{status}", response_model=api.BookingsResponse)
def get_bookings_with_status(
    status: str,
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingsResponse:
    """Bookings with the given status (moderators only)."""
    bookings = service.list_by_status(caller, status)
    return api.BookingsResponse(
        message="successfully retrieved bookings",
        bookings=domain_bookings_to_api(bookings),
    )


@router.post("/books/{book_id}/bookings", response_model=api.BookingIdResponse)
def add_booking(
    book_id: UUID,
    request: api.BookingCreateRequest,
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingIdResponse:
    """
    Book copies of a book for the caller; the booking starts as pending.

    Raises:
        404: Book not found
    """
    booking_id = service.create(caller, book_id, request.quantity)
    return api.BookingIdResponse(message="successfully completed booking", booking=booking_id)


@router.get("/books/{book_id}/bookings", response_model=api.BookingsResponse)
def get_all_bookings_for_book(
    book_id: UUID,
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingsResponse:
    """All users' bookings for a book (moderators only)."""
    bookings = service.list_for_book(caller, book_id)
    return api.BookingsResponse(
        message="successfully retrieved user bookings for book",
        bookings=domain_bookings_to_api(bookings),
    )


@router.get("/books/{book_id}/bookings/me", response_model=api.BookingsResponse)
def get_user_bookings_for_book(
    book_id: UUID,
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingsResponse:
    """The caller's bookings for a book."""
    bookings = service.list_my_bookings_for_book(caller, book_id)
    return api.BookingsResponse(
        message="successfully retrieved user bookings for book",
        bookings=domain_bookings_to_api(bookings),
    )


@router.get("/users/me/bookings", response_model=api.BookingsResponse)
def get_bookings_by_user(
    caller: CallerContext = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> api.BookingsResponse:
    """The caller's own bookings, most recently updated first."""
    bookings = service.list_by_user(caller)
    return api.BookingsResponse(
        message="successfully retrieved user bookings",
        bookings=domain_bookings_to_api(bookings),
    )
