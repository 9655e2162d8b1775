"""
Domain service for bookings.

Moderators see every booking; everybody else only sees their own. Status
values form a closed enumeration, but updates overwrite quantity and
status without checking transitions or ownership, and with no version
token: two concurrent updates of the same booking may lose one write.
"""

import logging
from typing import List, Optional
from uuid import UUID

from library_booking.domain.entities import Booking, BookingStatus
from library_booking.domain.errors import NotFoundError
from library_booking.domain.ports import BookingRepository
from library_booking.domain.services.catalog_service import CatalogService
from library_booking.domain.value_objects import CallerContext

logger = logging.getLogger(__name__)


class BookingService:
    """Booking lifecycle: creation, full-overwrite updates and listings."""

    def __init__(self, booking_repo: BookingRepository, catalog: CatalogService) -> None:
        """
        Args:
            booking_repo: Repository for booking records
            catalog: Used only to check that a referenced book exists
        """
        self._bookings = booking_repo
        self._catalog = catalog

    def list_all(self, caller: CallerContext) -> List[Booking]:
        """Every booking, most recently updated first. Moderators only."""
        caller.require_moderator()
        return self._bookings.find()

    def list_by_status(self, caller: CallerContext, status: str) -> List[Booking]:
        """
        Bookings with the given status. Moderators only.

        The status is used verbatim as a filter; unknown values match nothing.
        """
        caller.require_moderator()
        return self._bookings.find(status=status)

    def list_by_user(self, caller: CallerContext) -> List[Booking]:
        """The caller's own bookings."""
        return self._bookings.find(user_id=caller.user_id)

    def list_for_book(self, caller: CallerContext, book_id: UUID) -> List[Booking]:
        """
        All users' bookings for a book. Moderators only.

        Raises:
            ForbiddenError: If the caller is not a moderator
            NotFoundError: If the book does not exist
        """
        caller.require_moderator()
        self._catalog.get_book(book_id)
        return self._bookings.find(book_id=book_id)

    def list_my_bookings_for_book(self, caller: CallerContext, book_id: UUID) -> List[Booking]:
        """
        The caller's bookings for a book.

        Raises:
            NotFoundError: If the book does not exist
        """
        self._catalog.get_book(book_id)
        return self._bookings.find(user_id=caller.user_id, book_id=book_id)

    def create(self, caller: CallerContext, book_id: UUID, quantity: int) -> UUID:
        """
        Book copies of a book for the caller.

        New bookings always start as pending.

        Raises:
            NotFoundError: If the book does not exist
        """
        self._catalog.get_book(book_id)

        booking = Booking.create_pending(user_id=caller.user_id, book_id=book_id, quantity=quantity)
        self._bookings.save(booking)

        logger.info(
            f"Created booking id={booking.id} user_id={caller.user_id} "
            f"book_id={book_id} quantity={quantity}"
        )
        return booking.id

    def update(
        self,
        caller: CallerContext,
        booking_id: UUID,
        quantity: Optional[int],
        status: Optional[BookingStatus],
    ) -> UUID:
        """
        Overwrite a booking's quantity and status.

        Both fields are replaced even when None; any status may follow any
        other.

        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = self._bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("booking not found")

        booking.overwrite(quantity=quantity, status=status)
        self._bookings.save(booking)

        logger.info(
            f"Updated booking id={booking.id} by user_id={caller.user_id}: "
            f"quantity={quantity} status={status.value if status else None}"
        )
        return booking.id
