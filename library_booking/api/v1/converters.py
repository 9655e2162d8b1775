"""
Converters between domain entities/value objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from dataclasses import asdict
from typing import List, Optional

from library_booking.domain import entities as domain
from library_booking.api.v1 import schemas as api


def domain_profile_to_api(profile: domain.BookProfile) -> api.BookProfile:
    """
    Convert a domain BookProfile to an API BookProfile model.

    Args:
        profile: Domain BookProfile read model

    Returns:
        API BookProfile model
    """
    return api.BookProfile(**asdict(profile))


def domain_profiles_to_api(profiles: List[domain.BookProfile]) -> List[api.BookProfile]:
    return [domain_profile_to_api(profile) for profile in profiles]


def domain_booking_to_api(booking: domain.Booking) -> api.Booking:
    """
    Convert a domain Booking entity to an API Booking model.

    Args:
        booking: Domain Booking entity

    Returns:
        API Booking model
    """
    return api.Booking(
        id=booking.id,
        user_id=booking.user_id,
        book_id=booking.book_id,
        quantity=booking.quantity,
        status=booking.status.value if booking.status is not None else None,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


def domain_bookings_to_api(bookings: List[domain.Booking]) -> List[api.Booking]:
    return [domain_booking_to_api(booking) for booking in bookings]


def api_status_to_domain(status: Optional[str]) -> Optional[domain.BookingStatus]:
    """Map a validated status string onto the domain enum (None stays None)."""
    if status is None:
        return None
    return domain.BookingStatus(status)
