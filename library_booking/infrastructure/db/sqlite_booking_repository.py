"""
SQLite implementation of the BookingRepository port.

Status is stored as the enum's string value. Listings sort by updated_at
descending; ties fall back to the (time-ordered) ID, newest first.
"""

import sqlite3
from typing import List, Optional
from uuid import UUID

from library_booking.domain.entities import Booking, BookingStatus
from library_booking.domain.ports import BookingRepository
from library_booking.infrastructure.db.sqlite_base import SqliteRepository


class SqliteBookingRepository(SqliteRepository, BookingRepository):
    """Bookings table adapter."""

    _SCHEMA = """
        CREATE TABLE IF NOT EXISTS bookings (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            book_id TEXT NOT NULL,
            quantity INTEGER,
            status TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_bookings_user_id ON bookings(user_id);
        CREATE INDEX IF NOT EXISTS idx_bookings_book_id ON bookings(book_id);
        CREATE INDEX IF NOT EXISTS idx_bookings_status ON bookings(status);
    """

    def _booking_to_row(self, booking: Booking) -> dict:
        """Convert a Booking entity to a database row dict."""
        return {
            "id": str(booking.id),
            "user_id": booking.user_id,
            "book_id": str(booking.book_id),
            "quantity": booking.quantity,
            "status": booking.status.value if booking.status is not None else None,
            "created_at": self._to_timestamp(booking.created_at),
            "updated_at": self._to_timestamp(booking.updated_at),
        }

    def _row_to_booking(self, row: sqlite3.Row) -> Booking:
        """Convert a database row to a Booking entity."""
        status = BookingStatus(row["status"]) if row["status"] is not None else None
        return Booking(
            id=UUID(row["id"]),
            user_id=row["user_id"],
            book_id=UUID(row["book_id"]),
            quantity=row["quantity"],
            status=status,
            created_at=self._from_timestamp(row["created_at"]),
            updated_at=self._from_timestamp(row["updated_at"]),
        )

    def get_by_id(self, booking_id: UUID) -> Optional[Booking]:
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM bookings WHERE id = ?",
                    (str(booking_id),)
                ).fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while loading booking: {e}") from e

        if row is None:
            return None

        return self._row_to_booking(row)

    def find(
        self,
        user_id: Optional[str] = None,
        book_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        clauses = []
        params: list = []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if book_id is not None:
            clauses.append("book_id = ?")
            params.append(str(book_id))
        if status is not None:
            clauses.append("status = ?")
            params.append(status)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    f"SELECT * FROM bookings {where} ORDER BY updated_at DESC, id DESC",
                    params,
                ).fetchall()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while listing bookings: {e}") from e

        return [self._row_to_booking(row) for row in rows]

    def save(self, booking: Booking) -> None:
        """Insert or update a booking. user_id and book_id of an existing row are kept."""
        row = self._booking_to_row(booking)

        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO bookings
                    (id, user_id, book_id, quantity, status, created_at, updated_at)
                    VALUES
                    (:id, :user_id, :book_id, :quantity, :status, :created_at, :updated_at)
                    ON CONFLICT(id) DO UPDATE SET
                        quantity=excluded.quantity,
                        status=excluded.status,
                        updated_at=excluded.updated_at
                """, row)
                conn.commit()

        except sqlite3.IntegrityError as e:
            raise ValueError(f"Booking violates constraints: {e}") from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving booking: {e}") from e
