"""
SQLite implementation of the CategoryRepository port.

Memberships are plain join rows. UNIQUE(category_name, book_id) plus
INSERT OR IGNORE makes adding idempotent; deleting a missing row simply
affects nothing.
"""

import sqlite3
from typing import List
from uuid import UUID

from library_booking.domain.entities import CategoryMembership
from library_booking.domain.ports import CategoryRepository
from library_booking.infrastructure.db.sqlite_base import SqliteRepository


class SqliteCategoryRepository(SqliteRepository, CategoryRepository):
    """Category membership table adapter."""

    _SCHEMA = """
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            category_name TEXT NOT NULL,
            book_id TEXT NOT NULL,
            UNIQUE(category_name, book_id)
        );
        CREATE INDEX IF NOT EXISTS idx_categories_book_id ON categories(book_id);
    """

    def add(self, membership: CategoryMembership) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT OR IGNORE INTO categories (category_name, book_id) VALUES (?, ?)",
                    (membership.category_name, str(membership.book_id)),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while adding category: {e}") from e

    def remove(self, membership: CategoryMembership) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "DELETE FROM categories WHERE category_name = ? AND book_id = ?",
                    (membership.category_name, str(membership.book_id)),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while removing category: {e}") from e

    def category_names_for_book(self, book_id: UUID) -> List[str]:
        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT category_name FROM categories WHERE book_id = ?",
                    (str(book_id),),
                ).fetchall()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while loading categories: {e}") from e

        return [row["category_name"] for row in rows]

    def book_ids_in_category(self, category_name: str) -> List[UUID]:
        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT book_id FROM categories WHERE category_name = ? ORDER BY book_id",
                    (category_name,),
                ).fetchall()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while loading category books: {e}") from e

        return [UUID(row["book_id"]) for row in rows]

    def count(self) -> int:
        """Total number of membership rows."""
        try:
            with self._get_connection() as conn:
                result = conn.execute("SELECT COUNT(*) as cnt FROM categories").fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while counting categories: {e}") from e

        return result["cnt"]
