"""
SQLite implementation of the BookRepository port.

The ISBN column carries a UNIQUE constraint, so two concurrent creates
with the same ISBN cannot both be stored: the loser gets a ValueError.
"""

import sqlite3
from typing import List, Optional
from uuid import UUID

from library_booking.domain.entities import Book
from library_booking.domain.ports import BookRepository
from library_booking.infrastructure.db.sqlite_base import SqliteRepository


class SqliteBookRepository(SqliteRepository, BookRepository):
    """Books table adapter."""

    _SCHEMA = """
        CREATE TABLE IF NOT EXISTS books (
            id TEXT PRIMARY KEY,
            title TEXT,
            author TEXT,
            isbn TEXT NOT NULL UNIQUE,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
    """

    def _book_to_row(self, book: Book) -> dict:
        """Convert a Book entity to a database row dict."""
        return {
            "id": str(book.id),
            "title": book.title,
            "author": book.author,
            "isbn": book.isbn,
            "created_at": self._to_timestamp(book.created_at),
            "updated_at": self._to_timestamp(book.updated_at),
        }

    def _row_to_book(self, row: sqlite3.Row) -> Book:
        """Convert a database row to a Book entity."""
        return Book(
            id=UUID(row["id"]),
            isbn=row["isbn"],
            title=row["title"],
            author=row["author"],
            created_at=self._from_timestamp(row["created_at"]),
            updated_at=self._from_timestamp(row["updated_at"]),
        )

    def count(self) -> int:
        """Get the total number of books in the catalog."""
        try:
            with self._get_connection() as conn:
                result = conn.execute("SELECT COUNT(*) as cnt FROM books").fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while counting books: {e}") from e

        return result["cnt"]

    def get_by_id(self, book_id: UUID) -> Optional[Book]:
        """Retrieve a book by its ID."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM books WHERE id = ?",
                    (str(book_id),)
                ).fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while loading book: {e}") from e

        if row is None:
            return None

        return self._row_to_book(row)

    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        """Retrieve a book by exact ISBN (SQLite '=' on TEXT is case-sensitive)."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM books WHERE isbn = ?",
                    (isbn,)
                ).fetchone()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while loading book: {e}") from e

        if row is None:
            return None

        return self._row_to_book(row)

    def list_ids(self) -> List[UUID]:
        """Distinct book IDs, oldest first."""
        try:
            with self._get_connection() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT id FROM books ORDER BY id"
                ).fetchall()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while listing books: {e}") from e

        return [UUID(row["id"]) for row in rows]

    def get_all(self) -> List[Book]:
        """Retrieve all books, oldest first."""
        try:
            with self._get_connection() as conn:
                rows = conn.execute("SELECT * FROM books ORDER BY id").fetchall()
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while listing books: {e}") from e

        return [self._row_to_book(row) for row in rows]

    def save(self, book: Book) -> None:
        """Insert or update a book. The ISBN of an existing row is never rewritten."""
        row = self._book_to_row(book)

        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO books
                    (id, title, author, isbn, created_at, updated_at)
                    VALUES
                    (:id, :title, :author, :isbn, :created_at, :updated_at)
                    ON CONFLICT(id) DO UPDATE SET
                        title=excluded.title,
                        author=excluded.author,
                        updated_at=excluded.updated_at
                """, row)
                conn.commit()

        except sqlite3.IntegrityError as e:
            raise ValueError(f"Book violates catalog constraints: {e}") from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving book: {e}") from e
