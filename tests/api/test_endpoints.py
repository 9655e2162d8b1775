"""
HTTP-level tests for the v1 API.

Services are wired over real SQLite repositories in a temporary database
and injected with FastAPI dependency overrides.
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from library_booking.api.v1.dependencies import get_booking_service, get_catalog_service
from library_booking.domain.services import BookingService, CatalogService
from library_booking.infrastructure.db import (
    SqliteBookRepository,
    SqliteBookingRepository,
    SqliteCategoryRepository,
)
from library_booking.infrastructure.search import BM25TextSearchRepository
from library_booking.main import app

MODERATOR = {"X-User-Id": "mod-1", "X-Moderator": "true"}
ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


@pytest.fixture
def services(tmp_path):
    db_path = tmp_path / "api.db"
    index = BM25TextSearchRepository()
    index.build_index([])
    catalog = CatalogService(
        book_repo=SqliteBookRepository(db_path),
        category_repo=SqliteCategoryRepository(db_path),
        text_search=index,
        max_workers=4,
    )
    bookings = BookingService(SqliteBookingRepository(db_path), catalog)
    return catalog, bookings


@pytest.fixture
def client(services):
    catalog, bookings = services
    app.dependency_overrides[get_catalog_service] = lambda: catalog
    app.dependency_overrides[get_booking_service] = lambda: bookings
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_book(client, isbn, title="Title", author="Author"):
    response = client.post(
        "/api/v1/books",
        json={"title": title, "author": author, "isbn": isbn},
        headers=MODERATOR,
    )
    assert response.status_code == 200, response.text
    return response.json()["book"]


def create_booking(client, book_id, headers=ALICE, **body):
    response = client.post(
        f"/api/v1/books/{book_id}/bookings",
        json={"quantity": 1, **body},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["booking"]


# =============================================================================
# Books
# =============================================================================


class TestBooks:

    def test_requires_identity(self, client):
        response = client.get("/api/v1/books")

        assert response.status_code == 401

    def test_create_and_fetch_profile(self, client):
        book_id = create_book(client, "A1", title="Dune", author="Frank Herbert")

        response = client.get(f"/api/v1/books/{book_id}", headers=ALICE)

        assert response.status_code == 200
        book = response.json()["book"]
        assert book == {
            "id": book_id,
            "title": "Dune",
            "author": "Frank Herbert",
            "isbn": "A1",
            "categories": [],
        }

    def test_create_requires_moderator(self, client):
        response = client.post(
            "/api/v1/books",
            json={"title": "T", "author": "A", "isbn": "X1"},
            headers=ALICE,
        )

        assert response.status_code == 403
        assert response.json() == {
            "error": "forbidden",
            "detail": "user not authorized for this action",
        }

    def test_duplicate_isbn_conflicts(self, client):
        create_book(client, "A1")

        response = client.post(
            "/api/v1/books",
            json={"title": "Other", "author": "Other", "isbn": "A1"},
            headers=MODERATOR,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert len(client.get("/api/v1/books", headers=ALICE).json()["books"]) == 1

    def test_missing_fields_are_rejected(self, client):
        response = client.post("/api/v1/books", json={"title": "T"}, headers=MODERATOR)

        assert response.status_code == 422

    def test_unknown_book_is_404(self, client):
        response = client.get(f"/api/v1/books/{uuid4()}", headers=ALICE)

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "book not found"}

    def test_list_all_scenario(self, client):
        a1 = create_book(client, "A1")
        a2 = create_book(client, "A2")
        client.post(f"/api/v1/books/{a1}/category", json={"category_name": "Fiction"}, headers=MODERATOR)

        response = client.get("/api/v1/books", headers=ALICE)

        assert response.status_code == 200
        books = {book["isbn"]: book for book in response.json()["books"]}
        assert books["A1"]["categories"] == ["Fiction"]
        assert books["A2"]["categories"] == []
        assert books["A2"]["id"] == a2

    def test_update_overwrites_and_clears(self, client):
        book_id = create_book(client, "A1", title="Old", author="Someone")

        response = client.patch(f"/api/v1/books/{book_id}", json={"title": "New"}, headers=MODERATOR)

        assert response.status_code == 200
        assert response.json()["book"] == book_id
        book = client.get(f"/api/v1/books/{book_id}", headers=ALICE).json()["book"]
        assert book["title"] == "New"
        assert book["author"] is None
        assert book["isbn"] == "A1"

    def test_create_book_without_word_characters(self, client):
        response = client.post(
            "/api/v1/books",
            json={"title": "!", "author": "?", "isbn": "---"},
            headers=MODERATOR,
        )

        assert response.status_code == 200
        book_id = response.json()["book"]
        books = client.get("/api/v1/books", headers=ALICE).json()["books"]
        assert [b["id"] for b in books] == [book_id]

        found = client.post("/api/v1/books/search", params={"search": "anything"}, headers=ALICE)
        assert found.status_code == 200
        assert found.json()["books"] == []

    def test_update_requires_moderator(self, client):
        book_id = create_book(client, "A1")

        response = client.patch(f"/api/v1/books/{book_id}", json={"title": "New"}, headers=ALICE)

        assert response.status_code == 403


class TestSearchAndCategories:

    def test_blank_search_returns_nothing(self, client):
        create_book(client, "A1", title="Dune")

        response = client.post("/api/v1/books/search", params={"search": ""}, headers=ALICE)

        assert response.status_code == 200
        assert response.json()["books"] == []

    def test_search_reads_query_string(self, client):
        book_id = create_book(client, "A1", title="Dune")

        without_query = client.post("/api/v1/books/search", headers=ALICE)
        with_query = client.post("/api/v1/books/search?search=dune", headers=ALICE)

        assert without_query.status_code == 200
        assert without_query.json()["books"] == []
        assert [b["id"] for b in with_query.json()["books"]] == [book_id]

    def test_search_finds_created_and_updated_books(self, client):
        book_id = create_book(client, "A1", title="Dune", author="Frank Herbert")
        create_book(client, "A2", title="Emma", author="Jane Austen")

        found = client.post("/api/v1/books/search", params={"search": "dune"}, headers=ALICE)
        assert [b["id"] for b in found.json()["books"]] == [book_id]

        client.patch(f"/api/v1/books/{book_id}", json={"title": "Arrakis"}, headers=MODERATOR)
        renamed = client.post("/api/v1/books/search", params={"search": "arrakis"}, headers=ALICE)
        assert [b["id"] for b in renamed.json()["books"]] == [book_id]

    def test_category_add_remove_is_idempotent(self, client):
        book_id = create_book(client, "A1")
        url = f"/api/v1/books/{book_id}/category"

        for _ in range(2):
            assert client.post(url, json={"category_name": "Fiction"}, headers=MODERATOR).status_code == 200

        listing = client.get("/api/v1/books/category/Fiction", headers=ALICE).json()["books"]
        assert [b["id"] for b in listing] == [book_id]
        assert listing[0]["categories"] == ["Fiction"]

        for _ in range(2):
            response = client.request("DELETE", url, json={"category_name": "Fiction"}, headers=MODERATOR)
            assert response.status_code == 200

        assert client.get("/api/v1/books/category/Fiction", headers=ALICE).json()["books"] == []

    def test_category_change_requires_moderator(self, client):
        book_id = create_book(client, "A1")

        response = client.post(
            f"/api/v1/books/{book_id}/category",
            json={"category_name": "Fiction"},
            headers=ALICE,
        )

        assert response.status_code == 403


# =============================================================================
# Bookings
# =============================================================================


class TestBookings:

    def test_create_forces_pending(self, client):
        book_id = create_book(client, "A1")

        booking_id = create_booking(client, book_id, quantity=2, status="approved")

        mine = client.get("/api/v1/users/me/bookings", headers=ALICE).json()["bookings"]
        assert [b["id"] for b in mine] == [booking_id]
        assert mine[0]["status"] == "pending"
        assert mine[0]["quantity"] == 2
        assert mine[0]["user_id"] == "alice"

    def test_create_for_unknown_book_is_404(self, client):
        response = client.post(
            f"/api/v1/books/{uuid4()}/bookings",
            json={"quantity": 1},
            headers=ALICE,
        )

        assert response.status_code == 404

    def test_quantity_must_be_positive(self, client):
        book_id = create_book(client, "A1")

        response = client.post(
            f"/api/v1/books/{book_id}/bookings",
            json={"quantity": 0},
            headers=ALICE,
        )

        assert response.status_code == 422

    def test_update_is_full_overwrite(self, client):
        book_id = create_book(client, "A1")
        booking_id = create_booking(client, book_id)

        response = client.patch(
            f"/api/v1/books/bookings/{booking_id}",
            json={"quantity": 4, "status": "approved"},
            headers=MODERATOR,
        )
        assert response.status_code == 200
        assert response.json()["booking"] == booking_id

        mine = client.get("/api/v1/users/me/bookings", headers=ALICE).json()["bookings"]
        assert mine[0]["quantity"] == 4
        assert mine[0]["status"] == "approved"

        client.patch(f"/api/v1/books/bookings/{booking_id}", json={}, headers=ALICE)
        mine = client.get("/api/v1/users/me/bookings", headers=ALICE).json()["bookings"]
        assert mine[0]["quantity"] is None
        assert mine[0]["status"] is None

    def test_update_rejects_unknown_status(self, client):
        book_id = create_book(client, "A1")
        booking_id = create_booking(client, book_id)

        response = client.patch(
            f"/api/v1/books/bookings/{booking_id}",
            json={"quantity": 1, "status": "shipped"},
            headers=ALICE,
        )

        assert response.status_code == 422

    def test_update_unknown_booking_is_404(self, client):
        response = client.patch(
            f"/api/v1/books/bookings/{uuid4()}",
            json={"quantity": 1, "status": "pending"},
            headers=ALICE,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "booking not found"

    def test_list_all_is_moderator_only(self, client):
        book_id = create_book(client, "A1")
        create_booking(client, book_id)

        assert client.get("/api/v1/books/bookings", headers=ALICE).status_code == 403

        response = client.get("/api/v1/books/bookings", headers=MODERATOR)
        assert response.status_code == 200
        assert len(response.json()["bookings"]) == 1

    def test_list_by_status(self, client):
        book_id = create_book(client, "A1")
        booking_id = create_booking(client, book_id)
        create_booking(client, book_id, headers=BOB)
        client.patch(
            f"/api/v1/books/bookings/{booking_id}",
            json={"quantity": 1, "status": "approved"},
            headers=MODERATOR,
        )

        approved = client.get("/api/v1/books/bookings/approved", headers=MODERATOR).json()["bookings"]
        unknown = client.get("/api/v1/books/bookings/whatever", headers=MODERATOR).json()["bookings"]

        assert [b["id"] for b in approved] == [booking_id]
        assert unknown == []
        assert client.get("/api/v1/books/bookings/approved", headers=ALICE).status_code == 403

    def test_bookings_for_book(self, client):
        book_id = create_book(client, "A1")
        alices = create_booking(client, book_id)
        bobs = create_booking(client, book_id, headers=BOB)

        everyone = client.get(f"/api/v1/books/{book_id}/bookings", headers=MODERATOR).json()["bookings"]
        mine = client.get(f"/api/v1/books/{book_id}/bookings/me", headers=BOB).json()["bookings"]

        assert {b["id"] for b in everyone} == {alices, bobs}
        assert [b["id"] for b in mine] == [bobs]
        assert client.get(f"/api/v1/books/{book_id}/bookings", headers=ALICE).status_code == 403
        assert client.get(f"/api/v1/books/{uuid4()}/bookings/me", headers=ALICE).status_code == 404


# =============================================================================
# Failures and health
# =============================================================================


class TestInternalErrors:

    def test_datastore_failure_does_not_leak_details(self, services):
        catalog, bookings = services

        class BrokenCatalog(CatalogService):
            def list_all_profiles(self):
                raise RuntimeError("Database error: /secret/path/library.db is locked")

        broken = BrokenCatalog(
            book_repo=None, category_repo=None, text_search=None,
        )
        app.dependency_overrides[get_catalog_service] = lambda: broken
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.get("/api/v1/books", headers=ALICE)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "internal", "detail": "internal error"}
        assert "secret" not in response.text


class TestHealth:

    def test_health_reports_components(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "components": {"datastore": True, "text_search": True},
            "overall": True,
        }
