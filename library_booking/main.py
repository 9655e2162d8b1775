"""
Main application entry point.
"""

import logging
import os

from fastapi import Depends, FastAPI

from library_booking.api.v1.book_endpoints import router as book_router
from library_booking.api.v1.booking_endpoints import router as booking_router
from library_booking.api.v1.dependencies import get_catalog_service
from library_booking.api.v1.errors import register_exception_handlers
from library_booking.domain.services import CatalogService


def resolve_log_level(value: str | None) -> str:
    """Map LOG_LEVEL onto a known logging level name, falling back to INFO."""
    level = (value or "INFO").strip().upper()
    if level not in logging.getLevelNamesMapping():
        return "INFO"
    return level


_raw_log_level = os.getenv("LOG_LEVEL")
LOG_LEVEL = resolve_log_level(_raw_log_level)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

if _raw_log_level and _raw_log_level.strip().upper() != LOG_LEVEL:
    logging.getLogger(__name__).warning(
        f"Unknown LOG_LEVEL {_raw_log_level!r}, using {LOG_LEVEL}"
    )

app = FastAPI(
    title="Library Booking API",
    description="Book catalog, categories and booking requests.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

# Booking routes first: /books/bookings must win over /books/{book_id}
app.include_router(booking_router, prefix="/api/v1", tags=["bookings"])
app.include_router(book_router, prefix="/api/v1", tags=["books"])


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "message": "Welcome to the Library Booking API",
        "docs": "/docs",
        "health": "/api/v1/health"
    }


@app.get("/api/v1/health")
def health_check(
    service: CatalogService = Depends(get_catalog_service),
) -> dict:
    """
    Check system health and component readiness.

    - datastore: SQLite reachable
    - text_search: BM25 index built
    - overall: True only if all components are ready
    """
    health_status = service.get_health_status()

    return {
        "status": "ok" if health_status["overall"] else "degraded",
        "components": {
            "datastore": health_status["datastore"],
            "text_search": health_status["text_search"],
        },
        "overall": health_status["overall"],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("library_booking.main:app", host="0.0.0.0", port=8000, reload=True)
