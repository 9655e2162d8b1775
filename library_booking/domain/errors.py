"""
Domain errors.

Every failure the core reports carries a short, machine-stable ``kind``
and a human-readable ``message``. The API layer translates the kind to
a protocol status code.
"""


class LibraryError(Exception):
    """Base class for failures raised by the domain services."""

    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    """A referenced book or booking does not exist."""

    kind = "not_found"


class ConflictError(LibraryError):
    """The operation would duplicate existing data (e.g. an ISBN)."""

    kind = "conflict"


class ForbiddenError(LibraryError):
    """The caller lacks the moderator capability."""

    kind = "forbidden"

    def __init__(self, message: str = "user not authorized for this action") -> None:
        super().__init__(message)


class InternalError(LibraryError):
    """Unexpected failure; the message never exposes datastore details."""

    kind = "internal"

    def __init__(self, message: str = "internal error") -> None:
        super().__init__(message)
