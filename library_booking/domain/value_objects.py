"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity.
"""

from dataclasses import dataclass
from uuid import UUID

from .errors import ForbiddenError


@dataclass(frozen=True)
class CallerContext:
    """
    The authenticated caller of a core operation.

    Identity and capability are resolved upstream (token verification is
    not part of this system) and passed explicitly into every operation.
    """

    user_id: str
    """Identity of the authenticated user"""

    is_moderator: bool = False
    """Whether the caller may run privileged operations"""

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("user_id cannot be empty")

    def require_moderator(self) -> None:
        """
        Guard for privileged operations.

        Raises:
            ForbiddenError: If the caller is not a moderator
        """
        if not self.is_moderator:
            raise ForbiddenError()


@dataclass(frozen=True)
class SearchHit:
    """A full-text match: the matched book and its relevance score."""

    book_id: UUID
    """ID of the matched book"""

    score: float
    """Relevance score (higher is better)"""
