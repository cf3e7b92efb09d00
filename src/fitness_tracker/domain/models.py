"""Domain models for the fitness tracker."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    clerk_user_id: str
    email: str | None = None
