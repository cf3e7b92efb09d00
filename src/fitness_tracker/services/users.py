"""User-related business logic."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.models import UserRecord

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_clerk_id(self, clerk_user_id: str) -> UserRecord | None:
        """Return the user for an identity provider id, if present."""

    def create_user(self, clerk_user_id: str, email: str | None) -> UserRecord:
        """Create and return a new user record."""

    def create_profile(self, user_id: UUID) -> None:
        """Create the default profile for a user."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository

    def ensure_user(self, clerk_user_id: str, email: str | None = None) -> UserRecord:
        """Return the user for the identity provider id, creating it if needed."""
        existing = self.repository.get_by_clerk_id(clerk_user_id)
        if existing:
            return existing

        created = self.repository.create_user(clerk_user_id, email)
        self.repository.create_profile(created.id)
        _logger.info("Created user %s with default profile", created.id)
        return created
