"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.models import UserRecord
from fitness_tracker.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_clerk_id(self, clerk_user_id: str) -> UserRecord | None:
        """Return the user for an identity provider id, if present."""
        response = (
            self.client.table("users")
            .select("id, clerk_user_id, email")
            .eq("clerk_user_id", clerk_user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def create_user(self, clerk_user_id: str, email: str | None) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert({"clerk_user_id": clerk_user_id, "email": email})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def create_profile(self, user_id: UUID) -> None:
        """Create the default profile row for a user."""
        self.client.table("user_profiles").insert({"user_id": str(user_id)}).execute()


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        clerk_user_id=str(row["clerk_user_id"]),
        email=row.get("email"),
    )
