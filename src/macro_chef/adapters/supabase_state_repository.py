"""Supabase key-value storage for catalog and meal-plan blobs."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from macro_chef.services.state import StateRepository


@dataclass
class SupabaseStateRepository(StateRepository):
    """Stores each blob as a JSON row keyed by name."""

    client: Client
    table: str = "macro_chef_state"

    def load(self, key: str) -> object | None:
        """Return the blob stored under a key, if present."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def save(self, key: str, value: object) -> None:
        """Insert or replace the blob stored under a key."""
        response = (
            self.client.table(self.table)
            .upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="key",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to save state for {key}")
