"""Supabase repository for weight entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from meal_genie.domain.profiles import WeightEntry
from meal_genie.services.measurements import WeightEntryRepository


@dataclass
class SupabaseWeightEntryRepository(WeightEntryRepository):
    """Supabase implementation for the weight_entries table."""

    client: Client

    def create_entry(
        self, user_id: UUID, weight_kg: float, recorded_at: datetime
    ) -> WeightEntry:
        """Insert a weight entry and return the stored row."""
        response = (
            self.client.table("weight_entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "weight_kg": weight_kg,
                    "recorded_at": recorded_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight entry in Supabase")
        return _parse_row(response.data[0])

    def list_recent(self, user_id: UUID, limit: int) -> list[WeightEntry]:
        """Return the newest entries for a user."""
        response = (
            self.client.table("weight_entries")
            .select("id, user_id, weight_kg, recorded_at")
            .eq("user_id", str(user_id))
            .order("recorded_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> WeightEntry:
    recorded_at_raw = row.get("recorded_at")
    recorded_at = (
        datetime.fromisoformat(recorded_at_raw)
        if isinstance(recorded_at_raw, str) and recorded_at_raw
        else datetime.min
    )
    return WeightEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        weight_kg=float(row.get("weight_kg", 0.0)),
        recorded_at=recorded_at,
    )
