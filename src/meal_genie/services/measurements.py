"""Body weight measurements."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from meal_genie.domain.profiles import WeightEntry


class WeightEntryRepository(Protocol):
    """Persistence interface for weight entries."""

    def create_entry(
        self, user_id: UUID, weight_kg: float, recorded_at: datetime
    ) -> WeightEntry:
        """Insert an entry and return it."""

    def list_recent(self, user_id: UUID, limit: int) -> list[WeightEntry]:
        """Return the newest entries first."""


@dataclass
class WeightEntryService:
    """Service for logging and listing weight entries."""

    repository: WeightEntryRepository

    def record(self, user_id: UUID, weight_kg: float) -> WeightEntry:
        """Record a weight measurement taken now."""
        if not math.isfinite(weight_kg) or weight_kg <= 0:
            raise ValueError("Weight must be a positive number of kilograms")
        return self.repository.create_entry(
            user_id, weight_kg, recorded_at=datetime.now(tz=UTC)
        )

    def recent(self, user_id: UUID, limit: int = 7) -> list[WeightEntry]:
        """Return the latest measurements, newest first."""
        return self.repository.list_recent(user_id, limit)
