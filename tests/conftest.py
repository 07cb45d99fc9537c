"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from meal_genie.adapters.fdc_client import FdcClient
from meal_genie.adapters.openfoodfacts_client import OpenFoodFactsClient
from meal_genie.config import Settings
from meal_genie.domain.errors import AnalysisClientError
from meal_genie.domain.profiles import UserNutritionProfile, WeightEntry
from meal_genie.services.analysis import AnalysisClient
from meal_genie.services.measurements import WeightEntryRepository
from meal_genie.services.profiles import ProfileRepository

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


FENCED_REPLY = """Here is the analysis of your meal:
```json
{
  "items": [
    {"name": "Grilled chicken", "calories": 220, "protein": 40, "carbs": 0, "fat": 6, "quantity": "150 g"},
    {"name": "Brown rice", "calories": 215, "protein": 5, "carbs": 45, "fat": 1.8, "quantity": "1 cup"}
  ],
  "totalCalories": 435,
  "totalProtein": 45,
  "totalCarbs": 45,
  "totalFat": 7.8,
  "healthInsights": ["🧠 Good protein balance", "💡 Add vegetables for fiber"]
}
```
Enjoy!"""  # noqa: E501


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed reply."""

    reply: str = FENCED_REPLY
    error: AnalysisClientError | None = None
    calls: list[dict[str, str]] = field(default_factory=list)

    async def analyze_image(
        self, *, model: str, image_data_url: str, prompt: str
    ) -> str:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "prompt": prompt}
        )
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserNutritionProfile] = field(default_factory=dict)
    updates: list[tuple[UUID, dict[str, object]]] = field(default_factory=list)

    def get_profile(self, user_id: UUID) -> UserNutritionProfile | None:
        return self.profiles.get(user_id)

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> None:
        self.updates.append((user_id, changes))


@dataclass
class InMemoryWeightEntryRepository(WeightEntryRepository):
    """In-memory weight entry repository for tests."""

    entries: list[WeightEntry] = field(default_factory=list)

    def create_entry(
        self, user_id: UUID, weight_kg: float, recorded_at: datetime
    ) -> WeightEntry:
        entry = WeightEntry(
            id=uuid4(), user_id=user_id, weight_kg=weight_kg, recorded_at=recorded_at
        )
        self.entries.append(entry)
        return entry

    def list_recent(self, user_id: UUID, limit: int) -> list[WeightEntry]:
        own = [entry for entry in self.entries if entry.user_id == user_id]
        return sorted(own, key=lambda entry: entry.recorded_at, reverse=True)[:limit]


@dataclass
class FakeFdcClient(FdcClient):
    """FDC client returning a canned search payload."""

    payload: dict[str, object] = field(default_factory=dict)
    error: Exception | None = None
    queries: list[tuple[str, int]] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 1) -> dict[str, object]:
        self.queries.append((query, page_size))
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Open Food Facts client returning canned products by barcode."""

    products: dict[str, dict[str, object]] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.requested.append(barcode)
        return self.products.get(barcode, {"status": 0})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        openrouter_api_key="openrouter-key",
        fdc_api_key=None,
    )


@pytest.fixture
def reference_profile() -> UserNutritionProfile:
    return UserNutritionProfile(id=uuid4())
