"""Models for AI food analysis results."""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

UNKNOWN_FOOD = "Unknown food"
DEFAULT_QUANTITY = "1 serving"


def is_number(value: object) -> bool:
    """Return True for JSON numbers; booleans do not count."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def to_float(value: object) -> float | None:
    """Return a JSON number as a float, or None when it is not a number.

    Integers beyond the float range become signed infinity instead of raising.
    """
    if not is_number(value):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except OverflowError:
        return math.inf if value > 0 else -math.inf  # type: ignore[operator]


class FoodItem(BaseModel):
    """Single food item with its estimated macros."""

    model_config = ConfigDict(frozen=True)

    name: str = UNKNOWN_FOOD
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    quantity: str = DEFAULT_QUANTITY

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: object) -> object:
        if isinstance(value, str) and value:
            return value
        return UNKNOWN_FOOD

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: object) -> object:
        if isinstance(value, str) and value:
            return value
        return DEFAULT_QUANTITY

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _default_number(cls, value: object) -> object:
        number = to_float(value)
        return 0 if number is None else number


class FoodAnalysis(BaseModel):
    """Normalized analysis of a meal.

    Totals are either the values the model reported or, when those were not
    numbers, the sums of the per-item values.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[FoodItem, ...]
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    health_insights: tuple[str, ...] = ()
    created_at: datetime

    def to_payload(self) -> dict[str, object]:
        """Return the analysis in the wire shape the AI service produces."""
        return {
            "items": [item.model_dump() for item in self.items],
            "totalCalories": self.total_calories,
            "totalProtein": self.total_protein,
            "totalCarbs": self.total_carbs,
            "totalFat": self.total_fat,
            "healthInsights": list(self.health_insights),
        }


class InsightLine(BaseModel):
    """Insight text split into its leading marker and content."""

    model_config = ConfigDict(frozen=True)

    emoji: str
    content: str
