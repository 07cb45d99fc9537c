"""Supabase repository for nutrition profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeVar
from uuid import UUID

from supabase import Client

from meal_genie.domain.profiles import (
    DEFAULT_AGE,
    DEFAULT_HEIGHT_CM,
    DEFAULT_WEIGHT_KG,
    ActivityLevel,
    Gender,
    NutritionGoal,
    UserNutritionProfile,
)
from meal_genie.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "id, age, gender, height_cm, current_weight_kg, activity_level, "
    "health_goal, dietary_restrictions"
)
_COLUMN_FOR_FIELD = {
    "age": "age",
    "gender": "gender",
    "height_cm": "height_cm",
    "weight_kg": "current_weight_kg",
    "activity_level": "activity_level",
    "goal": "health_goal",
    "dietary_restrictions": "dietary_restrictions",
}

E = TypeVar("E", bound=StrEnum)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles table."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserNutritionProfile | None:
        """Return the profile row mapped onto a calculator profile."""
        response = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> None:
        """Write the changed fields to their profile columns."""
        payload: dict[str, object] = {
            _COLUMN_FOR_FIELD[name]: _to_column_value(value)
            for name, value in changes.items()
        }
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        self.client.table("profiles").update(payload).eq("id", str(user_id)).execute()


def _parse_row(row: dict[str, object]) -> UserNutritionProfile:
    restrictions = row.get("dietary_restrictions")
    return UserNutritionProfile(
        id=UUID(str(row["id"])),
        age=int(_number_or_default(row.get("age"), DEFAULT_AGE)),
        gender=_enum_or_default(Gender, row.get("gender"), Gender.MALE),
        height_cm=_number_or_default(row.get("height_cm"), DEFAULT_HEIGHT_CM),
        weight_kg=_number_or_default(row.get("current_weight_kg"), DEFAULT_WEIGHT_KG),
        activity_level=_enum_or_default(
            ActivityLevel, row.get("activity_level"), ActivityLevel.MODERATELY_ACTIVE
        ),
        goal=_enum_or_default(
            NutritionGoal, row.get("health_goal"), NutritionGoal.MAINTENANCE
        ),
        dietary_restrictions=(
            tuple(str(entry) for entry in restrictions)
            if isinstance(restrictions, list)
            else ()
        ),
    )


def _number_or_default(value: object, default: float) -> float:
    """Coerce numeric columns; empty, zero or unparsable values use the default."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number or number == 0:
        return default
    return number


def _enum_or_default(enum_type: type[E], value: object, default: E) -> E:
    try:
        return enum_type(value)
    except ValueError:
        return default


def _to_column_value(value: object) -> object:
    if isinstance(value, StrEnum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value
