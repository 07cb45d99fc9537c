"""Nutrition profile loading, updating and calculation."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from meal_genie.domain.outcomes import Failed, Ready
from meal_genie.domain.profiles import (
    ActivityLevel,
    Gender,
    NutritionGoal,
    ProfileCalculation,
    UserNutritionProfile,
)
from meal_genie.services.calculator import calculate_nutrition

PROFILE_NOT_FOUND = "profile_not_found"

EDITABLE_FIELDS = frozenset(
    {
        "age",
        "gender",
        "height_cm",
        "weight_kg",
        "activity_level",
        "goal",
        "dietary_restrictions",
    }
)

_ENUM_FIELDS = {
    "gender": Gender,
    "activity_level": ActivityLevel,
    "goal": NutritionGoal,
}

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for nutrition profiles."""

    def get_profile(self, user_id: UUID) -> UserNutritionProfile | None:
        """Return the user's profile with defaults applied, if present."""

    def update_profile(self, user_id: UUID, changes: dict[str, object]) -> None:
        """Persist changed profile fields."""


@dataclass
class ProfileService:
    """Service that keeps calculator results in step with profiles."""

    repository: ProfileRepository

    def load(self, user_id: UUID) -> Ready[ProfileCalculation] | Failed:
        """Load a profile and calculate its targets."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            _logger.info("No nutrition profile for user %s", user_id)
            return Failed(reason=PROFILE_NOT_FOUND)
        return Ready(self.calculate_only(profile))

    def update(
        self, current: UserNutritionProfile, **changes: object
    ) -> Ready[ProfileCalculation]:
        """Apply changes, recalculate from scratch and persist the changes.

        Enum fields accept their stored string values; anything else raises
        ValueError before the repository is touched.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        coerced = {name: _coerce(name, value) for name, value in changes.items()}
        updated = replace(current, **coerced)
        calculation = self.calculate_only(updated)
        if coerced:
            self.repository.update_profile(current.id, coerced)
        return Ready(calculation)

    def calculate_only(self, profile: UserNutritionProfile) -> ProfileCalculation:
        """Calculate targets without touching persistence."""
        return ProfileCalculation(profile=profile, result=calculate_nutrition(profile))


def _coerce(name: str, value: object) -> object:
    enum_type = _ENUM_FIELDS.get(name)
    if enum_type is not None:
        return enum_type(value)
    if name == "dietary_restrictions":
        if isinstance(value, str):
            return (value,)
        return tuple(value)  # type: ignore[call-overload]
    return value
