"""Domain models for nutrition profiles and measurements."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Gender(StrEnum):
    """Gender used to select the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"


class NutritionGoal(StrEnum):
    """Goal that drives the calorie offset and macro split."""

    WEIGHT_LOSS = "weight_loss"
    MAINTENANCE = "maintenance"
    WEIGHT_GAIN = "weight_gain"
    MUSCLE_BUILDING = "muscle_building"


DEFAULT_AGE = 30
DEFAULT_HEIGHT_CM = 170.0
DEFAULT_WEIGHT_KG = 70.0


@dataclass(frozen=True)
class UserNutritionProfile:
    """Inputs for the calorie calculator."""

    id: UUID
    age: int = DEFAULT_AGE
    gender: Gender = Gender.MALE
    height_cm: float = DEFAULT_HEIGHT_CM
    weight_kg: float = DEFAULT_WEIGHT_KG
    activity_level: ActivityLevel = ActivityLevel.MODERATELY_ACTIVE
    goal: NutritionGoal = NutritionGoal.MAINTENANCE
    dietary_restrictions: tuple[str, ...] = ()


@dataclass(frozen=True)
class MacroTarget:
    """Daily target for one macronutrient."""

    grams: int
    calories: int
    percentage: int


@dataclass(frozen=True)
class CalorieCalculatorResult:
    """Calculated energy needs and macro targets."""

    bmr: int
    tdee: int
    goal_calories: int
    protein: MacroTarget
    carbs: MacroTarget
    fat: MacroTarget
    explanation: str


@dataclass(frozen=True)
class ProfileCalculation:
    """A profile together with the result calculated from it."""

    profile: UserNutritionProfile
    result: CalorieCalculatorResult


@dataclass(frozen=True)
class WeightEntry:
    """Recorded body weight measurement."""

    id: UUID
    user_id: UUID
    weight_kg: float
    recorded_at: datetime
