"""Calorie and macro targets derived from a nutrition profile.

BMR uses the Mifflin-St Jeor equation. Every rounded value is rounded half up,
so results match what users have already seen in the app.
"""

import math
from dataclasses import dataclass, replace

from meal_genie.domain.profiles import (
    DEFAULT_AGE,
    DEFAULT_HEIGHT_CM,
    DEFAULT_WEIGHT_KG,
    ActivityLevel,
    CalorieCalculatorResult,
    Gender,
    MacroTarget,
    NutritionGoal,
    UserNutritionProfile,
)

BMR_GENDER_OFFSETS: dict[Gender, float] = {
    Gender.MALE: 5,
    Gender.FEMALE: -161,
}

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}

GOAL_ADJUSTMENTS: dict[NutritionGoal, int] = {
    NutritionGoal.WEIGHT_LOSS: -500,
    NutritionGoal.MAINTENANCE: 0,
    NutritionGoal.WEIGHT_GAIN: 500,
    NutritionGoal.MUSCLE_BUILDING: 300,
}


@dataclass(frozen=True)
class MacroSplit:
    """Fractions of daily calories per macronutrient."""

    protein: float
    fat: float
    carbs: float


MACRO_SPLITS: dict[NutritionGoal, MacroSplit] = {
    NutritionGoal.WEIGHT_LOSS: MacroSplit(protein=0.40, fat=0.30, carbs=0.30),
    NutritionGoal.MAINTENANCE: MacroSplit(protein=0.30, fat=0.30, carbs=0.40),
    NutritionGoal.WEIGHT_GAIN: MacroSplit(protein=0.25, fat=0.25, carbs=0.50),
    NutritionGoal.MUSCLE_BUILDING: MacroSplit(protein=0.35, fat=0.25, carbs=0.40),
}
KETO_SPLIT = MacroSplit(protein=0.20, fat=0.75, carbs=0.05)
KETO = "keto"

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9

_ACTIVITY_TEXT = {
    ActivityLevel.SEDENTARY: "sedentary (little or no exercise)",
    ActivityLevel.LIGHTLY_ACTIVE: "lightly active (light exercise 1-3 days/week)",
    ActivityLevel.MODERATELY_ACTIVE: (
        "moderately active (moderate exercise 3-5 days/week)"
    ),
    ActivityLevel.VERY_ACTIVE: "very active (hard exercise 6-7 days/week)",
    ActivityLevel.EXTREMELY_ACTIVE: (
        "extremely active (very hard exercise, physical job or training twice a day)"
    ),
}
_GOAL_TEXT = {
    NutritionGoal.WEIGHT_LOSS: "weight loss",
    NutritionGoal.MAINTENANCE: "weight maintenance",
    NutritionGoal.WEIGHT_GAIN: "weight gain",
    NutritionGoal.MUSCLE_BUILDING: "muscle building",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def sanitize_profile(profile: UserNutritionProfile) -> UserNutritionProfile:
    """Replace non-positive or non-finite body metrics with safe defaults."""
    return replace(
        profile,
        age=profile.age if _is_positive(profile.age) else DEFAULT_AGE,
        height_cm=(
            profile.height_cm if _is_positive(profile.height_cm) else DEFAULT_HEIGHT_CM
        ),
        weight_kg=(
            profile.weight_kg if _is_positive(profile.weight_kg) else DEFAULT_WEIGHT_KG
        ),
    )


def calculate_bmr(profile: UserNutritionProfile) -> int:
    """Return basal metabolic rate in kcal/day."""
    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    bmr += BMR_GENDER_OFFSETS[profile.gender]
    return round_half_up(bmr)


def calculate_tdee(bmr: int, activity_level: ActivityLevel) -> int:
    """Return total daily energy expenditure in kcal/day."""
    return round_half_up(bmr * ACTIVITY_MULTIPLIERS[activity_level])


def calculate_goal_calories(tdee: int, goal: NutritionGoal) -> int:
    """Return the daily calorie target for a goal."""
    return round_half_up(tdee + GOAL_ADJUSTMENTS[goal])


def macro_split_for(
    goal: NutritionGoal, dietary_restrictions: tuple[str, ...] = ()
) -> MacroSplit:
    """Return the macro split, letting a keto diet override the goal."""
    if KETO in dietary_restrictions:
        return KETO_SPLIT
    return MACRO_SPLITS[goal]


def calculate_macro_breakdown(
    goal_calories: int, split: MacroSplit
) -> tuple[MacroTarget, MacroTarget, MacroTarget]:
    """Return protein, carbs and fat targets for a calorie budget."""
    protein_calories = goal_calories * split.protein
    fat_calories = goal_calories * split.fat
    carbs_calories = goal_calories * split.carbs
    protein = MacroTarget(
        grams=round_half_up(protein_calories / CALORIES_PER_GRAM_PROTEIN),
        calories=round_half_up(protein_calories),
        percentage=round_half_up(split.protein * 100),
    )
    carbs = MacroTarget(
        grams=round_half_up(carbs_calories / CALORIES_PER_GRAM_CARBS),
        calories=round_half_up(carbs_calories),
        percentage=round_half_up(split.carbs * 100),
    )
    fat = MacroTarget(
        grams=round_half_up(fat_calories / CALORIES_PER_GRAM_FAT),
        calories=round_half_up(fat_calories),
        percentage=round_half_up(split.fat * 100),
    )
    return protein, carbs, fat


def calculate_nutrition(profile: UserNutritionProfile) -> CalorieCalculatorResult:
    """Calculate BMR, TDEE, calorie target and macros for a profile.

    The result is always computed from scratch; callers replace any previous
    result with the new one.
    """
    safe = sanitize_profile(profile)
    bmr = calculate_bmr(safe)
    tdee = calculate_tdee(bmr, safe.activity_level)
    goal_calories = calculate_goal_calories(tdee, safe.goal)
    protein, carbs, fat = calculate_macro_breakdown(
        goal_calories, macro_split_for(safe.goal, safe.dietary_restrictions)
    )
    explanation = _explain(safe, bmr, tdee, goal_calories, protein, carbs, fat)
    return CalorieCalculatorResult(
        bmr=bmr,
        tdee=tdee,
        goal_calories=goal_calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        explanation=explanation,
    )


def _explain(  # noqa: PLR0913
    profile: UserNutritionProfile,
    bmr: int,
    tdee: int,
    goal_calories: int,
    protein: MacroTarget,
    carbs: MacroTarget,
    fat: MacroTarget,
) -> str:
    diet_text = ""
    if profile.dietary_restrictions:
        diet_text = (
            "\n\nDietary preference: "
            f"{', '.join(profile.dietary_restrictions)}."
        )
        if KETO in profile.dietary_restrictions:
            diet_text += " Macros adjusted for keto (very low carbs)."
    return (
        f"Based on your profile as a {profile.age}-year-old {profile.gender} "
        f"weighing {_format_number(profile.weight_kg)}kg at "
        f"{_format_number(profile.height_cm)}cm tall with a "
        f"{_ACTIVITY_TEXT[profile.activity_level]} lifestyle, your Basal Metabolic "
        f"Rate (BMR) is {bmr} calories per day. This is the energy your body "
        "needs at complete rest.\n\n"
        "With your activity level, your Total Daily Energy Expenditure (TDEE) is "
        f"{tdee} calories per day. For your goal of {_GOAL_TEXT[profile.goal]}, "
        f"your daily calorie target is {goal_calories} calories.{diet_text}\n\n"
        "For optimal results, aim for:\n"
        f"• {protein.grams}g of protein ({protein.percentage}% of calories)\n"
        f"• {carbs.grams}g of carbohydrates ({carbs.percentage}% of calories)\n"
        f"• {fat.grams}g of fat ({fat.percentage}% of calories)"
    )


def _format_number(value: float) -> str:
    return f"{value:g}"


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0
