"""Food lookup models for USDA and barcode results."""

from dataclasses import dataclass
from enum import StrEnum

USDA_SOURCE = "USDA FDC"


class NutritionBasis(StrEnum):
    SERVING = "serving"
    PER_100G = "100g"


@dataclass(frozen=True)
class UsdaFood:
    """Top USDA FoodData Central match for a food name."""

    description: str
    calories: float | None
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    source: str = USDA_SOURCE


@dataclass(frozen=True)
class BarcodeProduct:
    """Packaged product from Open Food Facts.

    Every nutrient value is either per serving or per 100 g; ``per`` follows
    the basis the energy value was taken from.
    """

    barcode: str
    product_name: str | None
    brand: str | None
    image_url: str | None
    serving_size: str | None
    per: NutritionBasis
    energy_kcal: float | None
    protein: float | None
    carbs: float | None
    fat: float | None
    fiber: float | None
    sodium: float | None
