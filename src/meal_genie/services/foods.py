"""Food lookups against USDA FoodData Central and Open Food Facts."""

import logging
import math
import re
from dataclasses import dataclass

import httpx

from meal_genie.adapters.fdc_client import FdcClient
from meal_genie.adapters.openfoodfacts_client import OpenFoodFactsClient
from meal_genie.domain.analysis import to_float
from meal_genie.domain.foods import BarcodeProduct, NutritionBasis, UsdaFood
from meal_genie.services.calculator import round_half_up

KJ_PER_KCAL = 4.184

_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """USDA name search and barcode lookup.

    Without an FDC client every USDA search comes back empty.
    """

    off_client: OpenFoodFactsClient
    fdc_client: FdcClient | None = None

    async def search_usda(self, query: str) -> UsdaFood | None:
        """Return macros of the top USDA match, or None on any failure."""
        if self.fdc_client is None:
            return None
        try:
            payload = await self.fdc_client.search_foods(query, page_size=1)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("USDA search failed for %r: %s", query, exc)
            return None
        return parse_usda_food(query, payload)

    async def lookup_barcode(self, barcode: str) -> BarcodeProduct | None:
        """Return the product for a barcode, or None when it is unknown."""
        code = barcode.strip()
        if not code:
            return None
        payload = await self.off_client.get_product(code)
        return parse_barcode_product(code, payload)


def parse_usda_food(query: str, payload: object) -> UsdaFood | None:
    """Map the first food of a search payload, matching nutrients by name."""
    foods = payload.get("foods") if isinstance(payload, dict) else None
    if not isinstance(foods, list) or not foods or not isinstance(foods[0], dict):
        return None
    food = foods[0]
    nutrients = food.get("foodNutrients")
    if not isinstance(nutrients, list):
        nutrients = []

    description = food.get("description")
    if not isinstance(description, str) or not description:
        description = query
    return UsdaFood(
        description=description,
        calories=_nutrient_value(nutrients, "energy")
        or _nutrient_value(nutrients, "calorie"),
        protein_g=_nutrient_value(nutrients, "protein"),
        carbs_g=_nutrient_value(nutrients, "carbohydrate"),
        fat_g=_nutrient_value(nutrients, "fat"),
    )


def parse_barcode_product(barcode: str, payload: object) -> BarcodeProduct | None:
    """Map a product payload, preferring per-serving values over per-100 g."""
    if not isinstance(payload, dict) or payload.get("status") != 1:
        return None
    product = payload.get("product")
    if not isinstance(product, dict) or not product:
        return None
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}

    def serving_and_100g(name: str) -> tuple[float | None, float | None]:
        return (
            safe_number(nutriments.get(f"{name}_serving")),
            safe_number(nutriments.get(f"{name}_100g")),
        )

    energy_serving = _first_present(
        safe_number(nutriments.get("energy-kcal_serving")),
        kj_to_kcal(safe_number(nutriments.get("energy_serving"))),
    )
    energy_100g = _first_present(
        safe_number(nutriments.get("energy-kcal_100g")),
        kj_to_kcal(safe_number(nutriments.get("energy_100g"))),
    )
    per = NutritionBasis.PER_100G if energy_serving is None else NutritionBasis.SERVING

    return BarcodeProduct(
        barcode=barcode,
        product_name=_text(product, "product_name", "generic_name"),
        brand=_text(product, "brands"),
        image_url=_text(product, "image_front_small_url", "image_url"),
        serving_size=_text(product, "serving_size"),
        per=per,
        energy_kcal=_first_present(energy_serving, energy_100g),
        protein=_first_present(*serving_and_100g("proteins")),
        carbs=_first_present(*serving_and_100g("carbohydrates")),
        fat=_first_present(*serving_and_100g("fat")),
        fiber=_first_present(*serving_and_100g("fiber")),
        sodium=_first_present(*serving_and_100g("sodium")),
    )


def safe_number(value: object) -> float | None:
    """Read a finite number from a number or the numeric prefix of a string."""
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        number = float(match.group(1)) if match else None
    else:
        number = to_float(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def kj_to_kcal(kilojoules: float | None) -> float | None:
    """Convert kJ to kcal, rounded half up to one decimal."""
    if kilojoules is None:
        return None
    return round_half_up(kilojoules / KJ_PER_KCAL * 10) / 10


def _nutrient_value(nutrients: list[object], keyword: str) -> float | None:
    # Only the first nutrient whose name contains the keyword is considered.
    for nutrient in nutrients:
        if not isinstance(nutrient, dict):
            continue
        name = nutrient.get("nutrientName")
        if isinstance(name, str) and keyword in name.lower():
            return to_float(nutrient.get("value"))
    return None


def _first_present(*values: float | None) -> float | None:
    for value in values:
        if value is not None:
            return value
    return None


def _text(product: dict[str, object], *keys: str) -> str | None:
    for key in keys:
        value = product.get(key)
        if isinstance(value, str) and value:
            return value
    return None
