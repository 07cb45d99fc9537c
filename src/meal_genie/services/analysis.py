"""Food analysis: prompt the AI service and normalize its free-form reply."""

import base64
import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from pydantic import ValidationError

from meal_genie.domain.analysis import FoodAnalysis, FoodItem, to_float
from meal_genie.domain.errors import (
    AnalysisClientError,
    ExtractionFailure,
    MealGenieError,
    ShapeFailure,
)
from meal_genie.domain.outcomes import Failed, Ready

ANALYSIS_UNAVAILABLE = "analysis_unavailable"
UPSTREAM_ERROR = "upstream_error"

ANALYSIS_PROMPT = """You are a nutrition assistant.

Return ONLY a JSON object (no extra words), matching exactly this schema:
{
  "items": [
    {"name": string, "calories": number, "protein": number, "carbs": number, "fat": number, "quantity": string}
  ],
  "totalCalories": number,
  "totalProtein": number,
  "totalCarbs": number,
  "totalFat": number,
  "healthInsights": [string]
}

Rules:
- Use numbers only for nutrition fields (no units in values).
- Estimate portions in "quantity" as a short string (e.g., "1 cup", "150 g").
- Start each health insight with a single emoji.
- If you cannot identify any food, return an empty items array.
Analyze the food in the image and follow the schema strictly."""  # noqa: E501

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")

_TOTAL_FIELDS = (
    ("totalCalories", "calories"),
    ("totalProtein", "protein"),
    ("totalCarbs", "carbs"),
    ("totalFat", "fat"),
)

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class AnalysisClient(Protocol):
    """Interface for the AI service that looks at meal photos."""

    async def analyze_image(
        self, *, model: str, image_data_url: str, prompt: str
    ) -> str:
        """Return the model's raw text reply."""


@dataclass
class FoodAnalysisService:
    """Service that requests meal analyses and validates the replies."""

    client: AnalysisClient
    model: str
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def analyze(self, image_bytes: bytes) -> Ready[FoodAnalysis] | Failed:
        """Analyze a meal photo via the configured client."""
        try:
            text = await self.client.analyze_image(
                model=self.model,
                image_data_url=_to_data_url(image_bytes),
                prompt=ANALYSIS_PROMPT,
            )
        except AnalysisClientError as exc:
            _logger.warning("Food analysis request failed: %s", exc)
            return Failed(reason=UPSTREAM_ERROR, detail=str(exc))
        return self.analyze_text(text)

    def analyze_text(self, text: str) -> Ready[FoodAnalysis] | Failed:
        """Turn an already received reply into an outcome."""
        analysis = parse_food_analysis(text, clock=self.clock)
        if analysis is None:
            return Failed(reason=ANALYSIS_UNAVAILABLE)
        return Ready(analysis)


def parse_food_analysis(
    response: str, clock: Callable[[], datetime] = _utcnow
) -> FoodAnalysis | None:
    """Parse a model reply into a FoodAnalysis, or None when impossible."""
    candidate = extract_json_candidate(response)
    try:
        return normalize_analysis(_decode(candidate), created_at=clock())
    except (MealGenieError, ValidationError) as exc:
        _logger.warning(
            "Could not parse food analysis (%s): %s; response was: %r",
            type(exc).__name__,
            exc,
            response,
        )
        return None


def extract_json_candidate(text: str) -> str:
    """Return the substring most likely to hold the JSON payload.

    A fenced block wins over a bare brace span; with neither, the text is
    returned untouched and decoding will reject it.
    """
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        return fenced.group(1)
    braces = _BRACE_SPAN.search(text)
    if braces:
        return braces.group(0)
    return text


def normalize_analysis(raw: object, created_at: datetime) -> FoodAnalysis:
    """Validate a decoded payload, filling defaults and missing totals."""
    if not isinstance(raw, dict) or not isinstance(raw.get("items"), list):
        raise ShapeFailure("payload has no items list")

    items = tuple(
        FoodItem.model_validate(entry if isinstance(entry, dict) else {})
        for entry in raw["items"]
    )
    totals: dict[str, float] = {}
    for total_key, item_field in _TOTAL_FIELDS:
        provided = to_float(raw.get(total_key))
        if provided is not None:
            totals[total_key] = provided
        else:
            totals[total_key] = sum(getattr(item, item_field) for item in items)

    raw_insights = raw.get("healthInsights")
    insights = (
        tuple(entry for entry in raw_insights if isinstance(entry, str))
        if isinstance(raw_insights, list)
        else ()
    )
    return FoodAnalysis(
        items=items,
        total_calories=totals["totalCalories"],
        total_protein=totals["totalProtein"],
        total_carbs=totals["totalCarbs"],
        total_fat=totals["totalFat"],
        health_insights=insights,
        created_at=created_at,
    )


def _decode(candidate: str) -> object:
    try:
        return json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ExtractionFailure(str(exc)) from exc


def _reject_constant(name: str) -> float:
    """Refuse NaN and Infinity, which are not valid JSON."""
    raise ValueError(f"invalid JSON constant {name}")


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
