"""Errors raised inside the analysis pipeline."""


class MealGenieError(Exception):
    """Base class for meal genie errors."""


class ExtractionFailure(MealGenieError):
    """No decodable JSON payload was found in a model response."""


class ShapeFailure(MealGenieError):
    """Decoded payload does not carry an items list."""


class AnalysisClientError(MealGenieError):
    """The upstream AI service failed or returned nothing usable."""
