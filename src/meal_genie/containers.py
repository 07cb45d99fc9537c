"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_genie.adapters.fdc_client import HttpxFdcClient
from meal_genie.adapters.openai_analysis_client import OpenAIAnalysisClient
from meal_genie.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from meal_genie.adapters.openrouter_client import HttpxOpenRouterClient
from meal_genie.adapters.supabase_profile_repository import SupabaseProfileRepository
from meal_genie.adapters.supabase_weight_entry_repository import (
    SupabaseWeightEntryRepository,
)
from meal_genie.config import Settings
from meal_genie.services.analysis import FoodAnalysisService
from meal_genie.services.foods import FoodLookupService
from meal_genie.services.measurements import WeightEntryService
from meal_genie.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: FoodAnalysisService
    profile_service: ProfileService
    weight_entry_service: WeightEntryService
    food_lookup_service: FoodLookupService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    analysis_client: OpenAIAnalysisClient | HttpxOpenRouterClient
    if resolved_settings.analysis_provider == "openrouter":
        analysis_client = HttpxOpenRouterClient.create(
            api_key=resolved_settings.analysis_api_key(),
            base_url=resolved_settings.openrouter_base_url,
        )
    else:
        analysis_client = OpenAIAnalysisClient.create(
            resolved_settings.analysis_api_key(),
            store=resolved_settings.openai_store,
        )
    analysis_service = FoodAnalysisService(
        client=analysis_client,
        model=resolved_settings.analysis_model(),
    )
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))
    weight_entry_service = WeightEntryService(
        SupabaseWeightEntryRepository(supabase_client)
    )
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url
    )
    fdc_client = (
        HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )
        if resolved_settings.fdc_api_key
        else None
    )
    food_lookup_service = FoodLookupService(
        off_client=off_client, fdc_client=fdc_client
    )

    async def close_resources() -> None:
        await analysis_client.close()
        await off_client.close()
        if fdc_client is not None:
            await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        profile_service=profile_service,
        weight_entry_service=weight_entry_service,
        food_lookup_service=food_lookup_service,
        close_resources=close_resources,
    )
