"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_chef.adapters.supabase_state_repository import SupabaseStateRepository
from macro_chef.config import Settings
from macro_chef.services.catalog import CatalogService
from macro_chef.services.meals import MealPlanService
from macro_chef.services.state import StateService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    meal_plan_service: MealPlanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    state_repository = SupabaseStateRepository(
        supabase_client, table=resolved_settings.state_table
    )
    state_service = StateService(state_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        catalog_service=CatalogService(state_service),
        meal_plan_service=MealPlanService(state_service),
        close_resources=close_resources,
    )
