"""Tests for container wiring."""

import asyncio

from macro_chef.adapters.supabase_state_repository import SupabaseStateRepository
from macro_chef.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    state = container.catalog_service.state
    assert container.meal_plan_service.state is state
    assert isinstance(state.repository, SupabaseStateRepository)
    assert state.repository.table == settings.state_table
    asyncio.run(container.close_resources())
