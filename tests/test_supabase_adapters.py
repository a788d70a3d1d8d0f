"""Tests for the Supabase state repository."""

from macro_chef.adapters.supabase_state_repository import SupabaseStateRepository
from macro_chef.domain.meals import EntryKind, MealType
from macro_chef.services.catalog import CatalogService
from macro_chef.services.meals import MealPlanService
from macro_chef.services.state import INGREDIENTS_KEY, StateService
from tests.conftest import FakeSupabaseClient


def test_load_missing_key_returns_none() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseStateRepository(client)

    assert repository.load(INGREDIENTS_KEY) is None
    assert client.tables["macro_chef_state"].last_filters == []


def test_save_upserts_by_key() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseStateRepository(client, table="state")

    repository.save(INGREDIENTS_KEY, [{"name": "Oats"}])
    repository.save(INGREDIENTS_KEY, [{"name": "Rice"}])

    table = client.tables["state"]
    assert table.last_on_conflict == "key"
    assert table.last_payload["key"] == INGREDIENTS_KEY
    assert "updated_at" in table.last_payload
    assert list(table.rows) == [INGREDIENTS_KEY]
    assert repository.load(INGREDIENTS_KEY) == [{"name": "Rice"}]


def test_services_round_trip_through_supabase() -> None:
    state = StateService(SupabaseStateRepository(FakeSupabaseClient()))
    catalog_service = CatalogService(state)
    meal_plan_service = MealPlanService(state)
    oats = catalog_service.create_ingredient(
        {"name": "Oats", "protein": 13, "carbs": 68, "fats": 6.5}
    )

    meal_plan_service.add_entry(MealType.BREAKFAST, EntryKind.INGREDIENT, oats.id, 50)

    assert catalog_service.list_ingredients() == [oats]
    summary = meal_plan_service.summarize_day()
    assert summary.totals.protein_g == 6.5
    assert summary.totals.calories == 192
