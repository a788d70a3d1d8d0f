"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from macro_chef.config import Settings
from macro_chef.containers import AppContainer
from macro_chef.domain.catalog import Catalog, Ingredient
from macro_chef.services.catalog import CatalogService
from macro_chef.services.meals import MealPlanService
from macro_chef.services.state import StateRepository, StateService


@dataclass
class InMemoryStateRepository(StateRepository):
    """In-memory blob store for tests."""

    blobs: dict[str, object] = field(default_factory=dict)
    saves: list[str] = field(default_factory=list)

    def load(self, key: str) -> object | None:
        return copy.deepcopy(self.blobs.get(key))

    def save(self, key: str, value: object) -> None:
        self.blobs[key] = copy.deepcopy(value)
        self.saves.append(key)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: dict[str, dict[str, object]] = field(default_factory=dict)
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        if action == "upsert":
            row = dict(self.last_payload)
            self.rows[row["key"]] = row
            return FakeResponse(data=[row])
        key = dict(self.last_filters).get("key")
        self.last_filters = []
        row = self.rows.get(key)
        return FakeResponse(data=[row] if row else [])


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def make_ingredient(  # noqa: PLR0913
    name: str,
    protein: float,
    carbs: float,
    fats: float,
    calories: float,
    portion: float = 100,
    unit: str = "g",
) -> Ingredient:
    return Ingredient(
        id=uuid4(),
        name=name,
        portion=portion,
        unit=unit,
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fats,
        calories=calories,
    )


@pytest.fixture
def chicken() -> Ingredient:
    return make_ingredient(
        "Chicken Breast", protein=31, carbs=0, fats=3.6, calories=156
    )


@pytest.fixture
def rice() -> Ingredient:
    return make_ingredient("White Rice", protein=2.6, carbs=28, fats=0.3, calories=130)


@pytest.fixture
def catalog(chicken: Ingredient, rice: Ingredient) -> Catalog:
    return Catalog.of(ingredients=[chicken, rice])


@pytest.fixture
def state_repository() -> InMemoryStateRepository:
    return InMemoryStateRepository()


@pytest.fixture
def state_service(state_repository: InMemoryStateRepository) -> StateService:
    return StateService(state_repository)


@pytest.fixture
def catalog_service(state_service: StateService) -> CatalogService:
    return CatalogService(state_service)


@pytest.fixture
def meal_plan_service(state_service: StateService) -> MealPlanService:
    return MealPlanService(state_service)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def container(
    settings: Settings,
    catalog_service: CatalogService,
    meal_plan_service: MealPlanService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_service=catalog_service,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )
