"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from macro_chef.api.schemas import (
    CustomizationPayload,
    IngredientCreate,
    MealEntryCreate,
    QuantityUpdate,
    RecipeCreate,
)
from macro_chef.app_logging import configure_logging
from macro_chef.config import parse_log_level
from macro_chef.containers import AppContainer
from macro_chef.domain.errors import (
    CatalogValidationError,
    CustomizationError,
    IngredientImportError,
    IngredientNotFoundError,
    MealEntryNotFoundError,
    MealEntryValidationError,
    RecipeNotFoundError,
    SourceNotFoundError,
)
from macro_chef.domain.meals import DaySummary, MealEntry, MealSummary, MealType
from macro_chef.services.codec import (
    dump_entry,
    dump_ingredient,
    dump_recipe,
    dump_totals,
)

_BAD_REQUEST_ERRORS = (
    CatalogValidationError,
    CustomizationError,
    IngredientImportError,
    MealEntryValidationError,
)
_NOT_FOUND_ERRORS = (
    IngredientNotFoundError,
    MealEntryNotFoundError,
    RecipeNotFoundError,
    SourceNotFoundError,
)


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_token(
    request: Request, x_api_token: str | None = Header(default=None)
) -> None:
    """Ensure mutating requests carry the API token when one is configured."""
    expected = _get_container(request).settings.api_token
    if expected and x_api_token != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(parse_log_level(container.settings.log_level))
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    guarded = [Depends(require_token)]

    async def bad_request(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    async def invalid_request(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"detail": jsonable_encoder(exc.errors())}
        )

    async def not_found(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    async def storage_failure(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("State storage failed", exc_info=exc)
        return JSONResponse(
            status_code=503, content={"detail": "Storage unavailable"}
        )

    for error in _BAD_REQUEST_ERRORS:
        app.add_exception_handler(error, bad_request)
    for error in _NOT_FOUND_ERRORS:
        app.add_exception_handler(error, not_found)
    app.add_exception_handler(RequestValidationError, invalid_request)
    app.add_exception_handler(RuntimeError, storage_failure)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/ingredients")
    async def list_ingredients(request: Request) -> dict[str, object]:
        service = _get_container(request).catalog_service
        ingredients = service.list_ingredients()
        return {"ingredients": [dump_ingredient(item) for item in ingredients]}

    @app.post("/ingredients", status_code=201, dependencies=guarded)
    async def create_ingredient(
        payload: IngredientCreate, request: Request
    ) -> dict[str, object]:
        service = _get_container(request).catalog_service
        ingredient = service.create_ingredient(payload.model_dump())
        return dump_ingredient(ingredient)

    @app.delete(
        "/ingredients/{ingredient_id}", status_code=204, dependencies=guarded
    )
    async def delete_ingredient(ingredient_id: UUID, request: Request) -> Response:
        _get_container(request).catalog_service.delete_ingredient(ingredient_id)
        return Response(status_code=204)

    @app.post("/ingredients/import", dependencies=guarded)
    async def import_ingredients(request: Request) -> dict[str, object]:
        """Import a JSON array of ingredients sent as the raw request body."""
        service = _get_container(request).catalog_service
        imported = service.import_ingredients(await request.body())
        return {
            "imported": len(imported),
            "ingredients": [dump_ingredient(item) for item in imported],
        }

    @app.get("/ingredients/export")
    async def export_ingredients(request: Request) -> Response:
        content = _get_container(request).catalog_service.export_ingredients()
        return Response(
            content=content,
            media_type="application/json",
            headers={
                "Content-Disposition": 'attachment; filename="ingredients.json"'
            },
        )

    @app.get("/recipes")
    async def list_recipes(request: Request) -> dict[str, object]:
        service = _get_container(request).catalog_service
        return {"recipes": [dump_recipe(item) for item in service.list_recipes()]}

    @app.post("/recipes", status_code=201, dependencies=guarded)
    async def create_recipe(
        payload: RecipeCreate, request: Request
    ) -> dict[str, object]:
        service = _get_container(request).catalog_service
        recipe = service.create_recipe(payload.model_dump())
        return dump_recipe(recipe)

    @app.delete("/recipes/{recipe_id}", status_code=204, dependencies=guarded)
    async def delete_recipe(recipe_id: UUID, request: Request) -> Response:
        _get_container(request).catalog_service.delete_recipe(recipe_id)
        return Response(status_code=204)

    @app.get("/meals")
    async def day_summary(request: Request) -> dict[str, object]:
        """Return every meal with per-entry, per-meal and day totals."""
        summary = _get_container(request).meal_plan_service.summarize_day()
        return _dump_day(summary)

    @app.get("/meals/totals")
    async def day_totals(request: Request) -> dict[str, object]:
        summary = _get_container(request).meal_plan_service.summarize_day()
        return dump_totals(summary.totals)

    @app.post("/meals/{meal}/entries", status_code=201, dependencies=guarded)
    async def add_entry(
        meal: MealType, payload: MealEntryCreate, request: Request
    ) -> dict[str, object]:
        service = _get_container(request).meal_plan_service
        entry = service.add_entry(
            meal, payload.kind, payload.source_id, payload.quantity
        )
        return _dump_entry(entry)

    @app.patch("/meals/{meal}/entries/{entry_id}", dependencies=guarded)
    async def update_quantity(
        meal: MealType, entry_id: UUID, payload: QuantityUpdate, request: Request
    ) -> dict[str, object]:
        service = _get_container(request).meal_plan_service
        entry = service.update_quantity(meal, entry_id, payload.quantity)
        return _dump_entry(entry)

    @app.delete(
        "/meals/{meal}/entries/{entry_id}", status_code=204, dependencies=guarded
    )
    async def remove_entry(
        meal: MealType, entry_id: UUID, request: Request
    ) -> Response:
        _get_container(request).meal_plan_service.remove_entry(meal, entry_id)
        return Response(status_code=204)

    @app.put("/meals/{meal}/entries/{entry_id}/customization", dependencies=guarded)
    async def customize_entry(
        meal: MealType,
        entry_id: UUID,
        payload: CustomizationPayload,
        request: Request,
    ) -> dict[str, object]:
        """Save custom ingredient quantities for one recipe entry."""
        service = _get_container(request).meal_plan_service
        entry = service.customize_entry(meal, entry_id, _lines(payload))
        return _dump_entry(entry)

    @app.post("/meals/{meal}/entries/{entry_id}/customization/preview")
    async def preview_customization(
        meal: MealType,
        entry_id: UUID,
        payload: CustomizationPayload,
        request: Request,
    ) -> dict[str, object]:
        service = _get_container(request).meal_plan_service
        totals = service.preview_customization(meal, entry_id, _lines(payload))
        return dump_totals(totals)

    return app


def _lines(payload: CustomizationPayload) -> list[dict[str, object]]:
    return [line.model_dump() for line in payload.lines]


def _dump_entry(entry: MealEntry) -> dict[str, object]:
    return {**dump_entry(entry), "customized": entry.is_customized}


def _dump_meal(summary: MealSummary) -> dict[str, object]:
    return {
        "meal": summary.meal.value,
        "entries": [
            {**_dump_entry(item.entry), "totals": dump_totals(item.totals)}
            for item in summary.entries
        ],
        "totals": dump_totals(summary.totals),
    }


def _dump_day(summary: DaySummary) -> dict[str, object]:
    return {
        "meals": [_dump_meal(meal) for meal in summary.meals],
        "totals": dump_totals(summary.totals),
    }
