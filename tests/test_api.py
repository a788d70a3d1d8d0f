"""Tests for the HTTP API."""

import json
from dataclasses import replace
from uuid import uuid4

from fastapi.testclient import TestClient

from macro_chef.api.app import create_app
from macro_chef.containers import AppContainer
from macro_chef.services.state import INGREDIENTS_KEY
from tests.conftest import InMemoryStateRepository


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _create_chicken(client: TestClient) -> dict[str, object]:
    response = client.post(
        "/ingredients",
        json={"name": "Chicken Breast", "protein": 31, "carbs": 0, "fats": 3.6},
    )
    assert response.status_code == 201
    return response.json()


def _create_bowl(client: TestClient, chicken_id: str) -> dict[str, object]:
    response = client.post(
        "/recipes",
        json={
            "name": "Chicken Bowl",
            "yield_volume": 2,
            "lines": [{"ingredient_id": chicken_id, "quantity": 200}],
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_and_list_ingredients(container: AppContainer) -> None:
    client = _client(container)

    chicken = _create_chicken(client)

    assert chicken["calories"] == 156
    assert chicken["unit"] == "g"
    listed = client.get("/ingredients").json()["ingredients"]
    assert [item["id"] for item in listed] == [chicken["id"]]


def test_invalid_ingredient_is_bad_request(container: AppContainer) -> None:
    response = _client(container).post(
        "/ingredients", json={"name": "Ghost", "protein": -3}
    )

    assert response.status_code == 400
    assert "protein" in response.json()["detail"]


def test_missing_ingredient_name_is_bad_request(container: AppContainer) -> None:
    response = _client(container).post("/ingredients", json={"protein": 3})

    assert response.status_code == 400
    assert response.json()["detail"][0]["loc"] == ["body", "name"]


def test_negative_line_quantity_is_bad_request(container: AppContainer) -> None:
    client = _client(container)
    chicken = _create_chicken(client)

    response = client.post(
        "/recipes",
        json={
            "name": "Chicken Bowl",
            "lines": [{"ingredient_id": chicken["id"], "quantity": -5}],
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Quantity cannot be negative"


def test_delete_missing_ingredient_is_not_found(container: AppContainer) -> None:
    response = _client(container).delete(f"/ingredients/{uuid4()}")

    assert response.status_code == 404


def test_import_and_export_ingredients(container: AppContainer) -> None:
    client = _client(container)

    response = client.post(
        "/ingredients/import",
        content=json.dumps([{"name": "Oats", "portion": 40, "protein": 5}]),
    )
    exported = client.get("/ingredients/export")

    assert response.status_code == 200
    assert response.json()["imported"] == 1
    assert exported.headers["content-disposition"].startswith("attachment")
    assert [item["name"] for item in exported.json()] == ["Oats"]


def test_import_rejects_object(container: AppContainer) -> None:
    response = _client(container).post(
        "/ingredients/import", content='{"name": "Oats"}'
    )

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid JSON format")


def test_recipe_with_unknown_ingredient_is_bad_request(
    container: AppContainer,
) -> None:
    response = _client(container).post(
        "/recipes",
        json={
            "name": "Mystery",
            "lines": [{"ingredient_id": str(uuid4()), "quantity": 5}],
        },
    )

    assert response.status_code == 400


def test_recipe_and_meal_flow(container: AppContainer) -> None:
    client = _client(container)
    chicken = _create_chicken(client)
    bowl = _create_bowl(client, chicken["id"])
    assert bowl["total_macros"]["calories"] == 313
    assert bowl["macros_per_unit"]["calories"] == 156.5

    response = client.post(
        "/meals/Breakfast/entries",
        json={"kind": "recipe", "source_id": bowl["id"], "quantity": 1.5},
    )
    assert response.status_code == 201
    entry = response.json()
    assert entry["customized"] is False

    preview = client.post(
        f"/meals/Breakfast/entries/{entry['id']}/customization/preview",
        json={"lines": [{"ingredient_id": chicken["id"], "quantity": 100}]},
    )
    assert preview.json()["calories"] == 117
    assert client.get("/meals/totals").json()["calories"] == 235

    customized = client.put(
        f"/meals/Breakfast/entries/{entry['id']}/customization",
        json={"lines": [{"ingredient_id": chicken["id"], "quantity": 100}]},
    )
    assert customized.status_code == 200
    assert customized.json()["custom_lines"][0]["quantity"] == 100
    assert customized.json()["customized"] is True

    day = client.get("/meals").json()
    assert [meal["meal"] for meal in day["meals"]] == [
        "Breakfast",
        "Lunch",
        "Dinner",
        "Snack",
    ]
    assert day["meals"][0]["entries"][0]["totals"]["calories"] == 117
    assert day["meals"][0]["entries"][0]["customized"] is True
    assert day["totals"]["protein"] == 23.3

    recipes = client.get("/recipes").json()["recipes"]
    assert recipes[0]["lines"][0]["quantity"] == 200


def test_update_and_remove_entry(container: AppContainer) -> None:
    client = _client(container)
    chicken = _create_chicken(client)
    entry = client.post(
        "/meals/Lunch/entries",
        json={"kind": "ingredient", "source_id": chicken["id"], "quantity": 150},
    ).json()

    updated = client.patch(
        f"/meals/Lunch/entries/{entry['id']}", json={"quantity": 100}
    )
    assert updated.json()["quantity"] == 100
    assert client.get("/meals/totals").json()["calories"] == 156

    invalid = client.patch(f"/meals/Lunch/entries/{entry['id']}", json={"quantity": 0})
    assert invalid.status_code == 400

    removed = client.delete(f"/meals/Lunch/entries/{entry['id']}")
    assert removed.status_code == 204
    missing = client.delete(f"/meals/Lunch/entries/{entry['id']}")
    assert missing.status_code == 404


def test_unknown_meal_is_rejected(container: AppContainer) -> None:
    response = _client(container).post(
        "/meals/Brunch/entries",
        json={"kind": "ingredient", "source_id": str(uuid4())},
    )

    assert response.status_code == 400


def test_customizing_ingredient_entry_is_bad_request(
    container: AppContainer,
) -> None:
    client = _client(container)
    chicken = _create_chicken(client)
    entry = client.post(
        "/meals/Snack/entries",
        json={"kind": "ingredient", "source_id": chicken["id"], "quantity": 30},
    ).json()

    response = client.put(
        f"/meals/Snack/entries/{entry['id']}/customization",
        json={"lines": []},
    )

    assert response.status_code == 400


def test_api_token_guards_mutations(container: AppContainer) -> None:
    settings = container.settings.model_copy(update={"api_token": "secret"})
    client = _client(replace(container, settings=settings))
    payload = {"name": "Oats", "protein": 13}

    denied = client.post("/ingredients", json=payload)
    allowed = client.post(
        "/ingredients", json=payload, headers={"X-Api-Token": "secret"}
    )

    assert denied.status_code == 401
    assert allowed.status_code == 201
    assert client.get("/ingredients").status_code == 200


def test_storage_failure_is_service_unavailable(
    container: AppContainer, state_repository: InMemoryStateRepository
) -> None:
    def failing_save(key: str, value: object) -> None:
        raise RuntimeError(f"Failed to save state for {key}")

    state_repository.save = failing_save  # type: ignore[method-assign]
    client = TestClient(create_app(container), raise_server_exceptions=False)

    response = client.post("/ingredients", json={"name": "Oats"})

    assert response.status_code == 503
    assert INGREDIENTS_KEY not in state_repository.blobs
