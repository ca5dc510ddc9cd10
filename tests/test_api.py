"""HTTP surface tests using FastAPI's TestClient."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dresser_app.app import AIDresserApp
from dresser_app.config import DresserConfig
from server.api import create_app

CATALOG = [
    {"id": "top-1", "name": "Oxford Shirt", "brand": "Uniqlo", "category": "clothes", "subcategory": "shirt",
     "price": 1000, "colors": ["white"]},
    {"id": "bottom-1", "name": "Chinos", "brand": "Dockers", "category": "clothes", "subcategory": "chino pants",
     "price": 1500, "colors": ["beige"]},
    {"id": "shoe-1", "name": "Sneakers", "brand": "Converse", "category": "shoes", "price": 2000},
]

QUIZ = {"purpose": "personal", "style": "minimalist", "occasion": "work-office", "budget": 5000}


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    config = DresserConfig(
        catalog_db_path=str(tmp_path / "catalog.db"),
        access_store_path=str(tmp_path / "access"),
        saved_looks_path=str(tmp_path / "saved"),
        share_base_url="https://shop.example.com",
    )
    dresser = AIDresserApp(config)
    dresser.catalog_store.load_records(CATALOG)
    return TestClient(create_app(dresser))


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["service"] == "ai-dresser"


def test_missing_user_is_unauthorized(client: TestClient) -> None:
    assert client.post("/ai-dresser/check-access", json={}).status_code == 401
    assert client.post("/ai-dresser/start-session", json={"user_id": "  "}).status_code == 401
    assert client.post("/ai-dresser/get-recommendations", json={"answers": QUIZ}).status_code == 401


def test_start_session_then_denied_with_next_reset(client: TestClient) -> None:
    checked = client.post("/ai-dresser/check-access", json={"user_id": "user-1"})
    assert checked.status_code == 200
    assert checked.json()["access_type"] == "daily_free"

    first = client.post("/ai-dresser/start-session", json={"user_id": "user-1"})
    assert first.status_code == 200
    assert first.json()["session_id"].startswith("ai_session_")

    second = client.post("/ai-dresser/start-session", json={"user_id": "user-1"})
    assert second.status_code == 403
    detail = second.json()["detail"]
    assert detail["error_code"] == "NO_SESSIONS_AVAILABLE"
    assert detail["next_reset"]

    bonus = client.post("/ai-dresser/bonus-sessions", json={"user_id": "user-1", "count": 1})
    assert bonus.status_code == 200
    assert client.post("/ai-dresser/start-session", json={"user_id": "user-1"}).json()["access_type"] == "bonus"


def test_recommendations_from_server_catalog(client: TestClient) -> None:
    session = client.post("/ai-dresser/start-session", json={"user_id": "user-2"}).json()

    response = client.post(
        "/ai-dresser/get-recommendations",
        json={"user_id": "user-2", "session_id": session["session_id"], "answers": QUIZ},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["looks"][0]["look_name"] == "Office Ready"
    assert [item["product_id"] for item in body["looks"][0]["items"]] == ["top-1", "bottom-1", "shoe-1"]
    assert body["looks"][0]["total_price"] == 4500


def test_recommendations_without_matches_is_not_found(client: TestClient) -> None:
    response = client.post(
        "/ai-dresser/get-recommendations",
        json={"user_id": "user-3", "answers": {**QUIZ, "budget": 50}},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["error_code"] == "insufficient_catalog"
    assert client.post("/ai-dresser/check-access", json={"user_id": "user-3"}).json()["access_granted"] is True


def test_unknown_session_id_is_forbidden(client: TestClient) -> None:
    client.post("/ai-dresser/start-session", json={"user_id": "user-6"})

    response = client.post(
        "/ai-dresser/get-recommendations",
        json={"user_id": "user-6", "session_id": "ai_session_guess", "answers": QUIZ},
    )

    assert response.status_code == 403
    assert response.json()["detail"]["error_code"] == "INVALID_SESSION"


def test_invalid_answers_are_unprocessable(client: TestClient) -> None:
    response = client.post(
        "/ai-dresser/get-recommendations",
        json={"user_id": "user-4", "answers": {**QUIZ, "purpose": "resale"}},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["status"] == "needs_review"


def test_wishlist_cart_and_share_endpoints(client: TestClient) -> None:
    look = {
        "user_id": "user-5",
        "session_id": "ai_session_demo",
        "look_number": 2,
        "look_name": "Signature Style",
        "items": [{"product_id": "top-1", "product_name": "Oxford Shirt", "brand": "Uniqlo", "price": 1000}],
        "total_price": 1000,
    }

    saved = client.post("/ai-dresser/save-wishlist", json=look)
    assert saved.status_code == 200
    saved_id = saved.json()["wishlist_item"]["saved_id"]

    listed = client.get("/ai-dresser/wishlist/user-5").json()
    assert [entry["saved_id"] for entry in listed["looks"]] == [saved_id]

    cart = client.post("/ai-dresser/add-to-cart", json={**look, "action_type": "add_single"})
    assert cart.status_code == 200
    assert cart.json()["message"] == "Item ready for cart!"

    shared = client.post("/ai-dresser/share-look", json=look)
    assert shared.json()["share_options"]["copy_link"]["url"] == (
        "https://shop.example.com/shared-look/ai_session_demo/2"
    )

    assert client.delete(f"/ai-dresser/wishlist/user-5/{saved_id}").status_code == 200
    assert client.delete(f"/ai-dresser/wishlist/user-5/{saved_id}").status_code == 404


def test_look_actions_validate_payloads(client: TestClient) -> None:
    assert client.post("/ai-dresser/add-to-cart", json={"session_id": "s", "items": []}).status_code == 422
    assert client.post("/ai-dresser/save-wishlist", json={"items": []}).status_code == 401
