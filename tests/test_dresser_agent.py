"""End-to-end tests for the dresser agent with in-memory collaborators."""

from __future__ import annotations

import json
import sqlite3
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.dresser_agent import DresserAgent
from agents.stylist_message import StylistMessageWriter, build_prompt
from dresser_app.config import DresserConfig
from logic.access_gate import AccessGate
from logic.recommendation_engine import generate_looks
from memory.access_store import InMemoryAccessStore
from memory.saved_looks import JSONSavedLookStore, SavedLookStore
from models.quiz import QuizAnswers
from tools.catalog_store import CatalogProvider, StaticCatalogProvider, coerce_products
from tools.webhook_notifier import WebhookNotifier

CATALOG: List[Dict[str, Any]] = [
    {"id": "top-1", "name": "Oxford Shirt", "brand": "Uniqlo", "category": "clothes", "subcategory": "shirt",
     "price": 1000, "colors": ["white"], "tags": ["classic"]},
    {"id": "top-2", "name": "Street Tee", "brand": "Bench", "category": "clothes", "subcategory": "tee",
     "price": 800, "colors": ["black"], "tags": ["streetwear"]},
    {"id": "bottom-1", "name": "Chinos", "brand": "Dockers", "category": "clothes", "subcategory": "pants",
     "price": 1500, "colors": ["beige"]},
    {"id": "shoe-1", "name": "Sneakers", "brand": "Converse", "category": "shoes", "price": 2000,
     "colors": ["white"]},
    {"id": "acc-1", "name": "Cap", "brand": "Nike", "category": "accessories", "price": 700, "colors": ["navy"]},
    {"id": "dress-1", "name": "Silk Dress", "brand": "Mango", "category": "clothes", "subcategory": "dress",
     "price": 2200, "gender": "female"},
]

QUIZ = {"purpose": "personal", "gender": "male", "style": "casual-street", "occasion": "daily-wear",
        "budget": "8000", "color": "ai-decide", "sizes": {"top": "M", "bottom": "32", "shoe": "9"}}


class _FakeModel:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    def generate_content(self, prompt: str):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return type("Response", (), {"text": self.text})()


class _FailingCatalog(CatalogProvider):
    def list_products(self):
        raise OSError("catalog offline")


class _BrokenSavedLooks(SavedLookStore):
    def save_look(self, look):
        raise sqlite3.OperationalError("database is locked")

    def list_looks(self, user_id):
        raise sqlite3.OperationalError("database is locked")

    def delete_look(self, user_id, saved_id):
        raise json.JSONDecodeError("Expecting value", "", 0)


def _agent(
    tmp_path: Path,
    catalog: CatalogProvider | None = None,
    model: object | None = None,
    saved_looks: SavedLookStore | None = None,
) -> DresserAgent:
    config = DresserConfig(looks_per_session=3)
    clock = lambda: datetime(2026, 10, 19, 12, 0, tzinfo=ZoneInfo("Asia/Manila"))  # noqa: E731
    return DresserAgent(
        config=config,
        access_gate=AccessGate(InMemoryAccessStore(), clock=clock),
        catalog_provider=catalog or StaticCatalogProvider(CATALOG),
        saved_looks=saved_looks or JSONSavedLookStore(base_dir=tmp_path / "saved"),
        notifier=WebhookNotifier(None),
        message_writer=StylistMessageWriter(config, model=model),
    )


def test_recommendations_start_a_session_and_return_looks(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    assert response["status"] == "ok"
    assert response["session_id"].startswith("ai_session_")
    assert response["access_type"] == "daily_free"
    assert len(response["looks"]) == 3
    assert response["stylist_message"] == "Here are 3 amazing casual street looks curated just for you!"
    assert response["stats"]["products_analyzed"] == len(CATALOG)
    assert response["based_on"]["style"] == "casual-street"
    for look in response["looks"]:
        assert look["total_price"] == sum(item["price"] for item in look["items"])
        assert look["total_price"] <= 8000
        assert "dress-1" not in [item["product_id"] for item in look["items"]]


def test_second_session_same_day_is_denied(tmp_path: Path) -> None:
    agent = _agent(tmp_path)
    agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    assert response["status"] == "denied"
    assert response["error_code"] == "NO_SESSIONS_AVAILABLE"
    assert response["next_reset"] == "2026-10-20T00:00:00+08:00"
    assert {option["type"] for option in response["unlock_options"]} == {"wait", "purchase"}


def test_new_looks_reuse_the_session_and_exclude_shown_products(tmp_path: Path) -> None:
    agent = _agent(tmp_path)
    first = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})
    shown = [item["product_id"] for item in first["looks"][0]["items"]]

    again = agent.get_recommendations(
        {
            "user_id": "user-1",
            "session_id": first["session_id"],
            "collected_data": QUIZ,
            "exclude_product_ids": shown,
        }
    )

    assert again["status"] == "ok"
    assert again["session_id"] == first["session_id"]
    assert again["access_type"] is None
    for look in again["looks"]:
        assert set(shown).isdisjoint(item["product_id"] for item in look["items"])


def test_client_products_override_server_catalog(tmp_path: Path) -> None:
    agent = _agent(tmp_path, catalog=_FailingCatalog())

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ, "products": CATALOG[:2]})

    assert response["status"] == "ok"
    assert {item["product_id"] for look in response["looks"] for item in look["items"]} <= {"top-1", "top-2"}


def test_catalog_failure_is_reported_unavailable(tmp_path: Path) -> None:
    agent = _agent(tmp_path, catalog=_FailingCatalog())

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    assert response["status"] == "unavailable"
    assert response["error_code"] == "upstream_unavailable"


def test_empty_catalog_reports_not_found(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ, "products": []})

    assert response["status"] == "not_found"
    assert response["error_code"] == "insufficient_catalog"
    assert response["looks"] == []


def test_invalid_quiz_needs_review(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    response = agent.get_recommendations({"user_id": "user-1", "answers": {**QUIZ, "gender": "robot"}})

    assert response["status"] == "needs_review"
    assert "gender" in response["details"][0]["loc"]


def test_check_and_start_session_payloads(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    assert agent.check_access("")["status"] == "needs_review"
    checked = agent.check_access("user-2")
    assert checked["access_granted"] is True
    assert checked["action"] == "start_quiz"

    started = agent.start_session("user-2")
    assert started["status"] == "ok"
    assert started["access_type"] == "daily_free"

    denied = agent.check_access("user-2")
    assert denied["access_granted"] is False
    assert denied["action"] == "show_unlock_options"
    assert agent.start_session("user-2")["status"] == "denied"

    awarded = agent.award_bonus_sessions("user-2", count=1)
    assert awarded["bonus_sessions"] == 1
    assert agent.start_session("user-2")["access_type"] == "bonus"


def test_wishlist_cart_and_share_flow(tmp_path: Path) -> None:
    agent = _agent(tmp_path)
    looks = agent.get_recommendations({"user_id": "user-3", "answers": QUIZ})
    look = looks["looks"][0]
    payload = {
        "user_id": "user-3",
        "session_id": looks["session_id"],
        "look_number": look["look_number"],
        "look_name": look["look_name"],
        "items": look["items"],
        "total_price": look["total_price"],
    }

    saved = agent.save_look(payload)
    assert saved["status"] == "ok"
    assert saved["wishlist_item"]["items_count"] == len(look["items"])

    listed = agent.list_saved_looks("user-3")
    assert [entry["look_name"] for entry in listed["looks"]] == [look["look_name"]]
    assert listed["looks"][0]["items"][0]["product_id"] == look["items"][0]["product_id"]

    cart = agent.add_look_to_cart({**payload, "action_type": "add_all", "user_email": "shopper@example.com"})
    assert cart["status"] == "ok"
    assert cart["cart_summary"]["total_value"] == look["total_price"]
    assert cart["notified"] is False

    shared = agent.share_look(payload)
    assert shared["share_options"]["copy_link"]["url"].endswith(f"/shared-look/{looks['session_id']}/1")

    saved_id = saved["wishlist_item"]["saved_id"]
    assert agent.delete_saved_look("user-3", saved_id)["status"] == "ok"
    assert agent.delete_saved_look("user-3", saved_id)["status"] == "not_found"


def test_look_actions_reject_empty_items(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    assert agent.add_look_to_cart({"session_id": "s", "items": []})["status"] == "needs_review"
    assert agent.save_look({"session_id": "s", "items": [{"product_id": "x", "price": 1}]})["status"] == "needs_review"


def test_stylist_message_uses_model_text(tmp_path: Path) -> None:
    model = _FakeModel(text="  Three easy street looks for your week.  ")
    agent = _agent(tmp_path, model=model)

    response = agent.get_recommendations({"user_id": "user-4", "answers": QUIZ})

    assert response["stylist_message"] == "Three easy street looks for your week."
    assert "Style: casual-street" in model.prompts[0]


@pytest.mark.parametrize("model", [_FakeModel(text=""), _FakeModel(error=RuntimeError("quota exceeded"))])
def test_stylist_message_falls_back_to_template(model: _FakeModel) -> None:
    writer = StylistMessageWriter(DresserConfig(), model=model)
    answers = QuizAnswers(style="casual-street", gender="male", budget=8000)
    looks = generate_looks(answers, coerce_products(CATALOG), look_count=2).looks

    assert writer.write(answers, looks) == "Here are 2 amazing casual street looks curated just for you!"
    assert len(model.prompts) == 1
    assert "Look 1:" in model.prompts[0] and "Look 2:" in model.prompts[0]


def test_stylist_message_without_looks_skips_model() -> None:
    model = _FakeModel(text="unused")
    writer = StylistMessageWriter(DresserConfig(), model=model)

    assert writer.write(QuizAnswers(style="minimalist"), []) == (
        "Here are 0 amazing minimalist looks curated just for you!"
    )
    assert model.prompts == []
    assert StylistMessageWriter(DresserConfig()).uses_model is False


def test_build_prompt_mentions_brands() -> None:
    answers = QuizAnswers(style="casual-street", gender="male", budget=8000)
    looks = generate_looks(answers, coerce_products(CATALOG), look_count=1).looks

    prompt = build_prompt(answers, looks)

    assert "Color preference: any" in prompt
    assert "Converse" in prompt


def test_made_up_session_id_is_denied(tmp_path: Path) -> None:
    agent = _agent(tmp_path)
    agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    outcomes = [
        agent.get_recommendations({"user_id": "user-1", "session_id": f"forged-{i}", "answers": QUIZ})
        for i in range(3)
    ]

    assert [outcome["status"] for outcome in outcomes] == ["denied"] * 3
    assert outcomes[0]["error_code"] == "INVALID_SESSION"
    assert "looks" not in outcomes[0]


def test_session_id_without_any_grant_is_denied(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    response = agent.get_recommendations({"user_id": "user-9", "session_id": "x", "answers": QUIZ})

    assert response["status"] == "denied"
    assert agent.check_access("user-9")["usage_count"] == 0


def test_session_id_of_another_user_is_denied(tmp_path: Path) -> None:
    agent = _agent(tmp_path)
    owner = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    response = agent.get_recommendations(
        {"user_id": "user-2", "session_id": owner["session_id"], "answers": QUIZ}
    )

    assert response["status"] == "denied"
    assert response["error_code"] == "INVALID_SESSION"
    assert agent.check_access("user-2")["access_granted"] is True


def test_not_found_keeps_the_daily_session(tmp_path: Path) -> None:
    agent = _agent(tmp_path)

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ, "products": []})

    assert response["status"] == "not_found"
    assert response["session_id"] is None
    checked = agent.check_access("user-1")
    assert checked["access_granted"] is True
    assert checked["usage_count"] == 0
    assert agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})["status"] == "ok"


def test_catalog_failure_keeps_the_daily_session(tmp_path: Path) -> None:
    agent = _agent(tmp_path, catalog=_FailingCatalog())

    assert agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})["status"] == "unavailable"
    assert agent.check_access("user-1")["access_granted"] is True


def test_exhausted_quota_is_denied_before_the_catalog_is_read(tmp_path: Path) -> None:
    agent = _agent(tmp_path)
    agent.start_session("user-1")
    agent.catalog_provider = _FailingCatalog()

    response = agent.get_recommendations({"user_id": "user-1", "answers": QUIZ})

    assert response["status"] == "denied"
    assert response["error_code"] == "NO_SESSIONS_AVAILABLE"


def test_saved_look_store_failures_are_unavailable(tmp_path: Path) -> None:
    agent = _agent(tmp_path, saved_looks=_BrokenSavedLooks())
    payload = {
        "user_id": "user-1",
        "session_id": "ai_session_1",
        "look_number": 1,
        "look_name": "Weekend Ready",
        "items": [{"product_id": "top-1", "product_name": "Oxford Shirt", "price": 1000}],
    }

    outcomes = [
        agent.save_look(payload),
        agent.list_saved_looks("user-1"),
        agent.delete_saved_look("user-1", "saved-1"),
    ]

    assert [outcome["status"] for outcome in outcomes] == ["unavailable"] * 3
    assert {outcome["error_code"] for outcome in outcomes} == {"upstream_unavailable"}
