"""Configuration loading and structured logging tests."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dresser_app.config import DEFAULT_GEMINI_MODEL, DresserConfig
from dresser_app.logging_config import (
    JsonFormatter,
    correlation_context,
    operation_context,
    redact_for_log,
    user_reference,
)
from tools.observability import instrument_call

_ENV_KEYS = [
    "APP_ENV",
    "APP_CONFIG_PATH",
    "DRESSER_CONFIG_DIR",
    "MODEL",
    "GOOGLE_API_KEY",
    "WEBHOOK_URL",
    "TIMEZONE",
    "LOOKS_PER_SESSION",
    "DEFAULT_BUDGET",
    "ACCESS_STORE_BACKEND",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    config = DresserConfig.from_env()

    assert config.model == DEFAULT_GEMINI_MODEL
    assert config.api_key is None
    assert config.timezone == "Asia/Manila"
    assert config.looks_per_session == 5
    assert config.default_budget == 10000
    assert config.access_store_backend == "json"


def test_yaml_file_selected_by_app_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "staging.yaml").write_text(
        "# staging settings\n"
        "access_store_backend: sqlite\n"
        "looks_per_session: 3\n"
        "share_base_url: \"https://staging.example.com\"\n"
        "default_budget: lots\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("DRESSER_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("LOOKS_PER_SESSION", "4")

    config = DresserConfig.from_env()

    assert config.environment == "staging"
    assert config.access_store_backend == "sqlite"
    assert config.share_base_url == "https://staging.example.com"
    assert config.looks_per_session == 4
    assert config.default_budget == 10000


def test_explicit_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text("timezone: Asia/Tokyo\nwebhook_url: https://hooks.example.com/x\n")
    monkeypatch.setenv("APP_CONFIG_PATH", str(path))

    config = DresserConfig.from_env()

    assert config.timezone == "Asia/Tokyo"
    assert config.webhook_url == "https://hooks.example.com/x"


def test_invalid_settings_are_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValueError):
        DresserConfig(access_store_backend="redis")
    with pytest.raises(ValueError):
        DresserConfig(timezone="Mars/Olympus_Mons")
    with pytest.raises(ValueError):
        DresserConfig(looks_per_session=0)

    path = tmp_path / "inline.yaml"
    path.write_text("access_store_backend: SQLite  # shared with the workers\n")
    monkeypatch.setenv("APP_CONFIG_PATH", str(path))
    assert DresserConfig.from_env().access_store_backend == "sqlite"


def test_redact_for_log_scrubs_shopper_details() -> None:
    scrubbed = redact_for_log(
        {
            "user_id": "user-1",
            "note": "contact shopper@example.com",
            "nested": [{"user_email": "a@b.com", "look_number": 2}],
            "link": "https://shop.example.com/shared-look/x/1",
        }
    )

    assert scrubbed["user_id"] == user_reference("user-1")
    assert scrubbed["user_id"].startswith("u_")
    assert redact_for_log(scrubbed)["user_id"] == scrubbed["user_id"]
    assert scrubbed["note"] == "contact [redacted-email]"
    assert scrubbed["nested"] == [{"user_email": "[redacted]", "look_number": 2}]
    assert scrubbed["link"] == "[redacted-url]"


def test_json_formatter_emits_event_and_correlation_id() -> None:
    record = logging.LogRecord("dresser", logging.INFO, __file__, 1, "look_saved", None, None)
    record.event = "look_saved"
    record.look_number = 3

    with correlation_context("corr-123"):
        payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "look_saved"
    assert payload["correlation_id"] == "corr-123"
    assert payload["look_number"] == 3
    assert payload["level"] == "INFO"


def test_operation_context_binds_session_id() -> None:
    record = logging.LogRecord("dresser", logging.INFO, __file__, 1, "look_shared", None, None)

    with operation_context("agent:dresser.share_look", session_id="ai_session_1") as correlation_id:
        payload = json.loads(JsonFormatter().format(record))

    assert payload["session_id"] == "ai_session_1"
    assert payload["correlation_id"] == correlation_id
    assert json.loads(JsonFormatter().format(record))["session_id"] is None


def test_instrument_call_passes_results_and_errors_through() -> None:
    @instrument_call("catalog")
    def list_items() -> list:
        return [1, 2, 3]

    @instrument_call("webhook")
    def explode() -> None:
        raise RuntimeError("boom")

    assert list_items() == [1, 2, 3]
    with pytest.raises(RuntimeError):
        explode()
