"""Configuration helpers for the AI Dresser service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_GEMINI_MODEL = "models/gemini-1.5-flash-002"
DEFAULT_TIMEZONE = "Asia/Manila"
DEFAULT_BUDGET = 10000
DEFAULT_LOOKS_PER_SESSION = 5
STORE_BACKENDS = ("json", "sqlite")


@dataclass
class DresserConfig:
    """Configuration values for the AI Dresser service.

    Stores default to local JSON files so the service runs without any
    infrastructure; SQLite backends can be selected per store. Without a
    Gemini key the stylist message falls back to its template.
    """

    model: str = DEFAULT_GEMINI_MODEL
    api_key: Optional[str] = None
    catalog_db_path: Optional[str] = None
    access_store_backend: str = "json"
    access_store_path: Optional[str] = None
    saved_looks_backend: str = "json"
    saved_looks_path: Optional[str] = None
    webhook_url: Optional[str] = None
    share_base_url: str = "http://localhost:3000"
    timezone: str = DEFAULT_TIMEZONE
    looks_per_session: int = DEFAULT_LOOKS_PER_SESSION
    default_budget: int = DEFAULT_BUDGET
    environment: str | None = None

    def __post_init__(self) -> None:
        self.access_store_backend = self.access_store_backend.strip().lower()
        self.saved_looks_backend = self.saved_looks_backend.strip().lower()
        for name in ("access_store_backend", "saved_looks_backend"):
            if getattr(self, name) not in STORE_BACKENDS:
                raise ValueError(f"{name} must be one of {STORE_BACKENDS}, got {getattr(self, name)!r}")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {self.timezone!r}") from exc
        if self.looks_per_session < 1:
            raise ValueError("looks_per_session must be at least 1")

    @classmethod
    def from_env(cls) -> "DresserConfig":
        """Build a config from an environment YAML file overlaid with environment variables.

        ``APP_CONFIG_PATH`` names the file directly; otherwise ``APP_ENV`` picks
        ``<DRESSER_CONFIG_DIR>/<env>.yaml`` (``config/environments`` by default).
        Every key can be overridden by its upper-cased environment variable, which
        is how secrets such as ``GOOGLE_API_KEY`` or ``WEBHOOK_URL`` are injected.
        """

        env_name = os.getenv("APP_ENV")
        path = cls._resolve_config_path(env_name)
        file_values = cls._load_yaml_config(path) if path and path.exists() else {}

        def setting(key: str, default: Optional[str] = None) -> Optional[str]:
            value = os.getenv(key.upper(), file_values.get(key))
            return default if value in (None, "") else value

        return cls(
            model=setting("model", DEFAULT_GEMINI_MODEL),
            api_key=setting("google_api_key"),
            catalog_db_path=setting("catalog_db_path"),
            access_store_backend=setting("access_store_backend", "json"),
            access_store_path=setting("access_store_path"),
            saved_looks_backend=setting("saved_looks_backend", "json"),
            saved_looks_path=setting("saved_looks_path"),
            webhook_url=setting("webhook_url"),
            share_base_url=setting("share_base_url", "http://localhost:3000"),
            timezone=setting("timezone", DEFAULT_TIMEZONE),
            looks_per_session=cls._as_int(setting("looks_per_session"), DEFAULT_LOOKS_PER_SESSION),
            default_budget=cls._as_int(setting("default_budget"), DEFAULT_BUDGET),
            environment=env_name,
        )

    @staticmethod
    def _resolve_config_path(env_name: Optional[str]) -> Optional[Path]:
        explicit = os.getenv("APP_CONFIG_PATH")
        if explicit:
            return Path(explicit)
        if env_name:
            return Path(os.getenv("DRESSER_CONFIG_DIR", "config/environments")) / f"{env_name}.yaml"
        return None

    @staticmethod
    def _as_int(raw: Optional[str], default: int) -> int:
        try:
            return int(str(raw).strip()) if raw is not None else default
        except ValueError:
            return default

    @staticmethod
    def _load_yaml_config(path: Path) -> Dict[str, str]:
        """Read flat ``key: value`` lines; nesting, lists and anchors are not supported."""

        values: Dict[str, str] = {}
        for raw_line in path.read_text().splitlines():
            line = raw_line.split(" #", 1)[0].strip()
            if not line or line.startswith("#") or ":" not in line:
                continue
            key, value = (part.strip() for part in line.split(":", 1))
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            values[key] = value
        return values
