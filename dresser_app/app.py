"""AI Dresser app bootstrap."""

import logging

from agents.dresser_agent import DresserAgent
from agents.stylist_message import StylistMessageWriter
from dresser_app.config import DresserConfig
from dresser_app.logging_config import configure_logging, get_logger, log_event
from logic.access_gate import AccessGate
from memory.access_store import AccessStore, JSONAccessStore, SQLiteAccessStore
from memory.saved_looks import JSONSavedLookStore, SavedLookStore, SQLiteSavedLookStore
from tools.catalog_store import SQLiteCatalogStore
from tools.webhook_notifier import WebhookNotifier

LOGGER = get_logger(__name__)


class AIDresserApp:
    """Wires together the stores, the access gate and the dresser agent."""

    def __init__(self, config: DresserConfig | None = None) -> None:
        self.config = config or DresserConfig.from_env()
        configure_logging()

        self.access_store = self._build_access_store()
        self.saved_looks = self._build_saved_looks_store()
        self.catalog_store = SQLiteCatalogStore(self.config.catalog_db_path or "data/catalog.db")
        self.access_gate = AccessGate(self.access_store, timezone=self.config.timezone)
        self.notifier = WebhookNotifier(self.config.webhook_url)
        self.message_writer = StylistMessageWriter(self.config)
        self.agent = DresserAgent(
            config=self.config,
            access_gate=self.access_gate,
            catalog_provider=self.catalog_store,
            saved_looks=self.saved_looks,
            notifier=self.notifier,
            message_writer=self.message_writer,
        )
        log_event(
            LOGGER,
            level=logging.INFO,
            event="app_initialised",
            environment=self.config.environment or "local",
            access_store=self.config.access_store_backend,
            saved_looks_store=self.config.saved_looks_backend,
            webhook_enabled=self.notifier.enabled,
            generative_copy=self.message_writer.uses_model,
        )

    def _build_access_store(self) -> AccessStore:
        if self.config.access_store_backend.lower() == "sqlite":
            return SQLiteAccessStore(self.config.access_store_path or "data/access_store.db")
        return JSONAccessStore(self.config.access_store_path or "data/access")

    def _build_saved_looks_store(self) -> SavedLookStore:
        if self.config.saved_looks_backend.lower() == "sqlite":
            return SQLiteSavedLookStore(self.config.saved_looks_path or "data/saved_looks.db")
        return JSONSavedLookStore(self.config.saved_looks_path or "data/saved_looks")


__all__ = ["AIDresserApp"]
