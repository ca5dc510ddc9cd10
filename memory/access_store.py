"""Access store abstractions for per-user AI Dresser usage records."""
from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import Callable, Optional, TypeVar

from models.access import UsageRecord
from tools.observability import instrument_call

R = TypeVar("R")


class AccessStore:
    """Persistence interface for usage records.

    ``update_record`` is the only write path used for grants: it loads the
    record (or a fresh one), hands it to ``mutate`` and persists the mutated
    record as one atomic step. When ``mutate`` raises, nothing is written.
    """

    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        raise NotImplementedError

    def save_record(self, record: UsageRecord) -> UsageRecord:
        raise NotImplementedError

    def update_record(self, user_id: str, mutate: Callable[[UsageRecord], R]) -> R:
        raise NotImplementedError


class InMemoryAccessStore(AccessStore):
    """Dictionary-backed store for tests and single-process demos."""

    def __init__(self) -> None:
        self._records: dict[str, dict] = {}
        self._lock = threading.Lock()

    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        payload = self._records.get(user_id)
        return UsageRecord.from_dict(payload) if payload else None

    def save_record(self, record: UsageRecord) -> UsageRecord:
        with self._lock:
            self._records[record.user_id] = record.to_dict()
        return record

    def update_record(self, user_id: str, mutate: Callable[[UsageRecord], R]) -> R:
        with self._lock:
            payload = self._records.get(user_id)
            record = UsageRecord.from_dict(payload) if payload else UsageRecord(user_id=user_id)
            result = mutate(record)
            self._records[user_id] = record.to_dict()
        return result


class JSONAccessStore(AccessStore):
    """JSON-file-backed AccessStore suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/access") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, user_id: str) -> Path:
        safe_id = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in user_id)
        return self.base_dir / f"{safe_id}.json"

    def _load(self, user_id: str) -> Optional[UsageRecord]:
        path = self._path(user_id)
        if not path.exists():
            return None
        return UsageRecord.from_dict(json.loads(path.read_text()))

    def _save(self, record: UsageRecord) -> None:
        self._path(record.user_id).write_text(json.dumps(record.to_dict(), indent=2))

    @instrument_call("access_store")
    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        return self._load(user_id)

    def save_record(self, record: UsageRecord) -> UsageRecord:
        with self._lock:
            self._save(record)
        return record

    def update_record(self, user_id: str, mutate: Callable[[UsageRecord], R]) -> R:
        with self._lock:
            record = self._load(user_id) or UsageRecord(user_id=user_id)
            result = mutate(record)
            self._save(record)
        return result


class SQLiteAccessStore(AccessStore):
    """SQLite-backed access store; grants run inside an immediate transaction."""

    def __init__(self, db_path: str | Path = "data/access_store.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS usage_records (
                    user_id TEXT PRIMARY KEY,
                    usage_count INTEGER NOT NULL DEFAULT 0,
                    bonus_sessions INTEGER NOT NULL DEFAULT 0,
                    access_type TEXT NOT NULL DEFAULT 'none',
                    last_use TEXT,
                    session_ids TEXT NOT NULL DEFAULT '[]'
                );
                """
            )
            columns = {row["name"] for row in conn.execute("PRAGMA table_info(usage_records)")}
            if "session_ids" not in columns:
                conn.execute("ALTER TABLE usage_records ADD COLUMN session_ids TEXT NOT NULL DEFAULT '[]'")

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> UsageRecord:
        payload = dict(row)
        payload["session_ids"] = json.loads(payload.get("session_ids") or "[]")
        return UsageRecord.from_dict(payload)

    @staticmethod
    def _upsert(conn: sqlite3.Connection, record: UsageRecord) -> None:
        payload = record.to_dict()
        payload["session_ids"] = json.dumps(record.session_ids)
        conn.execute(
            "INSERT INTO usage_records(user_id, usage_count, bonus_sessions, access_type, last_use, session_ids)\n"
            "VALUES (:user_id, :usage_count, :bonus_sessions, :access_type, :last_use, :session_ids)\n"
            "ON CONFLICT(user_id) DO UPDATE SET usage_count=excluded.usage_count,\n"
            "  bonus_sessions=excluded.bonus_sessions, access_type=excluded.access_type,\n"
            "  last_use=excluded.last_use, session_ids=excluded.session_ids",
            payload,
        )

    @instrument_call("access_store")
    def get_record(self, user_id: str) -> Optional[UsageRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM usage_records WHERE user_id = ?", (user_id,)
            ).fetchone()
        return self._row_to_record(row) if row else None

    def save_record(self, record: UsageRecord) -> UsageRecord:
        with self._connect() as conn:
            self._upsert(conn, record)
        return record

    def update_record(self, user_id: str, mutate: Callable[[UsageRecord], R]) -> R:
        conn = self._connect()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT * FROM usage_records WHERE user_id = ?", (user_id,)
            ).fetchone()
            record = self._row_to_record(row) if row else UsageRecord(user_id=user_id)
            result = mutate(record)
            self._upsert(conn, record)
            conn.execute("COMMIT")
            return result
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()


__all__ = ["AccessStore", "InMemoryAccessStore", "JSONAccessStore", "SQLiteAccessStore"]
