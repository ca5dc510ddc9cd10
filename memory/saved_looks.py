"""Wishlist storage for looks a shopper chose to keep."""
from __future__ import annotations

import json
import sqlite3
import threading
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from tools.observability import instrument_call


@dataclass
class SavedLook:
    """A denormalised copy of a look; later catalog changes do not touch it."""

    user_id: str
    session_id: str
    look_number: int
    look_name: str
    items: List[Dict[str, Any]]
    total_price: float
    saved_id: str = field(default_factory=lambda: uuid4().hex)
    saved_at: float = field(default_factory=lambda: time.time())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SavedLookStore:
    """Interface for saved-look persistence."""

    def save_look(self, look: SavedLook) -> SavedLook:
        raise NotImplementedError

    def list_looks(self, user_id: str) -> List[SavedLook]:
        raise NotImplementedError

    def get_look(self, user_id: str, saved_id: str) -> Optional[SavedLook]:
        raise NotImplementedError

    def delete_look(self, user_id: str, saved_id: str) -> bool:
        raise NotImplementedError


class JSONSavedLookStore(SavedLookStore):
    """One JSON file per user holding the list of saved looks."""

    def __init__(self, base_dir: str | Path = "data/saved_looks") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, user_id: str) -> Path:
        safe_id = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in user_id)
        return self.base_dir / f"{safe_id}.json"

    def _load(self, user_id: str) -> List[Dict[str, Any]]:
        path = self._path(user_id)
        if not path.exists():
            return []
        return json.loads(path.read_text())

    def _save(self, user_id: str, payload: List[Dict[str, Any]]) -> None:
        self._path(user_id).write_text(json.dumps(payload, indent=2))

    @instrument_call("saved_looks")
    def save_look(self, look: SavedLook) -> SavedLook:
        with self._lock:
            records = self._load(look.user_id)
            records.append(look.to_dict())
            self._save(look.user_id, records)
        return look

    def list_looks(self, user_id: str) -> List[SavedLook]:
        return [SavedLook(**record) for record in self._load(user_id)]

    def get_look(self, user_id: str, saved_id: str) -> Optional[SavedLook]:
        for look in self.list_looks(user_id):
            if look.saved_id == saved_id:
                return look
        return None

    def delete_look(self, user_id: str, saved_id: str) -> bool:
        with self._lock:
            records = self._load(user_id)
            kept = [record for record in records if record.get("saved_id") != saved_id]
            if len(kept) == len(records):
                return False
            self._save(user_id, kept)
        return True


class SQLiteSavedLookStore(SavedLookStore):
    """SQLite-backed saved-look store."""

    def __init__(self, db_path: str | Path = "data/saved_looks.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS saved_looks (
                    saved_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    session_id TEXT,
                    look_number INTEGER,
                    look_name TEXT,
                    items TEXT,
                    total_price REAL,
                    saved_at REAL
                );
                """
            )

    @staticmethod
    def _row_to_look(row: sqlite3.Row) -> SavedLook:
        return SavedLook(
            saved_id=row["saved_id"],
            user_id=row["user_id"],
            session_id=row["session_id"],
            look_number=row["look_number"],
            look_name=row["look_name"],
            items=json.loads(row["items"]) if row["items"] else [],
            total_price=row["total_price"],
            saved_at=row["saved_at"],
        )

    @instrument_call("saved_looks")
    def save_look(self, look: SavedLook) -> SavedLook:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO saved_looks(saved_id, user_id, session_id, look_number, look_name, items, total_price, saved_at)"
                " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    look.saved_id,
                    look.user_id,
                    look.session_id,
                    look.look_number,
                    look.look_name,
                    json.dumps(look.items),
                    look.total_price,
                    look.saved_at,
                ),
            )
        return look

    def list_looks(self, user_id: str) -> List[SavedLook]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM saved_looks WHERE user_id = ? ORDER BY saved_at ASC, rowid ASC", (user_id,)
            ).fetchall()
        return [self._row_to_look(row) for row in rows]

    def get_look(self, user_id: str, saved_id: str) -> Optional[SavedLook]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM saved_looks WHERE user_id = ? AND saved_id = ?", (user_id, saved_id)
            ).fetchone()
        return self._row_to_look(row) if row else None

    def delete_look(self, user_id: str, saved_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM saved_looks WHERE user_id = ? AND saved_id = ?", (user_id, saved_id)
            )
            return cursor.rowcount > 0


__all__ = ["SavedLook", "SavedLookStore", "JSONSavedLookStore", "SQLiteSavedLookStore"]
