"""Access quota records for the AI Dresser feature."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

ACCESS_TYPES = ("daily_free", "bonus", "none")
MAX_TRACKED_SESSIONS = 20


@dataclass
class UsageRecord:
    """Per-user usage state as persisted by an access store.

    ``last_use`` is the timestamp of the latest grant; whether today's free
    session is still available is derived from it, so the record needs no
    expiry job. ``session_ids`` holds the most recent granted session ids,
    newest last, so follow-up requests can prove they belong to a grant.
    """

    user_id: str
    usage_count: int = 0
    bonus_sessions: int = 0
    access_type: str = "none"
    last_use: Optional[datetime] = None
    session_ids: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.access_type not in ACCESS_TYPES:
            raise ValueError(f"access_type must be one of {ACCESS_TYPES}, got {self.access_type!r}")

    def remember_session(self, session_id: str) -> None:
        self.session_ids = [*self.session_ids, session_id][-MAX_TRACKED_SESSIONS:]

    def owns_session(self, session_id: str) -> bool:
        return session_id in self.session_ids

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["last_use"] = self.last_use.isoformat() if self.last_use else None
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UsageRecord":
        raw_last_use = payload.get("last_use")
        return cls(
            user_id=str(payload["user_id"]),
            usage_count=int(payload.get("usage_count") or 0),
            bonus_sessions=int(payload.get("bonus_sessions") or 0),
            access_type=str(payload.get("access_type") or "none"),
            last_use=datetime.fromisoformat(raw_last_use) if raw_last_use else None,
            session_ids=[str(session_id) for session_id in payload.get("session_ids") or []],
        )


@dataclass(frozen=True)
class AccessStatus:
    """Read-only answer to "may this user start a session right now?"."""

    user_id: str
    has_access: bool
    access_type: str
    bonus_sessions: int
    usage_count: int
    last_use: Optional[datetime]
    reset_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "has_access": self.has_access,
            "access_type": self.access_type,
            "bonus_sessions": self.bonus_sessions,
            "usage_count": self.usage_count,
            "last_use": self.last_use.isoformat() if self.last_use else None,
            "next_reset": self.reset_at.isoformat() if self.reset_at else None,
        }


@dataclass(frozen=True)
class AccessGrant:
    """A granted AI Dresser session."""

    session_id: str
    user_id: str
    access_type: str
    bonus_sessions: int
    usage_count: int
    granted_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["granted_at"] = self.granted_at.isoformat()
        return payload


__all__ = ["ACCESS_TYPES", "MAX_TRACKED_SESSIONS", "UsageRecord", "AccessStatus", "AccessGrant"]
