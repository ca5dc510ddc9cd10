"""Daily-free and bonus session quota for the AI Dresser."""
from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import Callable, Optional
from uuid import uuid4
from zoneinfo import ZoneInfo

from dresser_app.logging_config import get_logger, log_event
from logic.errors import AccessDenied, UnknownSession, UpstreamUnavailable
from memory.access_store import AccessStore
from models.access import AccessGrant, AccessStatus, UsageRecord

logger = get_logger(__name__)


class AccessGate:
    """Decides whether a user may start an AI Dresser session.

    Each local day a user gets one free session. Bonus sessions are a separate
    counter and are spent first; every grant, free or bonus, marks today's free
    session as used. Grants go through ``AccessStore.update_record`` so the
    read-decide-write sequence is atomic per store.
    """

    def __init__(
        self,
        store: AccessStore,
        timezone: str = "Asia/Manila",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.tz = ZoneInfo(timezone)
        self._clock = clock

    def now(self) -> datetime:
        current = self._clock() if self._clock else datetime.now(self.tz)
        if current.tzinfo is None:
            return current.replace(tzinfo=self.tz)
        return current.astimezone(self.tz)

    def next_reset(self, now: datetime | None = None) -> datetime:
        """Return the next local midnight after ``now``."""

        current = now or self.now()
        return datetime.combine(current.date() + timedelta(days=1), time.min, tzinfo=self.tz)

    def free_session_available(self, record: UsageRecord, now: datetime | None = None) -> bool:
        if record.last_use is None:
            return True
        current = now or self.now()
        last_use = record.last_use if record.last_use.tzinfo else record.last_use.replace(tzinfo=self.tz)
        return last_use.astimezone(self.tz).date() < current.date()

    def _status_for(self, user_id: str, record: UsageRecord, now: datetime) -> AccessStatus:
        if record.bonus_sessions > 0:
            access_type = "bonus"
        elif self.free_session_available(record, now):
            access_type = "daily_free"
        else:
            access_type = "none"
        has_access = access_type != "none"
        return AccessStatus(
            user_id=user_id,
            has_access=has_access,
            access_type=access_type,
            bonus_sessions=record.bonus_sessions,
            usage_count=record.usage_count,
            last_use=record.last_use,
            reset_at=None if has_access else self.next_reset(now),
        )

    def check_access(self, user_id: str) -> AccessStatus:
        """Report access without consuming anything; store failures read as a denial."""

        now = self.now()
        try:
            record = self.store.get_record(user_id) or UsageRecord(user_id=user_id)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                logging.ERROR,
                "access_check_failed",
                user_id=user_id,
                error=str(exc),
            )
            return AccessStatus(
                user_id=user_id,
                has_access=False,
                access_type="none",
                bonus_sessions=0,
                usage_count=0,
                last_use=None,
                reset_at=None,
            )
        status = self._status_for(user_id, record, now)
        log_event(
            logger,
            logging.INFO,
            "access_checked",
            user_id=user_id,
            has_access=status.has_access,
            access_type=status.access_type,
        )
        return status

    def start_session(self, user_id: str) -> AccessGrant:
        """Consume one session for ``user_id``.

        Raises:
            AccessDenied: No bonus session left and today's free session is used.
            UpstreamUnavailable: The access store could not be read or written.
        """

        now = self.now()

        def grant(record: UsageRecord) -> AccessGrant:
            if record.bonus_sessions > 0:
                record.bonus_sessions -= 1
                access_type = "bonus"
            elif self.free_session_available(record, now):
                access_type = "daily_free"
            else:
                raise AccessDenied(user_id=user_id, reset_at=self.next_reset(now))
            session_id = f"ai_session_{uuid4().hex}"
            record.usage_count += 1
            record.last_use = now
            record.access_type = access_type
            record.remember_session(session_id)
            return AccessGrant(
                session_id=session_id,
                user_id=user_id,
                access_type=access_type,
                bonus_sessions=record.bonus_sessions,
                usage_count=record.usage_count,
                granted_at=now,
            )

        try:
            result = self.store.update_record(user_id, grant)
        except AccessDenied as denied:
            log_event(
                logger,
                logging.INFO,
                "access_denied",
                user_id=user_id,
                next_reset=denied.reset_at.isoformat(),
            )
            raise
        except Exception as exc:
            log_event(logger, logging.ERROR, "access_grant_failed", user_id=user_id, error=str(exc))
            raise UpstreamUnavailable("access store") from exc

        log_event(
            logger,
            logging.INFO,
            "access_granted",
            user_id=user_id,
            access_type=result.access_type,
            bonus_sessions=result.bonus_sessions,
        )
        return result

    def verify_session(self, user_id: str, session_id: str) -> None:
        """Confirm ``session_id`` was granted to ``user_id``; nothing is consumed.

        Raises:
            UnknownSession: The id was never granted to this user.
            UpstreamUnavailable: The access store could not be read.
        """

        try:
            record = self.store.get_record(user_id)
        except Exception as exc:
            log_event(logger, logging.ERROR, "session_check_failed", user_id=user_id, error=str(exc))
            raise UpstreamUnavailable("access store") from exc
        if record is None or not record.owns_session(session_id):
            log_event(logger, logging.WARNING, "session_rejected", user_id=user_id)
            raise UnknownSession(user_id=user_id, reset_at=self.next_reset())

    def award_bonus_sessions(self, user_id: str, count: int = 1) -> AccessStatus:
        """Add bonus sessions earned outside the daily quota."""

        if count <= 0:
            raise ValueError("count must be positive")
        now = self.now()

        def award(record: UsageRecord) -> UsageRecord:
            record.bonus_sessions += count
            return record

        try:
            record = self.store.update_record(user_id, award)
        except Exception as exc:
            raise UpstreamUnavailable("access store") from exc
        log_event(logger, logging.INFO, "bonus_sessions_awarded", user_id=user_id, count=count)
        return self._status_for(user_id, record, now)


__all__ = ["AccessGate"]
