"""Keyed, time-bounded store of per-session corpora.

Each session is created ``pending`` when an ingestion starts, then either
becomes ``ready`` with its finished corpus or is deleted. Entries older than
the retention window are removed by :meth:`SessionStore.evict`, which the
hosting process is expected to call on a periodic tick.
"""
from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .schema import Document

logger = logging.getLogger(__name__)

RETENTION_SECONDS = 30 * 60
SWEEP_INTERVAL_SECONDS = 10 * 60


class SessionStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"


@dataclass
class Session:
    """One ad-hoc ingestion and the corpus it produced."""

    session_id: str
    created_at: float
    status: SessionStatus = SessionStatus.PENDING
    corpus: list[Document] = field(default_factory=list)


class SessionStore:
    """In-memory session map with an injectable clock.

    Usage
    -----
    store = SessionStore(clock=fake_clock)
    session = store.create_pending()
    store.mark_ready(session.session_id, documents)
    store.evict()          # drops sessions older than the retention window
    """

    def __init__(self, retention_seconds: float = RETENTION_SECONDS, clock: Callable[[], float] = time.time) -> None:
        self.retention_seconds = retention_seconds
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create_pending(self, session_id: str | None = None) -> Session:
        """Register a new pending session and return it."""
        session = Session(session_id=session_id or str(uuid.uuid4()), created_at=self._clock())
        self._sessions[session.session_id] = session
        return session

    def mark_ready(self, session_id: str, corpus: list[Document]) -> Session:
        """Attach the finished corpus and restart the retention window.

        Raises:
            KeyError: If the session was deleted or evicted meanwhile.
        """
        if session_id not in self._sessions:
            raise KeyError(f"Session '{session_id}' not found.")
        session = Session(
            session_id=session_id,
            created_at=self._clock(),
            status=SessionStatus.READY,
            corpus=corpus,
        )
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def evict(self, now: float | None = None) -> list[str]:
        """Remove sessions older than the retention window.

        Args:
            now: Reference time; defaults to the store's clock.

        Returns:
            Ids of the removed sessions.
        """
        now = self._clock() if now is None else now
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.created_at > self.retention_seconds
        ]
        for session_id in expired:
            del self._sessions[session_id]
            logger.info("Cleaned up session: %s", session_id)
        return expired
