"""Tests for sessions.py: SessionStore lifecycle with an injected clock."""
from __future__ import annotations

import pytest

from site_rag.schema import Document
from site_rag.sessions import RETENTION_SECONDS, SessionStatus, SessionStore


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock) -> SessionStore:
    return SessionStore(clock=clock)


def _doc() -> Document:
    return Document(doc_id="u", url="u", title="t", text="x", chunks=["x"], vectors=[[1.0]])


class TestCreatePending:
    def test_new_session_is_pending_and_empty(self, store, clock):
        session = store.create_pending()
        assert session.status is SessionStatus.PENDING
        assert session.corpus == []
        assert session.created_at == clock.now
        assert session.session_id in store

    def test_generated_ids_are_unique(self, store):
        ids = {store.create_pending().session_id for _ in range(20)}
        assert len(ids) == 20
        assert len(store) == 20

    def test_explicit_id(self, store):
        assert store.create_pending("abc").session_id == "abc"
        assert store.get("abc") is not None


class TestMarkReady:
    def test_attaches_corpus(self, store):
        session_id = store.create_pending().session_id
        store.mark_ready(session_id, [_doc()])
        session = store.get(session_id)
        assert session.status is SessionStatus.READY
        assert len(session.corpus) == 1

    def test_restarts_retention_window(self, store, clock):
        session_id = store.create_pending().session_id
        clock.now += 600
        assert store.mark_ready(session_id, [_doc()]).created_at == clock.now

    def test_unknown_session_raises(self, store):
        with pytest.raises(KeyError):
            store.mark_ready("missing", [_doc()])


class TestDeleteAndGet:
    def test_delete_existing(self, store):
        session_id = store.create_pending().session_id
        assert store.delete(session_id) is True
        assert store.get(session_id) is None

    def test_delete_missing(self, store):
        assert store.delete("missing") is False


class TestEvict:
    def test_default_retention_is_thirty_minutes(self):
        assert RETENTION_SECONDS == 1800

    def test_evicts_only_expired_sessions(self, store, clock):
        old = store.create_pending().session_id
        clock.now += 1000
        young = store.create_pending().session_id
        clock.now += RETENTION_SECONDS - 500
        assert store.evict() == [old]
        assert old not in store
        assert young in store

    def test_explicit_now(self, store, clock):
        session_id = store.create_pending().session_id
        assert store.evict(now=clock.now + RETENTION_SECONDS) == []
        assert store.evict(now=clock.now + RETENTION_SECONDS + 1) == [session_id]

    def test_evicts_pending_and_ready_alike(self, store, clock):
        pending = store.create_pending().session_id
        ready = store.create_pending().session_id
        store.mark_ready(ready, [_doc()])
        assert sorted(store.evict(now=clock.now + 2 * RETENTION_SECONDS)) == sorted([pending, ready])
        assert len(store) == 0
