"""Tests for pipeline.py: background ingestion, session status and corpus selection."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import SUPPORT_PAGE_HTML, FakeEmbedder, site_handler
from site_rag.pipeline import ingest_site, select_corpus, session_status, start_ingestion
from site_rag.schema import Document
from site_rag.sessions import SessionStatus, SessionStore
from site_rag.settings import CrawlSettings

SEED = "https://example.com/"
NO_RETRY = CrawlSettings(fetch_retries=0, retry_backoff=0)


def _ingest(store: SessionStore, pages: dict[str, str], embedder: FakeEmbedder) -> tuple[str, list[Document]]:
    session_id = store.create_pending().session_id

    async def runner():
        transport = httpx.MockTransport(site_handler(pages, []))
        async with httpx.AsyncClient(transport=transport) as client:
            return await ingest_site(
                store, session_id, SEED, embed=embedder, client=client, crawl_settings=NO_RETRY
            )

    return session_id, asyncio.run(runner())


# ---------------------------------------------------------------------------
# ingest_site
# ---------------------------------------------------------------------------

class TestIngestSite:
    def test_successful_ingestion_marks_session_ready(self):
        store = SessionStore()
        session_id, documents = _ingest(store, {"/": SUPPORT_PAGE_HTML}, FakeEmbedder())
        session = store.get(session_id)
        assert session.status is SessionStatus.READY
        assert session.corpus == documents
        assert len(documents) == 1
        assert documents[0].is_aligned

    def test_no_pages_deletes_session(self):
        store = SessionStore()
        session_id, documents = _ingest(store, {}, FakeEmbedder())
        assert documents == []
        assert session_id not in store

    def test_no_readable_documents_deletes_session(self):
        store = SessionStore()
        session_id, documents = _ingest(store, {"/": "<!DOCTYPE html><html><body></body></html>"}, FakeEmbedder())
        assert documents == []
        assert session_id not in store

    def test_embedding_failure_deletes_session(self):
        store = SessionStore()
        session_id, documents = _ingest(store, {"/": SUPPORT_PAGE_HTML}, FakeEmbedder(fail_on_call=1))
        assert documents == []
        assert session_id not in store

    def test_page_limit_comes_from_crawl_settings(self):
        store = SessionStore()
        session_id = store.create_pending().session_id
        linked_home = SUPPORT_PAGE_HTML.replace("</main>", '<a href="/more">More</a></main>')
        requested: list[str] = []
        settings = CrawlSettings(max_pages=1, fetch_retries=0, retry_backoff=0)

        async def runner():
            transport = httpx.MockTransport(site_handler({"/": linked_home, "/more": SUPPORT_PAGE_HTML}, requested))
            async with httpx.AsyncClient(transport=transport) as client:
                return await ingest_site(
                    store, session_id, SEED, embed=FakeEmbedder(), client=client, crawl_settings=settings
                )

        documents = asyncio.run(runner())
        assert requested == ["/"]
        assert len(documents) == 1


# ---------------------------------------------------------------------------
# start_ingestion / session_status
# ---------------------------------------------------------------------------

class TestStartIngestion:
    def test_returns_pending_session_then_becomes_ready(self):
        store = SessionStore()
        statuses: list[str] = []

        async def runner():
            transport = httpx.MockTransport(site_handler({"/": SUPPORT_PAGE_HTML}, []))
            async with httpx.AsyncClient(transport=transport) as client:
                session_id = await start_ingestion(
                    store, SEED, embed=FakeEmbedder(), client=client, crawl_settings=NO_RETRY
                )
                statuses.append(session_status(store, session_id)["status"])
                pending = [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]
                await asyncio.gather(*pending)
                return session_id

        session_id = asyncio.run(runner())
        assert statuses == ["pending"]
        status = session_status(store, session_id)
        assert status["status"] == "ready"
        assert status["message"] == "Successfully loaded: 1 pages"
        assert status["pages"] == [{"title": "Example Support", "url": SEED}]


class TestSessionStatus:
    def test_not_found(self):
        assert session_status(SessionStore(), "missing") == {"status": "not_found"}

    def test_pending(self):
        store = SessionStore()
        session_id = store.create_pending().session_id
        assert session_status(store, session_id) == {"status": "pending"}


# ---------------------------------------------------------------------------
# select_corpus
# ---------------------------------------------------------------------------

class TestSelectCorpus:
    @pytest.fixture()
    def default_corpus(self, sample_corpus) -> list[Document]:
        return sample_corpus[:1]

    def test_no_session_uses_default(self, default_corpus):
        assert select_corpus(SessionStore(), None, default_corpus) == default_corpus

    def test_unknown_session_uses_default(self, default_corpus):
        assert select_corpus(SessionStore(), "missing", default_corpus) == default_corpus

    def test_pending_session_uses_default(self, default_corpus):
        store = SessionStore()
        session_id = store.create_pending().session_id
        assert select_corpus(store, session_id, default_corpus) == default_corpus

    def test_ready_session_corpus_wins(self, sample_corpus, default_corpus):
        store = SessionStore()
        session_id = store.create_pending().session_id
        store.mark_ready(session_id, sample_corpus)
        assert select_corpus(store, session_id, default_corpus) == sample_corpus
