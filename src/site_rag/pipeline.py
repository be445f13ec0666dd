"""Background site ingestion into sessions, and session-aware corpus lookup."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import httpx
from opentelemetry import trace

from .crawler import crawl
from .embeddings import Embedder
from .indexer import index_pages
from .schema import Document
from .sessions import SessionStatus, SessionStore
from .settings import CrawlSettings
from .tracing import ATTR_INGEST_DOCUMENTS, ATTR_INGEST_PAGES, ATTR_INGEST_URL, get_tracer

logger = logging.getLogger(__name__)

_background_tasks: set[asyncio.Task] = set()


async def ingest_site(
    store: SessionStore,
    session_id: str,
    url: str,
    *,
    embed: Embedder,
    max_pages: int | None = None,
    client: httpx.AsyncClient | None = None,
    crawl_settings: CrawlSettings | None = None,
) -> list[Document]:
    """Crawl and index *url* into an existing pending session.

    The session becomes ready only when at least one document was indexed.
    It is deleted when the crawl yields no pages, extraction yields no
    documents, or any step fails, so callers never see an empty ready session.
    ``max_pages`` defaults to ``crawl_settings.max_pages``.

    Returns:
        The indexed documents, or an empty list when the session was deleted.
    """
    crawl_settings = crawl_settings or CrawlSettings()
    if max_pages is None:
        max_pages = crawl_settings.max_pages

    tracer = get_tracer("site_rag.ingest")
    with tracer.start_as_current_span("ingestion") as span:
        span.set_attribute(ATTR_INGEST_URL, url)
        try:
            logger.info("[Session %s] Scraping %s...", session_id, url)
            pages = await crawl(url, max_pages, client=client, settings=crawl_settings)
            span.set_attribute(ATTR_INGEST_PAGES, len(pages))
            if not pages:
                store.delete(session_id)
                logger.info("[Session %s] No pages scraped, session deleted", session_id)
                return []

            logger.info("[Session %s] Scraped %d pages, embedding...", session_id, len(pages))
            documents = await index_pages(pages, embed)
            span.set_attribute(ATTR_INGEST_DOCUMENTS, len(documents))
            if not documents:
                store.delete(session_id)
                logger.info("[Session %s] No docs extracted, session deleted", session_id)
                return []

            store.mark_ready(session_id, documents)
        except Exception as exc:
            logger.exception("[Session %s] Ingestion failed", session_id)
            span.set_status(trace.StatusCode.ERROR, str(exc))
            span.record_exception(exc)
            store.delete(session_id)
            return []

    logger.info("[Session %s] Ready! %d documents", session_id, len(documents))
    return documents


async def start_ingestion(
    store: SessionStore,
    url: str,
    *,
    embed: Embedder,
    max_pages: int | None = None,
    client: httpx.AsyncClient | None = None,
    crawl_settings: CrawlSettings | None = None,
) -> str:
    """Create a pending session and run its ingestion in the background.

    Returns:
        The new session id, immediately. Poll :func:`session_status` for
        completion.
    """
    session = store.create_pending()
    task = asyncio.create_task(
        ingest_site(
            store,
            session.session_id,
            url,
            embed=embed,
            max_pages=max_pages,
            client=client,
            crawl_settings=crawl_settings,
        )
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    logger.info("[Custom Scrape] Starting for: %s (session %s)", url, session.session_id)
    return session.session_id


def session_status(store: SessionStore, session_id: str) -> dict:
    """Describe a session as ``not_found``, ``pending`` or ``ready`` with its pages."""
    session = store.get(session_id)
    if session is None:
        return {"status": "not_found"}
    if session.status is SessionStatus.PENDING:
        return {"status": SessionStatus.PENDING.value}
    return {
        "status": SessionStatus.READY.value,
        "message": f"Successfully loaded: {len(session.corpus)} pages",
        "pages": [{"title": document.title, "url": document.url} for document in session.corpus],
    }


def select_corpus(store: SessionStore, session_id: str | None, default_corpus: Sequence[Document]) -> list[Document]:
    """Use a ready session's corpus when one is given, else the default corpus.

    A session that is still pending also falls back to the default corpus,
    so questions asked during ingestion are answered from the pre-built pages.
    """
    if session_id:
        session = store.get(session_id)
        if session is not None and session.status is SessionStatus.READY:
            logger.info("Using session docs: %d documents", len(session.corpus))
            return list(session.corpus)
    return list(default_corpus)
