"""Bounded breadth-first crawler that collects same-site HTML pages."""
from __future__ import annotations

import asyncio
import logging
from collections import deque

import httpx

from .links import extract_links, is_non_html_url
from .schema import Page
from .settings import CrawlSettings

logger = logging.getLogger(__name__)

_HTML_PREFIXES = ("<!doctype", "<html")


def looks_like_html(body: str) -> bool:
    """True when the body starts with a doctype or ``<html>`` tag."""
    return body.strip().lower().startswith(_HTML_PREFIXES)


def build_client(settings: CrawlSettings) -> httpx.AsyncClient:
    """Create the HTTP client used for page fetches."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=httpx.Timeout(settings.timeout),
        follow_redirects=True,
    )


async def fetch_html(
    client: httpx.AsyncClient,
    url: str,
    retries: int = 1,
    backoff: float = 1.5,
) -> str:
    """Fetch *url* and return its body text.

    Timeouts and transport errors are retried ``retries`` times with a linear
    backoff. A non-2xx status raises :class:`httpx.HTTPStatusError` at once.
    """
    attempt = 0
    while True:
        try:
            response = await client.get(url)
            response.raise_for_status()
            return response.text
        except httpx.TransportError as exc:
            if attempt >= retries:
                raise
            attempt += 1
            delay = backoff * attempt
            logger.debug("Retrying %s in %.1fs after %s", url, delay, exc)
            await asyncio.sleep(delay)


async def _crawl(client: httpx.AsyncClient, seed_url: str, max_pages: int, settings: CrawlSettings) -> list[Page]:
    queue: deque[str] = deque([seed_url])
    visited: set[str] = set()
    pages: list[Page] = []

    while queue and len(visited) < max_pages:
        url = queue.popleft()
        if url in visited:
            continue
        visited.add(url)

        if is_non_html_url(url):
            logger.info("Skipping non-HTML URL: %s", url)
            continue

        try:
            html = await fetch_html(
                client, url, retries=settings.fetch_retries, backoff=settings.retry_backoff
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Skip %s: %s", url, exc)
            continue

        if not looks_like_html(html):
            logger.info("Skipping non-HTML content: %s", url)
            continue

        pages.append(Page(url=url, html=html))
        logger.info("Added page %d: %s", len(pages), url)

        discovered = extract_links(html, url)
        logger.debug("Found %d links on %s", len(discovered), url)
        for link in discovered[: settings.fan_out]:
            if len(visited) + len(queue) >= max_pages:
                break
            if link not in visited:
                queue.append(link)

    logger.info("Crawl of %s completed: %d pages", seed_url, len(pages))
    return pages


async def crawl(
    seed_url: str,
    max_pages: int = 20,
    *,
    client: httpx.AsyncClient | None = None,
    settings: CrawlSettings | None = None,
) -> list[Page]:
    """Breadth-first crawl of same-host pages starting at *seed_url*.

    At most ``max_pages`` URLs are dequeued, so at most ``max_pages`` pages are
    returned no matter how many links each page carries. A failing page is
    logged and skipped; it never aborts the crawl.

    Args:
        seed_url: First URL to fetch.
        max_pages: Upper bound on visited URLs.
        client: Optional pre-built HTTP client. When omitted, one is created
            from ``settings`` and closed when the crawl finishes.
        settings: Fan-out, timeout and retry configuration.

    Returns:
        Pages in breadth-first discovery order.
    """
    settings = settings or CrawlSettings()
    if client is not None:
        return await _crawl(client, seed_url, max_pages, settings)
    async with build_client(settings) as owned_client:
        return await _crawl(owned_client, seed_url, max_pages, settings)
