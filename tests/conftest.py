"""Shared pytest fixtures for site_rag unit tests."""
from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from site_rag.errors import EmbeddingError
from site_rag.schema import Document, Page

SUPPORT_PAGE_HTML = """<!DOCTYPE html>
<html>
<head><title>Example Support</title></head>
<body>
  <main>
    <h1>Example Support</h1>
    <p>Our support team answers questions about installation, billing and
    connection problems every weekday. Most issues are solved by restarting the
    desktop server and making sure both devices share the same network.</p>
    <p>If the app still does not connect, check that the firewall allows the
    server on private and public networks, then try again from your phone.</p>
  </main>
  <footer>Call us: (555) 123-4567</footer>
</body>
</html>
"""


def fake_vector(text: str) -> list[float]:
    """Deterministic stand-in embedding that identifies its input text."""
    return [float(len(text)), float(sum(map(ord, text)) % 997), 1.0]


class FakeEmbedder:
    """Async embedder that records calls and can fail on a chosen call."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, fail_on_call: int | None = None):
        self.vectors = vectors or {}
        self.fail_on_call = fail_on_call
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise EmbeddingError("Embed error 500: backend unavailable", status_code=500)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        return self.vectors.get(text, fake_vector(text))


def site_handler(pages: dict[str, str], requested: list[str]) -> Callable[[httpx.Request], httpx.Response]:
    """MockTransport handler serving ``pages`` keyed by URL path; 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        body = pages.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=body)

    return handler


@pytest.fixture()
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def support_page() -> Page:
    return Page(url="https://example.com", html=SUPPORT_PAGE_HTML)


@pytest.fixture()
def sample_corpus() -> list[Document]:
    return [
        Document(
            doc_id="https://example.com/wifi",
            url="https://example.com/wifi",
            title="Wi-Fi setup",
            text="Connect both devices to the same Wi-Fi.",
            chunks=["Connect both devices to the same Wi-Fi."],
            vectors=[[1.0, 0.0, 0.0]],
        ),
        Document(
            doc_id="https://example.com/firewall",
            url="https://example.com/firewall",
            title="Firewall",
            text="Allow the server through the firewall.\n\nUse private networks.",
            chunks=["Allow the server through the firewall.", "Use private networks."],
            vectors=[[0.0, 1.0, 0.0], [0.1, 0.9, 0.2]],
        ),
    ]
