from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

import numpy as np
from openai import APIError, APIStatusError, AsyncOpenAI

from .errors import EmbeddingError
from .settings import AISettings

logger = logging.getLogger(__name__)

EPSILON = 1e-12

Embedder = Callable[[str], Awaitable[list[float]]]


def build_openai_client(settings: AISettings) -> AsyncOpenAI:
    """Create an async client for an OpenAI-compatible ``/v1`` backend."""
    return AsyncOpenAI(
        base_url=settings.api_base,
        api_key=settings.api_key,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


class EmbeddingClient:
    """Maps one text to one embedding vector via the ``/v1/embeddings`` endpoint."""

    def __init__(self, settings: AISettings, client: AsyncOpenAI | None = None):
        """Bind the client to a model and an HTTP backend.

        Args:
            settings: Backend URL, credential and embedding model name.
            client: Pre-built OpenAI client, mostly for tests.
        """
        self.model = settings.embedding_model
        self.client = client or build_openai_client(settings)

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            EmbeddingError: The backend returned a non-2xx status or could not
                be reached. The response body is kept as the diagnostic.
        """
        try:
            response = await self.client.embeddings.create(model=self.model, input=[text])
        except APIStatusError as exc:
            raise EmbeddingError(
                f"Embed error {exc.status_code}: {exc.response.text}",
                status_code=exc.status_code,
            ) from exc
        except APIError as exc:
            raise EmbeddingError(f"Embed error: {exc}") from exc
        return list(response.data[0].embedding)

    async def __call__(self, text: str) -> list[float]:
        return await self.embed(text)


async def embed_sequentially(texts: Sequence[str], embed: Embedder) -> list[list[float]]:
    """Embed texts one request at a time, in order.

    Requests are never issued concurrently, which keeps the backend below its
    rate limits and makes a failure point at exactly one text. The first
    failure propagates and nothing is returned.
    """
    vectors: list[list[float]] = []
    total = len(texts)
    for position, text in enumerate(texts, start=1):
        logger.info("Embedding chunk %d/%d", position, total)
        vectors.append(await embed(text))
    return vectors


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors, ``dot(a, b) / (|a| * |b| + 1e-12)``."""
    left = np.asarray(a, dtype=np.float64)
    right = np.asarray(b, dtype=np.float64)
    return float(left @ right / (np.linalg.norm(left) * np.linalg.norm(right) + EPSILON))


def cosine_similarity(query_vector: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Compute cosine similarity between one query vector and many vectors.

    Args:
        query_vector: Query embedding vector.
        matrix: Candidate embedding matrix where each row is one vector.

    Returns:
        A 1D array of cosine similarity scores aligned to matrix rows.
    """
    query_norm = np.linalg.norm(query_vector)
    matrix_norm = np.linalg.norm(matrix, axis=1)
    return (matrix @ query_vector) / (query_norm * matrix_norm + EPSILON)
