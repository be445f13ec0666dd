from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import numpy as np

from .embeddings import Embedder, cosine_similarity
from .help_guide import HELP_DOC_ID, HELP_GUIDE, HELP_TITLE, HELP_URL
from .schema import Document, ScoredHit

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


class HelpDocument:
    """Static FAQ document whose single vector is computed once and cached."""

    def __init__(
        self,
        text: str = HELP_GUIDE,
        title: str = HELP_TITLE,
        url: str = HELP_URL,
        doc_id: str = HELP_DOC_ID,
    ):
        self.text = text
        self.title = title
        self.url = url
        self.doc_id = doc_id
        self._vector: list[float] | None = None
        self._lock: asyncio.Lock | None = None

    @property
    def is_embedded(self) -> bool:
        return self._vector is not None

    async def load(self, embed: Embedder) -> Document:
        """Return the help document, embedding it on first use only."""
        if self._vector is None:
            if self._lock is None:
                self._lock = asyncio.Lock()
            async with self._lock:
                if self._vector is None:
                    logger.info("Embedding built-in help document")
                    self._vector = await embed(self.text)
        return Document(
            doc_id=self.doc_id,
            url=self.url,
            title=self.title,
            text=self.text,
            chunks=[self.text],
            vectors=[self._vector],
        )


default_help_document = HelpDocument()


def rank_chunks(query_vector: Sequence[float], corpus: Sequence[Document], k: int = DEFAULT_TOP_K) -> list[ScoredHit]:
    """Score every (chunk, vector) pair in the corpus and return the best ``k``.

    Args:
        query_vector: Embedded question.
        corpus: Documents with aligned chunks and vectors.
        k: Number of hits to return.

    Returns:
        Hits sorted by descending cosine similarity. Empty for an empty corpus.

    Raises:
        ValueError: ``k`` is negative.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    query = np.asarray(query_vector, dtype=np.float64)
    hits: list[ScoredHit] = []
    for document in corpus:
        if not document.vectors:
            continue
        scores = cosine_similarity(query, np.asarray(document.vectors, dtype=np.float64))
        for chunk, score in zip(document.chunks, scores, strict=True):
            hits.append(ScoredHit(score=float(score), chunk_text=chunk, title=document.title, url=document.url))

    hits.sort(key=lambda hit: hit.score, reverse=True)
    return hits[:k]


async def retrieve(
    query: str,
    corpus: Sequence[Document],
    embed: Embedder,
    k: int = DEFAULT_TOP_K,
    *,
    help_document: HelpDocument | None = None,
    include_help: bool = True,
) -> list[ScoredHit]:
    """Embed the question and rank the corpus plus the built-in help document.

    Args:
        query: User question.
        corpus: Session or default documents.
        embed: Async text-to-vector callable. Failures propagate.
        k: Number of hits to return.
        help_document: FAQ document to inject; defaults to the process-wide one.
        include_help: Inject the FAQ document into the candidate pool.

    Returns:
        Top ``k`` hits across all candidate chunks.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    candidates = list(corpus)
    if include_help:
        candidates.append(await (help_document or default_help_document).load(embed))
    if not candidates:
        return []

    query_vector = await embed(query)
    return rank_chunks(query_vector, candidates, k)
