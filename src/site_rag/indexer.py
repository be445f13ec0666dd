"""Turns crawled pages into documents with aligned chunk and vector arrays."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .chunking import DEFAULT_MAX_CHARS, chunk_text
from .embeddings import Embedder, embed_sequentially
from .extraction import extract_article
from .schema import Document, Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChunkRef:
    """Position of one flattened chunk inside the document list."""

    document_index: int
    chunk_index: int
    text: str


def build_documents(pages: Sequence[Page], max_chars: int = DEFAULT_MAX_CHARS) -> list[Document]:
    """Extract and chunk every page; pages without readable text are skipped.

    The returned documents have no vectors yet.
    """
    documents: list[Document] = []
    for page in pages:
        article = extract_article(page)
        if article is None:
            continue
        documents.append(
            Document(
                doc_id=page.url,
                url=page.url,
                title=article.title,
                text=article.text,
                chunks=chunk_text(article.text, max_chars),
            )
        )
    return documents


def flatten_chunks(documents: Sequence[Document]) -> list[ChunkRef]:
    return [
        ChunkRef(document_index=doc_idx, chunk_index=chunk_idx, text=chunk)
        for doc_idx, document in enumerate(documents)
        for chunk_idx, chunk in enumerate(document.chunks)
    ]


def scatter_vectors(documents: Sequence[Document], refs: Sequence[ChunkRef], vectors: Sequence[list[float]]) -> None:
    """Write each vector into the slot its ChunkRef owns."""
    if len(refs) != len(vectors):
        raise ValueError(f"Got {len(vectors)} vectors for {len(refs)} chunks")

    slots: list[list[list[float] | None]] = [[None] * len(document.chunks) for document in documents]
    for ref, vector in zip(refs, vectors, strict=True):
        slots[ref.document_index][ref.chunk_index] = vector

    for document, doc_slots in zip(documents, slots, strict=True):
        if any(slot is None for slot in doc_slots):
            raise ValueError(f"Missing vectors for document {document.doc_id}")
        document.vectors = doc_slots


async def index_pages(pages: Sequence[Page], embed: Embedder, max_chars: int = DEFAULT_MAX_CHARS) -> list[Document]:
    """Extract, chunk and embed a batch of pages.

    All chunks of all documents are embedded sequentially in one pass. Any
    embedding failure aborts the whole batch; there is no partial result.

    Args:
        pages: Crawled pages.
        embed: Async text-to-vector callable.
        max_chars: Chunk size limit.

    Returns:
        Documents whose ``vectors[i]`` is the embedding of ``chunks[i]``.
    """
    documents = build_documents(pages, max_chars)
    refs = flatten_chunks(documents)
    logger.info("Indexing %d documents (%d chunks) from %d pages", len(documents), len(refs), len(pages))

    vectors = await embed_sequentially([ref.text for ref in refs], embed)
    scatter_vectors(documents, refs, vectors)
    return documents
