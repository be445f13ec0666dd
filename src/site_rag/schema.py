from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class Page:
    """One fetched HTML page produced by the crawler."""

    url: str
    html: str


@dataclass(slots=True)
class Article:
    """Readable title and body text extracted from a single page."""

    title: str
    text: str


@dataclass(slots=True)
class Document:
    """Indexed page: normalized text plus aligned chunk and vector arrays.

    ``vectors[i]`` is the embedding of ``chunks[i]``. The two sequences are
    only ever written together by the indexer.
    """

    doc_id: str
    url: str
    title: str
    text: str
    chunks: list[str] = field(default_factory=list)
    vectors: list[list[float]] = field(default_factory=list)

    @property
    def is_aligned(self) -> bool:
        return len(self.chunks) == len(self.vectors)


@dataclass(slots=True)
class ScoredHit:
    """Retrieval-time match between a query and one indexed chunk."""

    score: float
    chunk_text: str
    title: str
    url: str


@dataclass(slots=True)
class SourceRef:
    """Citation entry returned alongside a chat reply."""

    source_id: str
    title: str
    url: str
    score: float


@dataclass(slots=True)
class ChatReply:
    """Answer text and the sources it was grounded on."""

    reply: str
    sources: list[SourceRef] = field(default_factory=list)
