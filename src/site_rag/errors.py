"""Exceptions raised across the ingestion and answering pipeline."""
from __future__ import annotations


class SiteRagError(RuntimeError):
    """Base class for errors that abort an indexing batch or a chat request."""


class BackendError(SiteRagError):
    """Raised when the embedding or completion backend call fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmbeddingError(BackendError):
    """Raised when an embedding request fails or returns a non-2xx status."""


class CompletionError(BackendError):
    """Raised when a chat completion request fails or returns a non-2xx status."""


class InvalidQueryError(SiteRagError, ValueError):
    """Raised for malformed client input before any retrieval happens."""
