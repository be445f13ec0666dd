from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_USER_AGENT = "SiteRagBot/1.0 (+support chatbot)"


@dataclass(slots=True)
class AISettings:
    """Connection and model configuration for the embedding and chat backends."""

    base_url: str | None = None
    api_key: str | None = None
    embedding_model: str = "text-embedding-3-small"
    chat_model: str = "gpt-4o-mini"
    temperature: float = 0.2
    timeout: float = 30.0
    max_retries: int = 2
    product_name: str = "Any Command"

    @property
    def api_base(self) -> str | None:
        """OpenAI-compatible API root, i.e. ``{base_url}/v1``."""
        if not self.base_url:
            return None
        return f"{self.base_url.rstrip('/')}/v1"


@dataclass(slots=True)
class CrawlSettings:
    """Limits and politeness knobs for the same-site crawler."""

    max_pages: int = 20
    fan_out: int = 20
    timeout: float = 15.0
    fetch_retries: int = 1
    retry_backoff: float = 1.5
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(slots=True)
class Paths:
    """Filesystem locations for the pre-computed default corpus."""

    data_dir: str = "data"
    corpus_file: str = "embeddings.json"

    @property
    def corpus_path(self) -> str:
        return os.path.join(self.data_dir, self.corpus_file)


def load_settings() -> tuple[AISettings, CrawlSettings, Paths]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple of backend settings, crawler settings and path settings.
    """
    load_dotenv()
    return (
        AISettings(
            base_url=os.getenv("AI_BASE_URL"),
            api_key=os.getenv("AI_API_KEY"),
            embedding_model=os.getenv("EMBED_MODEL", "text-embedding-3-small"),
            chat_model=os.getenv("AI_MODEL", "gpt-4o-mini"),
            product_name=os.getenv("PRODUCT_NAME", "Any Command"),
        ),
        CrawlSettings(
            max_pages=int(os.getenv("CRAWL_MAX_PAGES", "20")),
            timeout=float(os.getenv("CRAWL_TIMEOUT", "15")),
        ),
        Paths(),
    )
