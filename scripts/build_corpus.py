"""Crawl a site and write its indexed corpus to the default corpus file."""
import argparse
import asyncio
import logging

from site_rag.crawler import crawl
from site_rag.embeddings import EmbeddingClient
from site_rag.indexer import index_pages
from site_rag.io_utils import save_corpus
from site_rag.logging_config import configure_logging
from site_rag.settings import load_settings

logger = logging.getLogger("site_rag.scripts.build_corpus")


async def build(seed_url: str, max_pages: int | None, output: str | None) -> int:
    ai_settings, crawl_settings, paths = load_settings()
    pages = await crawl(seed_url, max_pages or crawl_settings.max_pages, settings=crawl_settings)
    documents = await index_pages(pages, EmbeddingClient(ai_settings))
    destination = output or paths.corpus_path
    save_corpus(documents, destination)
    logger.info("Wrote %d documents to %s", len(documents), destination)
    return len(documents)


def main() -> None:
    """Build ``data/embeddings.json`` from a seed URL."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("url", help="seed URL to crawl")
    parser.add_argument("--max-pages", type=int, default=None)
    parser.add_argument("--output", default=None, help="corpus file (default: data/embeddings.json)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)
    asyncio.run(build(args.url, args.max_pages, args.output))


if __name__ == "__main__":
    main()
