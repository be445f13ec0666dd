"""Crawl a website, index its pages and answer questions grounded in them."""

from .schema import Article, ChatReply, Document, Page, ScoredHit, SourceRef

__all__ = ["Page", "Article", "Document", "ScoredHit", "SourceRef", "ChatReply"]
