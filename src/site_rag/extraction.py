"""Readable-text extraction plus contact signal harvesting for crawled pages.

General-purpose boilerplate removal discards footers, call-to-action buttons
and ``mailto:``/``tel:`` links. For a support chatbot those are often the most
useful answers, so they are collected from the full document and appended to
the article text under a "Contact Information" heading.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import trafilatura
from bs4 import BeautifulSoup

from .schema import Article, Page

logger = logging.getLogger(__name__)

CONTACT_HEADING = "Contact Information:"

_TRAILING_SPACE_RE = re.compile(r"\s+\n")
_NON_TEXT_TAGS = ["script", "style", "noscript", "template"]
_CHROME_TAGS = ["nav", "header", "footer", "aside"]


@dataclass(frozen=True, slots=True)
class ContactHeuristics:
    """Selectors, keywords and length limits for contact signal harvesting."""

    button_selector: str = 'button, .btn, [role="button"]'
    footer_selector: str = 'footer, [role="contentinfo"]'
    keywords: tuple[str, ...] = ("contact", "call", "email", "support", "help")
    button_text_limit: int = 100
    footer_text_limit: int = 500


DEFAULT_HEURISTICS = ContactHeuristics()


def _one_line(text: str) -> str:
    return " ".join(text.split())


def _link_signals(soup: BeautifulSoup, scheme: str, label: str) -> list[str]:
    lines: list[str] = []
    for link in soup.select(f'a[href^="{scheme}"]'):
        value = link["href"][len(scheme):].strip()
        text = _one_line(link.get_text())
        if text and text != value:
            lines.append(f"{label}: {value} ({text})")
        else:
            lines.append(f"{label}: {value}")
    return lines


def extract_contact_info(soup: BeautifulSoup, heuristics: ContactHeuristics = DEFAULT_HEURISTICS) -> list[str]:
    """Collect contact and escalation signals from a parsed document.

    Args:
        soup: The original parsed page, before any boilerplate removal.
        heuristics: Selectors, keywords and thresholds to apply.

    Returns:
        One line per signal: emails, phones, contact buttons, then footers.
    """
    lines = _link_signals(soup, "mailto:", "Email")
    lines.extend(_link_signals(soup, "tel:", "Phone"))

    for button in soup.select(heuristics.button_selector):
        text = _one_line(button.get_text())
        if not text or len(text) >= heuristics.button_text_limit:
            continue
        lowered = text.lower()
        if any(keyword in lowered for keyword in heuristics.keywords):
            lines.append(f"Button: {text}")

    for footer in soup.select(heuristics.footer_selector):
        text = _one_line(footer.get_text(" "))
        if text and len(text) < heuristics.footer_text_limit:
            lines.append(f"Footer info: {text}")

    return lines


def render_contact_section(lines: list[str]) -> str:
    """Format contact lines as an appendable section, or ``""`` when empty."""
    if not lines:
        return ""
    bullets = "\n".join(f"- {line}" for line in lines)
    return f"\n\n{CONTACT_HEADING}\n{bullets}"


def normalize_whitespace(text: str) -> str:
    return _TRAILING_SPACE_RE.sub("\n", text).strip()


def _fallback_text(html: str) -> str:
    """Main content without page chrome, or the whole visible body when that is all there is."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_TEXT_TAGS):
        tag.decompose()
    full_text = (soup.body or soup).get_text("\n")

    for tag in soup(_CHROME_TAGS):
        tag.decompose()
    main = soup.find("main") or soup.find("article") or soup.find(attrs={"role": "main"})
    text = (main or soup.body or soup).get_text("\n")
    return text if text.strip() else full_text


def _main_text(page: Page) -> str:
    text = trafilatura.extract(
        page.html,
        url=page.url,
        include_comments=False,
        include_tables=True,
        favor_recall=True,
    )
    if not text or not text.strip():
        logger.debug("trafilatura found no main content in %s, using fallback", page.url)
        text = _fallback_text(page.html)
    return text


def _title(soup: BeautifulSoup, fallback: str) -> str:
    if soup.title and soup.title.get_text(strip=True):
        return _one_line(soup.title.get_text())
    heading = soup.find("h1")
    if heading and heading.get_text(strip=True):
        return _one_line(heading.get_text())
    return fallback


def extract_article(page: Page, heuristics: ContactHeuristics = DEFAULT_HEURISTICS) -> Article | None:
    """Turn a crawled page into a titled article with contact info appended.

    Returns:
        The article, or None when the page has no readable text. Pages with
        no readable text are meant to be dropped from the corpus.
    """
    body = normalize_whitespace(_main_text(page))
    if not body:
        logger.info("No readable content in %s", page.url)
        return None

    soup = BeautifulSoup(page.html, "html.parser")
    text = body + render_contact_section(extract_contact_info(soup, heuristics))
    return Article(title=_title(soup, page.url), text=text)
