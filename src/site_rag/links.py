"""Hyperlink discovery and URL normalization for the crawler."""
from __future__ import annotations

import html as html_lib
import re
from urllib.parse import urldefrag, urljoin, urlparse

_HREF_RE = re.compile(r"""href\s*=\s*["']([^"']+)["']""", re.IGNORECASE)

NON_HTML_EXTENSIONS = (
    "pdf", "png", "jpg", "jpeg", "gif", "svg", "zip", "mp4", "mp3",
    "webp", "ico", "css", "js", "woff", "woff2", "ttf", "eot",
)
_NON_HTML_RE = re.compile(
    r"\.(" + "|".join(NON_HTML_EXTENSIONS) + r")(\?|$)", re.IGNORECASE
)
_FETCHABLE_SCHEMES = {"http", "https"}


def is_non_html_url(url: str) -> bool:
    """True when the URL points at an asset (image, archive, script, font, media)."""
    return _NON_HTML_RE.search(url) is not None


def host_of(url: str) -> str | None:
    """Return ``hostname[:port]`` for *url*, or None when it has no valid host."""
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return None
    if not parsed.hostname:
        return None
    return parsed.hostname if port is None else f"{parsed.hostname}:{port}"


def _absolutize(href: str, base_url: str) -> str | None:
    try:
        absolute = urljoin(base_url, href.strip())
    except ValueError:
        return None
    if urlparse(absolute).scheme not in _FETCHABLE_SCHEMES:
        return None
    if host_of(absolute) is None:
        return None
    return absolute


def extract_links(html: str, base_url: str, same_host_only: bool = True) -> list[str]:
    """Find every href in *html* and normalize it to an absolute, fetchable URL.

    Args:
        html: Raw page markup. A plain attribute scan is used, not a DOM walk.
        base_url: URL of the page the markup came from; relative hrefs resolve
            against it.
        same_host_only: Keep only links whose host (and port) equals the host
            of ``base_url``.

    Returns:
        Links in first-seen order with fragments removed. Duplicates are kept.
    """
    base_host = host_of(base_url)
    links: list[str] = []
    for match in _HREF_RE.finditer(html):
        absolute = _absolutize(html_lib.unescape(match.group(1)), base_url)
        if absolute is None:
            continue
        if same_host_only and host_of(absolute) != base_host:
            continue
        url, _fragment = urldefrag(absolute)
        if is_non_html_url(url):
            continue
        links.append(url)
    return links
