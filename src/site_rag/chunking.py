from __future__ import annotations

import re

DEFAULT_MAX_CHARS = 1500

_PARAGRAPH_BREAK_RE = re.compile(r"\n{2,}")


def _hard_split(paragraph: str, max_chars: int) -> list[str]:
    pieces = (paragraph[start : start + max_chars].strip() for start in range(0, len(paragraph), max_chars))
    return [piece for piece in pieces if piece]


def chunk_text(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> list[str]:
    """Split text into paragraph-aligned chunks of at most ``max_chars`` characters.

    Paragraphs (separated by two or more newlines) are packed greedily into an
    accumulator joined by blank lines. When the next paragraph would overflow,
    the accumulator is emitted and a new one starts with that paragraph, so
    whole paragraphs win over tight packing. A paragraph longer than
    ``max_chars`` on its own is cut into fixed ``max_chars`` slices.

    Args:
        text: Normalized document text.
        max_chars: Maximum chunk length in characters.

    Returns:
        Non-empty chunks in document order. Output depends only on the inputs.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")

    chunks: list[str] = []
    current = ""

    def flush() -> None:
        if current.strip():
            chunks.append(current.strip())

    for paragraph in _PARAGRAPH_BREAK_RE.split(text):
        if not paragraph.strip():
            continue

        if len(paragraph) > max_chars:
            flush()
            current = ""
            chunks.extend(_hard_split(paragraph, max_chars))
            continue

        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if len(candidate) > max_chars:
            flush()
            current = paragraph
        else:
            current = candidate

    flush()
    return chunks
