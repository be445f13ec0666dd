from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from .schema import Document


def _to_document(record: dict) -> Document:
    # Older corpus files key the document id as "id".
    if "doc_id" not in record and "id" in record:
        record = {**record}
        record["doc_id"] = record.pop("id")
    return Document(**record)


def load_corpus(path: str | Path) -> list[Document]:
    """Load a pre-computed corpus; a missing file yields an empty corpus."""
    source = Path(path)
    if not source.exists():
        return []
    with source.open("r", encoding="utf-8") as file_handle:
        records = json.load(file_handle)
    return [_to_document(record) for record in records]


def save_corpus(documents: list[Document], path: str | Path) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    with destination.open("w", encoding="utf-8") as file_handle:
        json.dump([asdict(document) for document in documents], file_handle)
