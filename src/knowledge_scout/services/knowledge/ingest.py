from __future__ import annotations

from pathlib import Path

from knowledge_scout.services.knowledge.document_store import DocumentStore
from knowledge_scout.services.knowledge.loader import load_files
from knowledge_scout.services.knowledge.types import IngestionSummary


def ingest_directory(
    store: DocumentStore,
    *,
    source_dir: Path,
    owner_id: str,
    is_private: bool = False,
) -> IngestionSummary:
    files = load_files(source_dir)

    page_count = 0
    for loaded in files:
        document = store.ingest(
            title=loaded.title,
            owner_id=owner_id,
            raw_text=loaded.text,
            is_private=is_private,
            filename=loaded.filename,
            filepath=loaded.filepath,
            mime_type=loaded.mime_type,
            size=loaded.size,
        )
        page_count += len(document.pages)

    return IngestionSummary(
        document_count=len(files),
        page_count=page_count,
        source_dir=str(source_dir),
    )
