from knowledge_scout.services.knowledge.container import ScoutServices, build_services
from knowledge_scout.services.knowledge.ingest import ingest_directory
from knowledge_scout.services.knowledge.types import (
    CachedAnswer,
    Document,
    DocumentSummary,
    IndexStats,
    IngestionSummary,
    Page,
    Reference,
)

__all__ = [
    "CachedAnswer",
    "Document",
    "DocumentSummary",
    "IndexStats",
    "IngestionSummary",
    "Page",
    "Reference",
    "ScoutServices",
    "build_services",
    "ingest_directory",
]
