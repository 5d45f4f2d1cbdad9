from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Page:
    page_number: int
    content: str


@dataclass(frozen=True)
class Document:
    id: str
    title: str
    filename: str
    filepath: str | None
    content: str
    owner_id: str
    is_private: bool
    share_token: str | None
    size: int
    mime_type: str | None
    uploaded_at: datetime
    pages: tuple[Page, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DocumentSummary:
    id: str
    title: str
    filename: str
    owner_id: str
    is_private: bool
    size: int
    uploaded_at: datetime
    page_count: int


@dataclass(frozen=True)
class Reference:
    doc_id: str
    doc_title: str
    page: int
    snippet: str
    relevance: int

    def to_json(self) -> dict[str, Any]:
        return {
            "doc_id": self.doc_id,
            "doc_title": self.doc_title,
            "page": self.page,
            "snippet": self.snippet,
            "relevance": self.relevance,
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "Reference":
        return cls(
            doc_id=str(payload["doc_id"]),
            doc_title=str(payload["doc_title"]),
            page=int(payload["page"]),
            snippet=str(payload["snippet"]),
            relevance=int(payload.get("relevance", 0)),
        )


@dataclass(frozen=True)
class CachedAnswer:
    query: str
    answer: str
    references: tuple[Reference, ...]
    created_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IndexStats:
    total_documents: int
    total_pages: int
    last_rebuilt: datetime
    index_version: int


@dataclass(frozen=True)
class IngestionSummary:
    document_count: int
    page_count: int
    source_dir: str
