from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from knowledge_scout.services.knowledge import (
    CachedAnswer,
    Document,
    DocumentSummary,
    IndexStats,
)
from knowledge_scout.services.knowledge.access import is_owner, visible_share_token


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AskRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    query: str
    k: int = 5


class IngestRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: str = Field(min_length=1, max_length=512)
    content: str
    is_private: bool = False
    filename: str | None = Field(default=None, max_length=512)
    mime_type: str | None = Field(default=None, max_length=128)


class ReferenceResponse(CamelModel):
    doc_id: str
    doc_title: str
    page: int
    snippet: str


class AskResponse(CamelModel):
    query: str
    answer: str
    references: list[ReferenceResponse]
    cached: bool

    @classmethod
    def from_cached(cls, cached: CachedAnswer, *, was_cache_hit: bool) -> "AskResponse":
        return cls(
            query=cached.query,
            answer=cached.answer,
            references=[
                ReferenceResponse(
                    doc_id=reference.doc_id,
                    doc_title=reference.doc_title,
                    page=reference.page,
                    snippet=reference.snippet,
                )
                for reference in cached.references
            ],
            cached=was_cache_hit,
        )


class IndexStatsResponse(CamelModel):
    total_documents: int
    total_pages: int
    last_rebuilt: datetime
    index_version: int

    @classmethod
    def from_stats(cls, stats: IndexStats) -> "IndexStatsResponse":
        return cls(
            total_documents=stats.total_documents,
            total_pages=stats.total_pages,
            last_rebuilt=stats.last_rebuilt,
            index_version=stats.index_version,
        )


class IngestResponse(CamelModel):
    id: str
    title: str
    filename: str
    is_private: bool
    share_token: str | None
    uploaded_at: datetime
    page_count: int

    @classmethod
    def from_document(cls, document: Document) -> "IngestResponse":
        return cls(
            id=document.id,
            title=document.title,
            filename=document.filename,
            is_private=document.is_private,
            share_token=document.share_token,
            uploaded_at=document.uploaded_at,
            page_count=len(document.pages),
        )


class DocumentSummaryResponse(CamelModel):
    id: str
    title: str
    filename: str
    uploaded_at: datetime
    size: int
    is_private: bool
    page_count: int
    is_owner: bool

    @classmethod
    def from_summary(
        cls, summary: DocumentSummary, *, caller_id: str | None
    ) -> "DocumentSummaryResponse":
        return cls(
            id=summary.id,
            title=summary.title,
            filename=summary.filename,
            uploaded_at=summary.uploaded_at,
            size=summary.size,
            is_private=summary.is_private,
            page_count=summary.page_count,
            is_owner=caller_id is not None and caller_id == summary.owner_id,
        )


class DocumentListResponse(CamelModel):
    documents: list[DocumentSummaryResponse]
    total: int
    limit: int
    offset: int


class PageResponse(CamelModel):
    page_number: int
    content: str


class DocumentDetailResponse(CamelModel):
    id: str
    title: str
    filename: str
    content: str
    pages: list[PageResponse]
    uploaded_at: datetime
    size: int
    is_private: bool
    is_owner: bool
    share_token: str | None = None

    @classmethod
    def from_document(
        cls, document: Document, *, caller_id: str | None
    ) -> "DocumentDetailResponse":
        return cls(
            id=document.id,
            title=document.title,
            filename=document.filename,
            content=document.content,
            pages=[
                PageResponse(page_number=page.page_number, content=page.content)
                for page in document.pages
            ],
            uploaded_at=document.uploaded_at,
            size=document.size,
            is_private=document.is_private,
            is_owner=is_owner(document, caller_id),
            share_token=visible_share_token(document, caller_id),
        )


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
