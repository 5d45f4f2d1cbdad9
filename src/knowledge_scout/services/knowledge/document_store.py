from __future__ import annotations

import logging
import secrets
import threading
from typing import Callable
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql.elements import ColumnElement

from knowledge_scout.errors import (
    AccessDeniedError,
    DocumentNotFoundError,
    InvalidInputError,
)
from knowledge_scout.models import DocumentRecord, PageRecord
from knowledge_scout.services.knowledge.access import can_read
from knowledge_scout.services.knowledge.clock import Clock, as_utc, utcnow
from knowledge_scout.services.knowledge.paginator import DEFAULT_LINES_PER_PAGE, split_pages
from knowledge_scout.services.knowledge.types import Document, DocumentSummary, Page

logger = logging.getLogger(__name__)

IngestListener = Callable[[Session, int], None]

_SHARE_TOKEN_ATTEMPTS = 8


def _visible_clause(caller_id: str | None) -> ColumnElement[bool]:
    public = DocumentRecord.is_private.is_(False)
    if caller_id is None:
        return public
    return or_(public, DocumentRecord.owner_id == caller_id)


def _to_document(record: DocumentRecord) -> Document:
    return Document(
        id=record.id,
        title=record.title,
        filename=record.filename,
        filepath=record.filepath,
        content=record.content,
        owner_id=record.owner_id,
        is_private=record.is_private,
        share_token=record.share_token,
        size=record.size,
        mime_type=record.mime_type,
        uploaded_at=as_utc(record.uploaded_at),
        pages=tuple(
            Page(page_number=page.page_number, content=page.content) for page in record.pages
        ),
    )


def count_totals(session: Session) -> tuple[int, int]:
    documents = session.scalar(select(func.count()).select_from(DocumentRecord)) or 0
    pages = session.scalar(select(func.count()).select_from(PageRecord)) or 0
    return int(documents), int(pages)


class DocumentStore:
    def __init__(
        self,
        engine: Engine,
        *,
        lines_per_page: int = DEFAULT_LINES_PER_PAGE,
        default_page_limit: int = 10,
        clock: Clock = utcnow,
    ) -> None:
        self._engine = engine
        self._lines_per_page = lines_per_page
        self._default_page_limit = default_page_limit
        self._clock = clock
        self._ingest_listeners: list[IngestListener] = []
        self.write_lock = threading.RLock()

    def add_ingest_listener(self, listener: IngestListener) -> None:
        self._ingest_listeners.append(listener)

    def ingest(
        self,
        *,
        title: str,
        owner_id: str,
        raw_text: str,
        is_private: bool = False,
        filename: str | None = None,
        filepath: str | None = None,
        mime_type: str | None = None,
        size: int | None = None,
    ) -> Document:
        normalized_title = title.strip()
        if not normalized_title:
            raise InvalidInputError("title must not be empty")
        if not owner_id:
            raise InvalidInputError("owner_id must not be empty")

        pages = split_pages(raw_text, lines_per_page=self._lines_per_page)

        with self.write_lock, Session(self._engine) as session:
            record = DocumentRecord(
                id=uuid4().hex,
                title=normalized_title,
                filename=filename or normalized_title,
                filepath=filepath,
                content=raw_text,
                owner_id=owner_id,
                is_private=is_private,
                share_token=self._new_share_token(session) if is_private else None,
                size=size if size is not None else len(raw_text.encode("utf-8")),
                mime_type=mime_type,
                uploaded_at=self._clock(),
                pages=[
                    PageRecord(page_number=page.page_number, content=page.content)
                    for page in pages
                ],
            )
            session.add(record)
            session.flush()
            # listeners write in this transaction so counters commit with the document
            for listener in self._ingest_listeners:
                listener(session, len(pages))
            session.commit()
            document = _to_document(record)

        logger.info(
            "ingested document id=%s pages=%d private=%s",
            document.id,
            len(document.pages),
            document.is_private,
        )
        return document

    def list_documents(
        self,
        caller_id: str | None,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[DocumentSummary], int]:
        resolved_limit = self._default_page_limit if limit is None else limit
        if resolved_limit < 0:
            raise InvalidInputError("limit must be >= 0")
        if offset < 0:
            raise InvalidInputError("offset must be >= 0")

        visible = _visible_clause(caller_id)
        page_counts = (
            select(
                PageRecord.document_id,
                func.count(PageRecord.id).label("page_count"),
            )
            .group_by(PageRecord.document_id)
            .subquery()
        )

        with Session(self._engine) as session:
            total = session.scalar(
                select(func.count()).select_from(DocumentRecord).where(visible)
            )
            rows = session.execute(
                select(DocumentRecord, func.coalesce(page_counts.c.page_count, 0))
                .outerjoin(page_counts, page_counts.c.document_id == DocumentRecord.id)
                .where(visible)
                .order_by(DocumentRecord.uploaded_at.desc(), DocumentRecord.seq.desc())
                .offset(offset)
                .limit(resolved_limit)
            ).all()

            summaries = [
                DocumentSummary(
                    id=record.id,
                    title=record.title,
                    filename=record.filename,
                    owner_id=record.owner_id,
                    is_private=record.is_private,
                    size=record.size,
                    uploaded_at=as_utc(record.uploaded_at),
                    page_count=int(page_count),
                )
                for record, page_count in rows
            ]

        return summaries, int(total or 0)

    def get(
        self,
        doc_id: str,
        caller_id: str | None = None,
        share_token: str | None = None,
    ) -> Document:
        with Session(self._engine) as session:
            record = session.scalar(
                select(DocumentRecord)
                .where(DocumentRecord.id == doc_id)
                .options(selectinload(DocumentRecord.pages))
            )
            if record is None:
                raise DocumentNotFoundError(doc_id)
            if not can_read(record, caller_id, share_token):
                logger.info(
                    "denied document id=%s anonymous=%s token_presented=%s",
                    doc_id,
                    caller_id is None,
                    bool(share_token),
                )
                raise AccessDeniedError(doc_id)
            return _to_document(record)

    def visible_documents(self, caller_id: str | None) -> list[Document]:
        """Documents a caller sees without a share token, in upload order."""
        with Session(self._engine) as session:
            records = session.scalars(
                select(DocumentRecord)
                .where(_visible_clause(caller_id))
                .options(selectinload(DocumentRecord.pages))
                .order_by(DocumentRecord.seq.asc())
            ).all()
            return [_to_document(record) for record in records]

    def count_totals(self, session: Session | None = None) -> tuple[int, int]:
        if session is not None:
            return count_totals(session)
        with Session(self._engine) as own_session:
            return count_totals(own_session)

    def _new_share_token(self, session: Session) -> str:
        for _ in range(_SHARE_TOKEN_ATTEMPTS):
            token = secrets.token_hex(16)
            taken = session.scalar(
                select(DocumentRecord.seq).where(DocumentRecord.share_token == token)
            )
            if taken is None:
                return token
        raise RuntimeError("could not generate a unique share token")
