from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from knowledge_scout.models import IndexStatsRecord
from knowledge_scout.services.knowledge.clock import Clock, as_utc, utcnow
from knowledge_scout.services.knowledge.document_store import DocumentStore
from knowledge_scout.services.knowledge.result_cache import ResultCache
from knowledge_scout.services.knowledge.types import IndexStats

logger = logging.getLogger(__name__)

STATS_ROW_ID = 1


def _to_stats(record: IndexStatsRecord) -> IndexStats:
    return IndexStats(
        total_documents=record.total_documents,
        total_pages=record.total_pages,
        last_rebuilt=as_utc(record.last_rebuilt),
        index_version=record.index_version,
    )


class IndexStatsTracker:
    """Aggregate document/page counters plus a version bumped only by rebuilds."""

    def __init__(
        self,
        engine: Engine,
        store: DocumentStore,
        cache: ResultCache,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._engine = engine
        self._store = store
        self._cache = cache
        self._clock = clock
        # shared with the store so a recount never runs between an insert and its increment
        self._lock = store.write_lock

    def record_ingest(self, session: Session, page_count: int) -> None:
        """Bump the counters inside the ingest transaction; the caller commits."""
        with self._lock:
            result = session.execute(
                update(IndexStatsRecord)
                .where(IndexStatsRecord.id == STATS_ROW_ID)
                .values(
                    total_documents=IndexStatsRecord.total_documents + 1,
                    total_pages=IndexStatsRecord.total_pages + page_count,
                )
            )
            if not result.rowcount:
                # first ingest ever: the recount already includes the flushed document
                self._create_record(session)

    def current_stats(self) -> IndexStats:
        with Session(self._engine) as session:
            record = session.get(IndexStatsRecord, STATS_ROW_ID)
            if record is not None:
                return _to_stats(record)

        with self._lock, Session(self._engine) as session:
            record = session.get(IndexStatsRecord, STATS_ROW_ID)
            if record is None:
                record = self._create_record(session)
                session.commit()
            return _to_stats(record)

    def rebuild(self) -> IndexStats:
        with self._lock:
            with Session(self._engine) as session:
                total_documents, total_pages = self._store.count_totals(session)
                record = session.get(IndexStatsRecord, STATS_ROW_ID)
                if record is None:
                    record = self._create_record(session)

                record.total_documents = total_documents
                record.total_pages = total_pages
                record.last_rebuilt = self._clock()
                record.index_version += 1
                session.commit()
                stats = _to_stats(record)

            self._cache.purge()

        logger.info(
            "index rebuilt version=%d documents=%d pages=%d",
            stats.index_version,
            stats.total_documents,
            stats.total_pages,
        )
        return stats

    def _create_record(self, session: Session) -> IndexStatsRecord:
        total_documents, total_pages = self._store.count_totals(session)
        record = IndexStatsRecord(
            id=STATS_ROW_ID,
            total_documents=total_documents,
            total_pages=total_pages,
            last_rebuilt=self._clock(),
            index_version=1,
        )
        session.add(record)
        session.flush()
        return record
