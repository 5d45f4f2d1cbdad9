"""
Two-tier cache for answered queries.

Tier one is a process-local TTL cache keyed by (query, max_results, caller).
Tier two is the append-only ``query_cache`` table, looked up by exact query
text and freshness only. The tiers are not transactionally linked: either may
hold an entry the other lacks, e.g. after a process restart.
"""
from __future__ import annotations

from datetime import timedelta
import logging
import threading

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from knowledge_scout.errors import InvalidInputError
from knowledge_scout.models import QueryCacheRecord
from knowledge_scout.services.knowledge.answer import synthesize_answer
from knowledge_scout.services.knowledge.clock import Clock, as_utc, utcnow
from knowledge_scout.services.knowledge.local_cache import TTLCache
from knowledge_scout.services.knowledge.search import DEFAULT_MAX_RESULTS, SearchEngine
from knowledge_scout.services.knowledge.types import CachedAnswer, Reference

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60
ANONYMOUS_BUCKET = "public"

CacheKey = tuple[str, int, str]


def make_cache_key(query_text: str, max_results: int, caller_id: str | None) -> CacheKey:
    # every anonymous caller shares one bucket per (query, max_results)
    return (query_text, max_results, caller_id or ANONYMOUS_BUCKET)


def _to_cached_answer(record: QueryCacheRecord) -> CachedAnswer:
    return CachedAnswer(
        query=record.query,
        answer=record.answer,
        references=tuple(Reference.from_json(item) for item in record.references),
        created_at=as_utc(record.cached_at),
        expires_at=as_utc(record.expires_at),
    )


class ResultCache:
    def __init__(
        self,
        engine: Engine,
        search_engine: SearchEngine,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        local_max_entries: int = 1000,
        clock: Clock = utcnow,
    ) -> None:
        self._engine = engine
        self._search_engine = search_engine
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._local: TTLCache[CachedAnswer] = TTLCache(
            ttl_seconds=ttl_seconds,
            max_entries=local_max_entries,
            clock=clock,
        )
        # bumped by purge(); results computed under an older generation are dropped
        self._generation = 0
        self._lock = threading.Lock()

    def answer(
        self,
        query_text: str,
        max_results: int = DEFAULT_MAX_RESULTS,
        caller_id: str | None = None,
    ) -> tuple[CachedAnswer, bool]:
        if not query_text.strip():
            raise InvalidInputError("query must not be empty")

        key = make_cache_key(query_text, max_results, caller_id)
        with self._lock:
            generation = self._generation

        cached = self._local.get(key)
        if cached is not None:
            logger.debug("local cache hit query=%r", query_text)
            return cached, True

        cached = self._load_persisted(query_text)
        if cached is not None:
            logger.debug("persisted cache hit query=%r", query_text)
            with self._lock:
                if generation == self._generation:
                    self._local.set(key, cached)
            return cached, True

        references = self._search_engine.search(query_text, max_results, caller_id)
        created_at = self._clock()
        fresh = CachedAnswer(
            query=query_text,
            answer=synthesize_answer(query_text, references),
            references=tuple(references),
            created_at=created_at,
            expires_at=created_at + self._ttl,
        )

        with self._lock:
            if generation != self._generation:
                logger.info("cache purged during query=%r; result not cached", query_text)
                return fresh, False
            self._store_persisted(fresh)
            self._local.set(key, fresh)

        return fresh, False

    def purge(self) -> int:
        """Drop every entry from both tiers. Returns the persisted rows removed."""
        with self._lock:
            self._generation += 1
            self._local.clear()
            with Session(self._engine) as session:
                result = session.execute(delete(QueryCacheRecord))
                session.commit()

        removed = int(result.rowcount or 0)
        logger.info("query cache purged persisted_entries=%d", removed)
        return removed

    def _load_persisted(self, query_text: str) -> CachedAnswer | None:
        with Session(self._engine) as session:
            record = session.scalar(
                select(QueryCacheRecord)
                .where(QueryCacheRecord.query == query_text)
                .where(QueryCacheRecord.expires_at > self._clock())
                .order_by(QueryCacheRecord.id.desc())
                .limit(1)
            )
            if record is None:
                return None
            return _to_cached_answer(record)

    def _store_persisted(self, cached: CachedAnswer) -> None:
        with Session(self._engine) as session:
            session.add(
                QueryCacheRecord(
                    query=cached.query,
                    answer=cached.answer,
                    references=[reference.to_json() for reference in cached.references],
                    cached_at=cached.created_at,
                    expires_at=cached.expires_at,
                )
            )
            session.commit()
