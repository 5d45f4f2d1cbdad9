from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from knowledge_scout.config import Settings
from knowledge_scout.services.knowledge.clock import Clock, utcnow
from knowledge_scout.services.knowledge.document_store import DocumentStore
from knowledge_scout.services.knowledge.index_stats import IndexStatsTracker
from knowledge_scout.services.knowledge.result_cache import ResultCache
from knowledge_scout.services.knowledge.search import SearchEngine


@dataclass(frozen=True)
class ScoutServices:
    store: DocumentStore
    search: SearchEngine
    cache: ResultCache
    stats: IndexStatsTracker


def build_services(engine: Engine, settings: Settings, *, clock: Clock = utcnow) -> ScoutServices:
    store = DocumentStore(
        engine,
        lines_per_page=settings.lines_per_page,
        default_page_limit=settings.default_page_limit,
        clock=clock,
    )
    search = SearchEngine(store, snippet_radius=settings.snippet_radius)
    cache = ResultCache(
        engine,
        search,
        ttl_seconds=settings.cache_ttl_seconds,
        local_max_entries=settings.local_cache_max_entries,
        clock=clock,
    )
    stats = IndexStatsTracker(engine, store, cache, clock=clock)
    store.add_ingest_listener(stats.record_ingest)
    return ScoutServices(store=store, search=search, cache=cache, stats=stats)
