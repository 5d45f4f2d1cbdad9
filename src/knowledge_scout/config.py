from dataclasses import dataclass
from functools import lru_cache
import os


def _to_bool(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: str | None, *, default: int, minimum: int) -> int:
    if value is None:
        return default
    parsed = int(value)
    return max(minimum, parsed)


@dataclass(frozen=True)
class Settings:
    database_url: str
    db_echo: bool
    auto_create_schema: bool
    lines_per_page: int
    snippet_radius: int
    cache_ttl_seconds: int
    local_cache_max_entries: int
    default_page_limit: int
    identity_header: str
    source_dir: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv(
            "SCOUT_DATABASE_URL",
            "sqlite+pysqlite:///data/knowledge_scout.db",
        ),
        db_echo=_to_bool(os.getenv("SCOUT_DB_ECHO"), default=False),
        auto_create_schema=_to_bool(os.getenv("SCOUT_AUTO_CREATE_SCHEMA"), default=True),
        lines_per_page=_to_int(os.getenv("SCOUT_LINES_PER_PAGE"), default=30, minimum=1),
        snippet_radius=_to_int(os.getenv("SCOUT_SNIPPET_RADIUS"), default=50, minimum=0),
        cache_ttl_seconds=_to_int(os.getenv("SCOUT_CACHE_TTL_SECONDS"), default=60, minimum=1),
        local_cache_max_entries=_to_int(
            os.getenv("SCOUT_LOCAL_CACHE_MAX_ENTRIES"), default=1000, minimum=1
        ),
        default_page_limit=_to_int(os.getenv("SCOUT_DEFAULT_PAGE_LIMIT"), default=10, minimum=1),
        identity_header=os.getenv("SCOUT_IDENTITY_HEADER", "X-User-Id"),
        source_dir=os.getenv("SCOUT_SOURCE_DIR", "data/uploads"),
        log_level=os.getenv("SCOUT_LOG_LEVEL", "info").strip().lower(),
    )
