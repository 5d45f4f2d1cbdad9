from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Request

from knowledge_scout.config import get_settings
from knowledge_scout.db import Base, get_engine
from knowledge_scout.errors import (
    AccessDeniedError,
    AuthenticationRequiredError,
    DocumentNotFoundError,
    InvalidInputError,
    ScoutError,
)
from knowledge_scout.identity import HeaderIdentityResolver, IdentityResolver
from knowledge_scout.logging_setup import setup_logging
from knowledge_scout.schemas import (
    AskRequest,
    AskResponse,
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentSummaryResponse,
    HealthResponse,
    IndexStatsResponse,
    IngestRequest,
    IngestResponse,
)
from knowledge_scout.services.knowledge import ScoutServices, build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(settings.log_level)

    engine = get_engine()
    if settings.auto_create_schema:
        Base.metadata.create_all(bind=engine)

    app.state.services = build_services(engine, settings)
    logger.info("KnowledgeScout services ready database=%s", engine.url.render_as_string())
    try:
        yield
    finally:
        app.state.services = None


app = FastAPI(title="KnowledgeScout API", version="0.1.0", lifespan=lifespan)


def get_services(request: Request) -> ScoutServices:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="services are not initialised")
    return services


def get_identity_resolver() -> IdentityResolver:
    return HeaderIdentityResolver(header_name=get_settings().identity_header)


def get_caller_id(
    request: Request,
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> str | None:
    return resolver.resolve(request.headers)


def _require_identity(caller_id: str | None) -> str:
    if caller_id is None:
        raise AuthenticationRequiredError("Authentication required")
    return caller_id


def _to_http_error(exc: ScoutError) -> HTTPException:
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, AuthenticationRequiredError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, AccessDeniedError):
        return HTTPException(status_code=403, detail="Access denied")
    if isinstance(exc, DocumentNotFoundError):
        return HTTPException(status_code=404, detail="Document not found")
    return HTTPException(status_code=500, detail=str(exc))


Services = Annotated[ScoutServices, Depends(get_services)]
CallerId = Annotated[str | None, Depends(get_caller_id)]


@app.get("/api/health")
def health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))


@app.post("/api/ask")
def ask(request: AskRequest, services: Services, caller_id: CallerId) -> AskResponse:
    try:
        cached, was_cache_hit = services.cache.answer(request.query, request.k, caller_id)
    except InvalidInputError as exc:
        raise _to_http_error(exc) from exc

    return AskResponse.from_cached(cached, was_cache_hit=was_cache_hit)


@app.post("/api/index/rebuild")
def rebuild_index(services: Services, caller_id: CallerId) -> IndexStatsResponse:
    try:
        _require_identity(caller_id)
    except AuthenticationRequiredError as exc:
        raise _to_http_error(exc) from exc

    stats = services.stats.rebuild()
    logger.info("index rebuild requested by caller=%s", caller_id)
    return IndexStatsResponse.from_stats(stats)


@app.get("/api/index/stats")
def index_stats(services: Services) -> IndexStatsResponse:
    return IndexStatsResponse.from_stats(services.stats.current_stats())


@app.post("/api/docs", status_code=201)
def ingest_document(
    request: IngestRequest,
    services: Services,
    caller_id: CallerId,
) -> IngestResponse:
    try:
        owner_id = _require_identity(caller_id)
        document = services.store.ingest(
            title=request.title,
            owner_id=owner_id,
            raw_text=request.content,
            is_private=request.is_private,
            filename=request.filename,
            mime_type=request.mime_type,
        )
    except (AuthenticationRequiredError, InvalidInputError) as exc:
        raise _to_http_error(exc) from exc

    return IngestResponse.from_document(document)


@app.get("/api/docs")
def list_documents(
    services: Services,
    caller_id: CallerId,
    limit: int | None = Query(default=None),
    offset: int = Query(default=0),
) -> DocumentListResponse:
    try:
        summaries, total = services.store.list_documents(caller_id, limit=limit, offset=offset)
    except InvalidInputError as exc:
        raise _to_http_error(exc) from exc

    return DocumentListResponse(
        documents=[
            DocumentSummaryResponse.from_summary(summary, caller_id=caller_id)
            for summary in summaries
        ],
        total=total,
        limit=limit if limit is not None else get_settings().default_page_limit,
        offset=offset,
    )


@app.get("/api/docs/{doc_id}", response_model_exclude_none=True)
def get_document(
    doc_id: str,
    services: Services,
    caller_id: CallerId,
    share_token: str | None = Query(default=None, alias="shareToken"),
) -> DocumentDetailResponse:
    try:
        document = services.store.get(doc_id, caller_id, share_token)
    except (DocumentNotFoundError, AccessDeniedError) as exc:
        raise _to_http_error(exc) from exc

    return DocumentDetailResponse.from_document(document, caller_id=caller_id)


def run() -> None:
    import uvicorn

    uvicorn.run("knowledge_scout.main:app", host="0.0.0.0", port=5000, reload=False)


if __name__ == "__main__":
    run()
