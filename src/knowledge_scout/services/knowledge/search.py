from __future__ import annotations

import logging
import re

from knowledge_scout.errors import InvalidInputError
from knowledge_scout.services.knowledge.document_store import DocumentStore
from knowledge_scout.services.knowledge.types import Document, Page, Reference

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 5
DEFAULT_SNIPPET_RADIUS = 50
ELLIPSIS = "..."


def extract_snippet(content: str, index: int, match_length: int, *, radius: int) -> str:
    start = max(0, index - radius)
    end = min(len(content), index + match_length + radius)
    return f"{ELLIPSIS}{content[start:end]}{ELLIPSIS}"


def compile_query(query_text: str) -> re.Pattern[str]:
    return re.compile(re.escape(query_text), flags=re.IGNORECASE)


def count_occurrences(content: str, query_text: str) -> int:
    return len(compile_query(query_text).findall(content))


def _match_page(
    document: Document,
    page: Page,
    *,
    pattern: re.Pattern[str],
    radius: int,
) -> Reference | None:
    # offsets index the original text, not a lowercased copy
    match = pattern.search(page.content)
    if match is None:
        return None

    return Reference(
        doc_id=document.id,
        doc_title=document.title,
        page=page.page_number,
        snippet=extract_snippet(
            page.content, match.start(), match.end() - match.start(), radius=radius
        ),
        relevance=len(pattern.findall(page.content)),
    )


class SearchEngine:
    def __init__(
        self,
        store: DocumentStore,
        *,
        snippet_radius: int = DEFAULT_SNIPPET_RADIUS,
    ) -> None:
        self._store = store
        self._snippet_radius = snippet_radius

    def search(
        self,
        query_text: str,
        max_results: int = DEFAULT_MAX_RESULTS,
        caller_id: str | None = None,
    ) -> list[Reference]:
        if not query_text.strip():
            raise InvalidInputError("query must not be empty")

        top_k = max(1, max_results)
        pattern = compile_query(query_text)
        hits: list[Reference] = []

        # share-token-only documents never show up here, only in direct fetch
        for document in self._store.visible_documents(caller_id):
            for page in document.pages:
                hit = _match_page(
                    document,
                    page,
                    pattern=pattern,
                    radius=self._snippet_radius,
                )
                if hit is not None:
                    hits.append(hit)

        hits.sort(key=lambda hit: hit.relevance, reverse=True)
        logger.debug("search query=%r matched_pages=%d top_k=%d", query_text, len(hits), top_k)
        return hits[:top_k]
