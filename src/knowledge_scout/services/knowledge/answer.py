from __future__ import annotations

from collections.abc import Sequence

from knowledge_scout.services.knowledge.types import Reference


def synthesize_answer(query_text: str, references: Sequence[Reference]) -> str:
    if not references:
        return f'No relevant documents found for the query "{query_text}".'

    document_count = len({reference.doc_id for reference in references})
    return (
        f"Found {len(references)} relevant reference(s) across {document_count} document(s). "
        f'The query "{query_text}" appears in the following contexts.'
    )
