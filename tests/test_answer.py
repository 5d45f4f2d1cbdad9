from knowledge_scout.services.knowledge.answer import synthesize_answer
from knowledge_scout.services.knowledge.types import Reference


def _reference(doc_id: str, page: int) -> Reference:
    return Reference(doc_id=doc_id, doc_title=doc_id, page=page, snippet="...", relevance=1)


def test_no_references_names_the_query() -> None:
    assert (
        synthesize_answer("pump", [])
        == 'No relevant documents found for the query "pump".'
    )


def test_counts_references_and_distinct_documents() -> None:
    references = [_reference("a", 1), _reference("a", 2), _reference("b", 1)]

    assert synthesize_answer("pump", references) == (
        "Found 3 relevant reference(s) across 2 document(s). "
        'The query "pump" appears in the following contexts.'
    )
