import pytest

from knowledge_scout.errors import AccessDeniedError, DocumentNotFoundError, InvalidInputError
from knowledge_scout.services.knowledge import ScoutServices
from tests.fakes import FakeClock


def test_ingest_public_document_splits_pages_and_has_no_share_token(
    services: ScoutServices,
) -> None:
    raw_text = "\n".join(f"line {index}" for index in range(1, 62))

    document = services.store.ingest(title="manual", owner_id="u1", raw_text=raw_text)

    assert len(document.id) == 32
    assert document.share_token is None
    assert document.is_private is False
    assert document.filename == "manual"
    assert document.size == len(raw_text.encode("utf-8"))
    assert [page.page_number for page in document.pages] == [1, 2, 3]
    assert document.pages[2].content == "line 61"


def test_ingest_private_documents_get_distinct_share_tokens(services: ScoutServices) -> None:
    first = services.store.ingest(title="a", owner_id="u1", raw_text="one", is_private=True)
    second = services.store.ingest(title="b", owner_id="u1", raw_text="two", is_private=True)

    assert first.share_token is not None
    assert second.share_token is not None
    assert len(first.share_token) == 32
    assert first.share_token != second.share_token


def test_ingest_rejects_blank_title(services: ScoutServices) -> None:
    with pytest.raises(InvalidInputError):
        services.store.ingest(title="   ", owner_id="u1", raw_text="text")


def test_empty_document_is_stored_as_single_empty_page(services: ScoutServices) -> None:
    document = services.store.ingest(title="blank", owner_id="u1", raw_text="")

    stored = services.store.get(document.id, None, None)

    assert [(page.page_number, page.content) for page in stored.pages] == [(1, "")]


def test_list_filters_by_visibility_and_orders_newest_first(
    services: ScoutServices,
    clock: FakeClock,
) -> None:
    oldest = services.store.ingest(title="oldest", owner_id="u1", raw_text="a")
    clock.advance(1)
    private = services.store.ingest(title="private", owner_id="u1", raw_text="b", is_private=True)
    clock.advance(1)
    newest = services.store.ingest(title="newest", owner_id="u2", raw_text="c")

    anonymous, anonymous_total = services.store.list_documents(None)
    owner_view, owner_total = services.store.list_documents("u1")
    other_view, other_total = services.store.list_documents("u2")

    assert [summary.id for summary in anonymous] == [newest.id, oldest.id]
    assert anonymous_total == 2
    assert [summary.id for summary in owner_view] == [newest.id, private.id, oldest.id]
    assert owner_total == 3
    assert [summary.id for summary in other_view] == [newest.id, oldest.id]
    assert other_total == 2
    assert owner_view[1].page_count == 1


def test_list_paginates_and_tolerates_offset_past_end(services: ScoutServices) -> None:
    for index in range(3):
        services.store.ingest(title=f"doc {index}", owner_id="u1", raw_text="text")

    first_page, total = services.store.list_documents(None, limit=2, offset=0)
    second_page, _ = services.store.list_documents(None, limit=2, offset=2)
    beyond, beyond_total = services.store.list_documents(None, limit=2, offset=10)

    assert total == 3
    assert len(first_page) == 2
    assert len(second_page) == 1
    assert beyond == []
    assert beyond_total == 3


def test_list_uses_default_limit(services: ScoutServices) -> None:
    for index in range(12):
        services.store.ingest(title=f"doc {index}", owner_id="u1", raw_text="text")

    summaries, total = services.store.list_documents(None)

    assert len(summaries) == 10
    assert total == 12


@pytest.mark.parametrize(("limit", "offset"), [(-1, 0), (5, -1)])
def test_list_rejects_negative_pagination(
    services: ScoutServices, limit: int, offset: int
) -> None:
    with pytest.raises(InvalidInputError):
        services.store.list_documents(None, limit=limit, offset=offset)


def test_get_unknown_document_raises_not_found(services: ScoutServices) -> None:
    with pytest.raises(DocumentNotFoundError):
        services.store.get("missing", "u1", None)


def test_get_private_document_applies_access_rules(services: ScoutServices) -> None:
    document = services.store.ingest(
        title="secret plan",
        owner_id="u1",
        raw_text="classified",
        is_private=True,
    )

    with pytest.raises(AccessDeniedError):
        services.store.get(document.id, "u2", None)
    with pytest.raises(AccessDeniedError):
        services.store.get(document.id, None, "wrong")

    via_token = services.store.get(document.id, "u2", document.share_token)
    via_owner = services.store.get(document.id, "u1", None)

    assert via_token.content == "classified"
    assert via_owner.share_token == document.share_token


def test_visible_documents_keep_upload_order(services: ScoutServices) -> None:
    first = services.store.ingest(title="first", owner_id="u1", raw_text="a")
    hidden = services.store.ingest(title="hidden", owner_id="u2", raw_text="b", is_private=True)
    second = services.store.ingest(title="second", owner_id="u1", raw_text="c")

    assert [document.id for document in services.store.visible_documents(None)] == [
        first.id,
        second.id,
    ]
    assert [document.id for document in services.store.visible_documents("u2")] == [
        first.id,
        hidden.id,
        second.id,
    ]


def test_count_totals_counts_every_document(services: ScoutServices) -> None:
    services.store.ingest(title="a", owner_id="u1", raw_text="\n".join(["x"] * 45))
    services.store.ingest(title="b", owner_id="u2", raw_text="y", is_private=True)

    assert services.store.count_totals() == (2, 3)
