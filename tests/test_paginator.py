import pytest

from knowledge_scout.services.knowledge.paginator import split_pages


def _numbered_lines(count: int) -> str:
    return "\n".join(f"line {index}" for index in range(1, count + 1))


def test_short_text_is_a_single_page() -> None:
    pages = split_pages("alpha beta\nalpha gamma")

    assert len(pages) == 1
    assert pages[0].page_number == 1
    assert pages[0].content == "alpha beta\nalpha gamma"


def test_sixty_one_lines_make_three_pages() -> None:
    pages = split_pages(_numbered_lines(61))

    assert [page.page_number for page in pages] == [1, 2, 3]
    assert pages[0].content == _numbered_lines(30)
    assert pages[1].content.splitlines()[0] == "line 31"
    assert pages[2].content == "line 61"


def test_blank_blocks_are_dropped_without_renumbering() -> None:
    text = "\n".join([_numbered_lines(30), "\n" * 29, "tail"])

    pages = split_pages(text)

    assert [page.page_number for page in pages] == [1, 3]
    assert pages[1].content == "tail"


def test_trailing_newline_does_not_create_an_extra_page() -> None:
    pages = split_pages("row\n" * 30)

    assert [page.page_number for page in pages] == [1]


@pytest.mark.parametrize("raw_text", ["", "   \n\t\n  "])
def test_text_without_content_is_kept_as_single_page(raw_text: str) -> None:
    pages = split_pages(raw_text)

    assert len(pages) == 1
    assert pages[0].page_number == 1
    assert pages[0].content == raw_text


def test_custom_lines_per_page() -> None:
    pages = split_pages("a\nb\nc\nd\ne", lines_per_page=2)

    assert [(page.page_number, page.content) for page in pages] == [
        (1, "a\nb"),
        (2, "c\nd"),
        (3, "e"),
    ]


def test_lines_per_page_must_be_positive() -> None:
    with pytest.raises(ValueError, match="lines_per_page"):
        split_pages("text", lines_per_page=0)
