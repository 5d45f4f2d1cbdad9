from __future__ import annotations

from knowledge_scout.services.knowledge.types import Page

DEFAULT_LINES_PER_PAGE = 30


def split_pages(raw_text: str, *, lines_per_page: int = DEFAULT_LINES_PER_PAGE) -> list[Page]:
    """Split raw text into fixed-size pages of ``lines_per_page`` lines.

    Page numbers follow the block index, so a blank block that gets dropped
    leaves a gap in the numbering. Text with no non-blank block yields a
    single page 1 holding the full (possibly empty) text.
    """
    if lines_per_page <= 0:
        raise ValueError("lines_per_page must be > 0")

    lines = raw_text.split("\n")
    pages: list[Page] = []

    for start in range(0, len(lines), lines_per_page):
        content = "\n".join(lines[start : start + lines_per_page])
        if not content.strip():
            continue
        pages.append(Page(page_number=start // lines_per_page + 1, content=content))

    if not pages:
        return [Page(page_number=1, content=raw_text)]
    return pages
