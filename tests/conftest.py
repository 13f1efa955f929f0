import pytest

from pdfpara_lib.models import Line, PageContent, PageSize, RawTextItem

LETTER = PageSize(612, 792)
WORDS = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel"]


def make_line(text, x=72, y=700, width=400, height=10, samples=None):
    line = Line(x, y, text, width, height)
    if samples is not None:
        line.height_samples = list(samples)
    return line


def body_items(word, n_lines=8, top=700, step=14, height=10):
    """Body lines of one page, each split into two fragments."""
    items = []
    for k in range(n_lines):
        y = top - k * step
        items.append(RawTextItem(f"{word} sentence", 72, y, 120, height))
        items.append(RawTextItem(f"number {k} of the body", 195, y, 300, height))
    return items


def body_texts(word, n_lines=8):
    return [f"{word} sentence number {k} of the body" for k in range(n_lines)]


def paper_page(index, word, header="Draft v2", footer=True, extra=None):
    """A page with a running header, a body paragraph and a page number."""
    items = []
    if header:
        items.append(RawTextItem(header, 260, 760, 90, 10))
    items.extend(body_items(word))
    if extra:
        items.extend(extra)
    if footer:
        items.append(RawTextItem(str(index + 1), 300, 30, 8, 10))
    return PageContent(index, items, LETTER)


@pytest.fixture
def three_page_paper():
    return [paper_page(i, WORDS[i]) for i in range(3)]
