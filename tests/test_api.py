import hashlib

import pytest

from conftest import WORDS, paper_page
from pdfpara_lib.api import chunk_blocks, parse_page_selection, process_pdf_text
from pdfpara_lib.errors import ProviderUnavailable
from pdfpara_lib.models import Box, TextBlock
from pdfpara_lib.providers import MemoryProvider


class TrackedProvider(MemoryProvider):
    def __init__(self, pages, fail=False):
        super().__init__(pages)
        self.fail = fail
        self.closed = False

    async def page_count(self):
        if self.fail:
            raise ProviderUnavailable("corrupt file")
        return await super().page_count()

    def close(self):
        self.closed = True


@pytest.mark.parametrize(
    "pages_str,expected",
    [
        ("all", None),
        ("ALL", None),
        ("3", {3}),
        ("1,3,5-7", {1, 3, 5, 6, 7}),
        (" 2 , 4 ", {2, 4}),
        ("one-two", None),
    ],
)
def test_parse_page_selection(pages_str, expected):
    assert parse_page_selection(pages_str) == expected


def block(content):
    return TextBlock(content, 0, Box(0, 1, 1, 0))


def test_chunk_blocks_respects_max_size():
    blocks = [block("a" * 40), block("b" * 40), block("c" * 40)]
    chunks = list(chunk_blocks(blocks, 90))

    assert chunks == ["a" * 40 + "\n\n" + "b" * 40, "c" * 40]


def test_oversized_block_is_its_own_chunk():
    blocks = [block("short"), block("x" * 200), block("tail")]
    chunks = list(chunk_blocks(blocks, 50))

    assert chunks == ["short", "x" * 200, "tail"]


def test_chunk_blocks_empty():
    assert list(chunk_blocks([], 100)) == []


def test_missing_pdf_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        process_pdf_text(str(tmp_path / "nope.pdf"))


@pytest.fixture
def fake_pdf(tmp_path, mocker):
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-1.4 fake content")
    pages = [paper_page(i, WORDS[i]) for i in range(3)]
    mock_provider = mocker.patch(
        "pdfpara_lib.api.PdfMinerProvider", return_value=TrackedProvider(pages)
    )
    return path, mock_provider


def test_source_key_defaults_to_file_digest(fake_pdf):
    path, mock_provider = fake_pdf
    blocks = process_pdf_text(str(path))

    expected = hashlib.md5(path.read_bytes()).hexdigest()
    mock_provider.assert_called_once_with(str(path))
    assert len(blocks) == 3
    assert {b.source_key for b in blocks} == {expected}


def test_explicit_source_key_and_one_based_pages(fake_pdf):
    path, _ = fake_pdf
    blocks = process_pdf_text(str(path), pages_str="1,3", source_key="paper-7")

    assert [b.page for b in blocks] == [0, 2]
    assert all(b.source_key == "paper-7" for b in blocks)


def test_provider_closed_after_run(fake_pdf):
    path, mock_provider = fake_pdf
    process_pdf_text(str(path))
    assert mock_provider.return_value.closed


def test_provider_closed_when_unavailable(tmp_path, mocker):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"%PDF-1.4 truncated")
    provider = TrackedProvider([], fail=True)
    mocker.patch("pdfpara_lib.api.PdfMinerProvider", return_value=provider)

    with pytest.raises(ProviderUnavailable):
        process_pdf_text(str(path))
    assert provider.closed
