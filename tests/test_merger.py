import math

from pdfpara_lib.merger import LineMerger
from pdfpara_lib.models import RawTextItem, resolve_height_mode


def test_height_mode_prefers_most_frequent_sample():
    assert resolve_height_mode([10, 10, 12]) == 10


def test_height_mode_tie_picks_smallest():
    assert resolve_height_mode([10, 12]) == 10
    assert resolve_height_mode([12, 10]) == 10


def test_fragments_on_same_band_join_with_single_space():
    items = [
        RawTextItem("Hello", 72, 700, 30, 10),
        RawTextItem("world", 105, 700, 30, 10),
    ]
    lines = LineMerger().merge_page(items)

    assert len(lines) == 1
    assert lines[0].text == "Hello world"
    assert lines[0].width == 60
    assert lines[0].height_samples == [10, 10]


def test_superscript_joins_and_does_not_skew_height():
    items = [
        RawTextItem("E = mc", 72, 700, 40, 10),
        RawTextItem("2", 112, 705, 4, 6),
        RawTextItem("holds", 118, 700, 30, 10),
    ]
    lines = LineMerger().merge_page(items)

    assert len(lines) == 1
    assert lines[0].text == "E = mc 2 holds"
    assert lines[0].height_samples == [10, 6, 10]
    assert lines[0].height == 10


def test_subscript_starting_below_line_joins():
    items = [
        RawTextItem("H", 72, 700, 8, 10),
        RawTextItem("2", 80, 697, 4, 6),
    ]
    lines = LineMerger().merge_page(items)
    assert [line.text for line in lines] == ["H 2"]


def test_tie_between_heights_resolved_on_finalize():
    items = [
        RawTextItem("Big", 72, 700, 30, 12),
        RawTextItem("small", 105, 700, 30, 10),
        RawTextItem("next line", 72, 680, 60, 10),
    ]
    lines = LineMerger().merge_page(items)

    assert lines[0].height == 10
    assert lines[1].height == 10


def test_separate_bands_start_new_lines():
    items = [
        RawTextItem("first", 72, 700, 30, 10),
        RawTextItem("second", 72, 686, 30, 10),
        RawTextItem("third", 72, 672, 30, 10),
    ]
    lines = LineMerger().merge_page(items)
    assert [line.text for line in lines] == ["first", "second", "third"]


def test_negative_width_is_normalized_before_merging():
    lines = LineMerger().merge_page([RawTextItem("rtl", 100, 700, -20, 10)])

    assert lines[0].x == 80
    assert lines[0].width == 20


def test_coordinates_rounded_to_one_decimal():
    lines = LineMerger().merge_page([RawTextItem("a", 72.04, 700.06, 10, 10)])
    assert lines[0].x == 72.0
    assert lines[0].y == 700.1


def test_whitespace_items_are_ignored():
    items = [
        RawTextItem("  ", 72, 700, 5, 10),
        RawTextItem("", 72, 690, 5, 10),
        RawTextItem("text", 72, 680, 20, 10),
    ]
    lines = LineMerger().merge_page(items)
    assert [line.text for line in lines] == ["text"]


def test_malformed_fragments_are_skipped():
    items = [
        RawTextItem("keep", 72, 700, 30, 10),
        RawTextItem("nan", math.nan, 700, 30, 10),
        RawTextItem("none", 80, None, 30, 10),
        RawTextItem("inf", 80, 700, math.inf, 10),
        RawTextItem("flat", 80, 700, 30, 0),
        RawTextItem("this", 105, 700, 30, 10),
    ]
    lines = LineMerger().merge_page(items)
    assert [line.text for line in lines] == ["keep this"]


def test_annotation_carried_from_first_fragment_with_one():
    items = [
        RawTextItem("see", 72, 700, 20, 10),
        RawTextItem("docs", 95, 700, 25, 10, url="https://example.org/a"),
        RawTextItem("here", 122, 700, 25, 10, url="https://example.org/b"),
    ]
    lines = LineMerger().merge_page(items)
    assert lines[0].url == "https://example.org/a"


def test_reading_order_and_text_preserved():
    items = [
        RawTextItem(word, 72 + 20 * (i % 3), 700 - 14 * (i // 3), 18, 10)
        for i, word in enumerate("the quick brown fox jumps over the lazy dog".split())
    ]
    lines = LineMerger().merge_page(items)

    assert len(lines) == 3
    assert " ".join(line.text for line in lines) == " ".join(i.text for i in items)


def test_empty_page_gives_no_lines():
    assert LineMerger().merge_page([]) == []


def test_tall_fragment_enclosing_the_line_band_joins():
    items = [
        RawTextItem("x", 72, 700, 8, 10),
        RawTextItem("(", 80, 698, 4, 14),
    ]
    lines = LineMerger().merge_page(items)
    assert [line.text for line in lines] == ["x ("]
