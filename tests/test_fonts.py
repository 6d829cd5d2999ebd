from __future__ import annotations

from io import BytesIO

import pytest
from fontTools.ttLib import TTFont
from reportlab.pdfbase.pdfmetrics import stringWidth

from pdfdrawx import (
    Document,
    FontLoadError,
    ForeignHandleError,
    StaleHandleError,
    StatusCode,
)
from pdfdrawx.fonts import (
    HELVETICA,
    STANDARD_FONT_NAMES,
    SYMBOL,
    StandardFont,
    read_true_type_metrics,
    standard_font,
)

from .conftest import NOTDEF_WIDTH, glyph_width

PANGRAM = "The quick brown fox jumps over the lazy dog."


def expected_width(text: str, size: float) -> float:
    return sum(glyph_width(ord(char)) for char in text) * size / 1000.0


def test_standard_fonts() -> None:
    assert len(STANDARD_FONT_NAMES) == 14
    assert standard_font("Helvetica") == HELVETICA
    assert standard_font("Times-Bold").name == "Times-Bold"
    assert not HELVETICA.is_embedded
    with pytest.raises(ValueError):
        StandardFont("Comic-Sans")


def test_standard_font_measure_uses_afm_metrics() -> None:
    assert HELVETICA.measure(PANGRAM, 10) == pytest.approx(stringWidth(PANGRAM, "Helvetica", 10))


def test_standard_font_encoding() -> None:
    assert HELVETICA.encode("café €") == "café €".encode("cp1252")
    assert HELVETICA.uses_win_ansi
    assert not SYMBOL.uses_win_ansi


def test_unencodable_text_is_replaced_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    assert HELVETICA.encode("snow ☃") == b"snow ?"
    assert "cannot encode" in caplog.text


def test_read_true_type_metrics(ttf_bytes: bytes) -> None:
    metrics = read_true_type_metrics(ttf_bytes)

    assert metrics.postscript_name == "TestSans-Regular"
    assert metrics.widths[0] == glyph_width(32)
    assert metrics.widths[ord("A") - 32] == glyph_width(ord("A"))
    assert metrics.widths[ord("é") - 32] == NOTDEF_WIDTH
    assert metrics.missing_width == NOTDEF_WIDTH
    assert (metrics.ascent, metrics.descent) == (800, -200)
    assert metrics.bbox == (50, 0, 350, 700)
    assert len(metrics.widths) == 224


@pytest.mark.parametrize("data", [b"", b"not a font at all"])
def test_invalid_font_data(document: Document, data: bytes) -> None:
    with pytest.raises(FontLoadError) as exc_info:
        document.load_true_type_font(data, embedding_glyph_data=True)

    assert exc_info.value.code == StatusCode.INVALID_FONT_DATA


def test_font_without_glyf_table_is_unsupported(document: Document, ttf_bytes: bytes) -> None:
    font = TTFont(BytesIO(ttf_bytes), recalcBBoxes=False)
    del font["glyf"]
    del font["loca"]
    output = BytesIO()
    font.save(output)

    with pytest.raises(FontLoadError) as exc_info:
        document.load_true_type_font(output.getvalue(), embedding_glyph_data=False)

    assert exc_info.value.code == StatusCode.UNSUPPORTED_FONT


def test_true_type_text_width(document: Document, ttf_bytes: bytes) -> None:
    font = document.load_true_type_font(ttf_bytes, embedding_glyph_data=True)

    def body(context):
        context.font = font
        context.font_size = 30
        return context.text_width(PANGRAM)

    width = document.add_page(210, 210).draw_path(body)

    assert width == pytest.approx(expected_width(PANGRAM, 30))
    assert font.measure(PANGRAM, 30) == pytest.approx(width)


def test_text_width_is_independent_of_other_fonts(ttf_bytes: bytes, wide_ttf_bytes: bytes) -> None:
    with Document() as alone:
        font = alone.load_true_type_font(ttf_bytes, embedding_glyph_data=True)
        single = font.measure(PANGRAM, 12)

    with Document() as crowded:
        crowded.load_true_type_font(wide_ttf_bytes, embedding_glyph_data=True)
        font = crowded.load_true_type_font(ttf_bytes, embedding_glyph_data=False)
        crowded.load_true_type_font(wide_ttf_bytes, embedding_glyph_data=False)
        assert font.measure(PANGRAM, 12) == pytest.approx(single)


def test_font_from_another_document_is_rejected(ttf_bytes: bytes) -> None:
    with Document() as owner, Document() as other:
        font = owner.load_true_type_font(ttf_bytes, embedding_glyph_data=True)

        def body(context):
            context.font = font

        with pytest.raises(ForeignHandleError):
            other.add_page(body=body)


def test_font_is_stale_after_owner_closes(ttf_bytes: bytes) -> None:
    owner = Document()
    font = owner.load_true_type_font(ttf_bytes, embedding_glyph_data=True)
    owner.close()

    with pytest.raises(StaleHandleError):
        font.measure("abc", 10)


def test_used_characters_are_recorded(document: Document, ttf_bytes: bytes) -> None:
    font = document.load_true_type_font(ttf_bytes, embedding_glyph_data=True)

    def body(context):
        context.font = font
        context.show("abc", 0, 0)
        context.text_width("xyz")

    document.add_page(body=body)

    assert font.used_codes == frozenset(b"abc")
    assert font.base_font == f"{font.subset_tag}+TestSans-Regular"
    assert len(font.subset_tag) == 6 and font.subset_tag.isupper()


def test_non_embedded_font_uses_plain_name(document: Document, ttf_bytes: bytes) -> None:
    font = document.load_true_type_font(ttf_bytes, embedding_glyph_data=False)

    assert not font.is_embedded
    assert font.base_font == "TestSans-Regular"


def test_subset_keeps_only_shown_glyphs(document: Document, ttf_bytes: bytes) -> None:
    font = document.load_true_type_font(ttf_bytes, embedding_glyph_data=True)
    font.record_usage(b"Hi")

    subset = TTFont(BytesIO(font.font_file_data()))
    cmap = subset.getBestCmap()

    assert {ord("H"), ord("i")} <= set(cmap)
    assert ord("z") not in cmap
    assert ".notdef" in subset.getGlyphOrder()
    assert len(font.font_file_data()) < len(ttf_bytes)


def test_loaded_fonts_belong_to_the_document_before_use(ttf_bytes: bytes, wide_ttf_bytes: bytes) -> None:
    with Document() as document:
        first = document.load_true_type_font(ttf_bytes, embedding_glyph_data=True)
        second = document.load_true_type_font(wide_ttf_bytes, embedding_glyph_data=False)

        assert document.loaded_fonts == (first, second)
        assert document.fonts == ()

        def body(context):
            context.font = second
            context.show("x", 0, 0)

        document.add_page(body=body)

        assert document.fonts == (("F1", second),)
