from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Iterator
import sys

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfdrawx import Document  # noqa: E402

PRINTABLE = [chr(code) for code in range(32, 127)]
NOTDEF_WIDTH = 500


def glyph_width(code: int) -> int:
    """Advance width given to each printable ASCII glyph of the test fonts."""
    return 400 + (code % 7) * 50


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((350, 700))
    pen.lineTo((350, 0))
    pen.closePath()
    return pen.glyph()


def build_true_type_font(family: str = "TestSans", width: Callable[[int], int] = glyph_width) -> bytes:
    glyph_names = {char: f"uni{ord(char):04X}" for char in PRINTABLE}
    glyph_order = [".notdef"] + list(glyph_names.values())

    builder = FontBuilder(1000, isTTF=True)
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap({ord(char): name for char, name in glyph_names.items()})
    builder.setupGlyf({name: _box_glyph() for name in glyph_order})

    metrics = {".notdef": (NOTDEF_WIDTH, 50)}
    for char, name in glyph_names.items():
        metrics[name] = (width(ord(char)), 50)
    builder.setupHorizontalMetrics(metrics)
    builder.setupHorizontalHeader(ascent=800, descent=-200)
    builder.setupNameTable(
        {
            "familyName": family,
            "styleName": "Regular",
            "psName": f"{family}-Regular",
        }
    )
    builder.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    builder.setupPost()

    output = BytesIO()
    builder.save(output)
    return output.getvalue()


@pytest.fixture(scope="session")
def ttf_bytes() -> bytes:
    return build_true_type_font()


@pytest.fixture(scope="session")
def wide_ttf_bytes() -> bytes:
    return build_true_type_font("WideSerif", lambda code: 900)


@pytest.fixture()
def document() -> Iterator[Document]:
    doc = Document()
    yield doc
    doc.close()


@pytest.fixture()
def font_file(tmp_path: Path, ttf_bytes: bytes) -> Path:
    path = tmp_path / "TestSans.ttf"
    path.write_bytes(ttf_bytes)
    return path
