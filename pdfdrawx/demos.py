"""Demo documents built with the public pdfdrawx API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .context import DrawingContext
from .document import Document
from .fonts import COURIER, HELVETICA, HELVETICA_BOLD, STANDARD_FONT_NAMES, TIMES_ROMAN, Font, StandardFont
from .path import Path
from .types import BLUE, DocumentOptions, Color, DashStyle, LineCap, LineJoin, PageDirection, PageSize

LOGGER = logging.getLogger(__name__)

SAMPLE_TEXT = "The quick brown fox jumps over the lazy dog."
FONT_SAMPLE = "abcdefgABCDEFG12345!#$%&+-@?"
GRID_STEP = 5


@dataclass(frozen=True)
class Demo:
    """A named demo and the function that builds it."""

    name: str
    description: str
    build: Callable[..., Document]
    needs_font: bool = False


def _label(context: DrawingContext, text: str, x: float, y: float) -> None:
    context.font = HELVETICA
    context.font_size = 10
    context.show(text, x, y)


def lines_demo(options: Optional[DocumentOptions] = None) -> Document:
    """Line widths, dash patterns, caps and joins on one A4 page."""
    document = Document(options)

    def draw(context: DrawingContext) -> None:
        height = context.page.height

        context.font = HELVETICA_BOLD
        context.font_size = 18
        context.show("Line examples", 60, height - 50)

        y = height - 100
        for width in (0.5, 1.0, 2.0, 4.0, 8.0):
            context.line_width = width
            context.stroke(Path().moving(60, y).appending_line(300, y))
            _label(context, f"line width = {width:g}", 320, y - 3)
            y -= 30

        context.line_width = 2
        for pattern in ((3,), (7, 3), (8, 7, 2, 7)):
            context.dash = DashStyle(pattern)
            context.stroke(Path().moving(60, y).appending_line(300, y))
            _label(context, f"dash = {list(pattern)}", 320, y - 3)
            y -= 30
        context.dash = DashStyle()

        context.line_width = 20
        for cap in LineCap:
            context.line_cap = cap
            context.stroke(Path().moving(80, y).appending_line(280, y))
            _label(context, f"line cap = {cap.name.lower()}", 320, y - 3)
            y -= 40
        context.line_cap = LineCap.BUTT

        for join in LineJoin:
            context.line_join = join
            context.stroke(
                Path().moving(80, y - 30).appending_line(130, y).appending_line(180, y - 30)
            )
            _label(context, f"line join = {join.name.lower()}", 320, y - 20)
            y -= 60

    document.add_page_of_size(PageSize.A4, body=draw)
    return document


def shapes_demo(options: Optional[DocumentOptions] = None) -> Document:
    """Filled and stroked rectangles, circles, ellipses and arcs."""
    document = Document(options)

    def draw(context: DrawingContext) -> None:
        height = context.page.height

        context.stroke_color = BLUE
        context.fill_color = Color.from_rgb255(255, 204, 102)
        context.line_width = 3
        context.fill_and_stroke(Path().appending_rectangle(50, height - 170, 180, 120))
        context.fill_and_stroke(Path().appending_circle(380, height - 110, 60))
        context.fill(Path().appending_ellipse(150, height - 280, 100, 40))

        pie = Color.gray(0.85)
        slices = ((0, 90, Color(0.9, 0.3, 0.3)), (90, 200, Color(0.3, 0.6, 0.9)), (200, 359.9, pie))
        for begin, end, color in slices:
            context.fill_color = color
            context.fill(
                Path().moving(380, height - 280).appending_arc(380, height - 280, 70, begin, end).closing_subpath()
            )

        context.fill_color = Color.gray(0.5)
        star = Path().moving(300, 250)
        for x, y in ((350, 100), (200, 200), (400, 200), (250, 100)):
            star = star.appending_line(x, y)
        star = star.closing_subpath()
        context.fill(star, even_odd=True)

        with context.saved_state():
            context.clip(Path().appending_circle(130, 160, 60))
            context.fill_color = Color(0.2, 0.7, 0.4)
            context.fill(Path().appending_rectangle(60, 100, 140, 60))

    document.add_page_of_size(PageSize.A4, body=draw)
    return document


def text_demo(options: Optional[DocumentOptions] = None) -> Document:
    """Standard fonts, spacing and multi-line text on a landscape page."""
    document = Document(options)

    def draw(context: DrawingContext) -> None:
        height = context.page.height
        y = height - 60
        fonts: Tuple[Font, ...] = (HELVETICA, HELVETICA_BOLD, TIMES_ROMAN, COURIER)
        for font in fonts:
            context.font = font
            context.font_size = 16
            context.show(f"{font.name}: {SAMPLE_TEXT}", 40, y)
            y -= 30

        context.font = HELVETICA
        context.font_size = 12
        for spacing in (0.0, 1.5, 3.0):
            context.char_spacing = spacing
            context.show(f"char spacing {spacing:g}: {SAMPLE_TEXT}", 40, y)
            y -= 24
        context.char_spacing = 0

        context.text_leading = 16
        context.show_lines(["Lines shown one below", "the other, spaced by", "the text leading."], 40, y - 10)

        with context.begin_text() as text:
            text.set_font(TIMES_ROMAN, 24)
            text.set_text_matrix(0.866, 0.5, -0.5, 0.866, 520, 120)
            text.show("Rotated text")

    document.add_page_of_size(PageSize.A4, PageDirection.LANDSCAPE, body=draw)
    return document


def draw_grid(context: DrawingContext, width: float, height: float) -> None:
    """Rule a grid every 5 points, heavier every 10 and 50, labelled every 50."""
    weights = {50: (0.8, Color.gray(0.5)), 10: (0.5, Color.gray(0.7)), GRID_STEP: (0.2, Color.gray(0.8))}
    rulings = {step: Path() for step in weights}

    def weight_of(offset: int) -> int:
        return next(step for step in weights if offset % step == 0)

    for x in range(0, int(width) + 1, GRID_STEP):
        step = weight_of(x)
        rulings[step] = rulings[step].moving(x, 0).appending_line(x, height)
    for y in range(0, int(height) + 1, GRID_STEP):
        step = weight_of(y)
        rulings[step] = rulings[step].moving(0, y).appending_line(width, y)

    for step in sorted(rulings):
        line_width, color = weights[step]
        context.line_width = line_width
        context.stroke_color = color
        context.stroke(rulings[step])

    context.font = HELVETICA
    context.font_size = 5
    context.fill_color = Color.gray(0.5)
    for x in range(50, int(width), 50):
        context.show(str(x), x + 2, 2)
    for y in range(50, int(height), 50):
        context.show(str(y), 2, y + 2)


def grid_demo(options: Optional[DocumentOptions] = None) -> Document:
    """A grid sheet with point coordinates, useful for checking positions."""
    document = Document(options)

    def draw(context: DrawingContext) -> None:
        page = context.page
        draw_grid(context, page.width, page.height)

    document.add_page(600, 400, draw)
    return document


def fonts_demo(options: Optional[DocumentOptions] = None) -> Document:
    """One sample line for each of the 14 standard fonts."""
    document = Document(options)

    def draw(context: DrawingContext) -> None:
        page = context.page
        context.stroke(Path().appending_rectangle(50, 50, page.width - 100, page.height - 110))

        context.font = HELVETICA_BOLD
        context.font_size = 24
        title = "Standard fonts"
        context.show(title, (page.width - context.text_width(title)) / 2, page.height - 50)

        y = page.height - 80
        for name in STANDARD_FONT_NAMES:
            _label(context, name, 60, y)
            context.font = StandardFont(name)
            context.font_size = 20
            context.show(FONT_SAMPLE, 60, y - 24)
            y -= 50

    document.add_page_of_size(PageSize.A4, body=draw)
    return document


def truetype_fonts_demo(
    font_data: bytes,
    embedding: bool = True,
    options: Optional[DocumentOptions] = None,
) -> Document:
    """Show a loaded TrueType font at several sizes on a page sized to fit."""
    document = Document(options)
    if options is None:
        document.set_compression_mode("all")
    detail_font = document.load_true_type_font(font_data, embedding_glyph_data=embedding)
    suffix = "Embedded Subset" if embedding else "Not Embedded"

    def draw(context: DrawingContext) -> None:
        context.text_leading = 11
        context.font = HELVETICA
        context.font_size = 10
        context.show(f"{detail_font.name} ({suffix})", 10, 190)

        context.font = detail_font
        context.font_size = 15
        context.show("abcdefghijklmnopqrstuvwxyz", 10, 170)
        context.show("ABCDEFGHIJKLMNOPQRSTUVWXYZ", 10, 150)
        context.show("1234567890", 10, 130)

        for size, y in ((10, 110), (16, 92), (23, 65), (30, 29)):
            context.font_size = size
            context.show(SAMPLE_TEXT, 10, y)

        page = context.page
        page.width = context.text_width(SAMPLE_TEXT) + 40

        context.line_width = 0.5
        for offset in (25, 85):
            y = page.height - offset
            context.stroke(Path().moving(10, y).appending_line(page.width - 10, y))

    document.add_page(210, 210, draw)
    return document


DEMOS: Dict[str, Demo] = {
    demo.name: demo
    for demo in (
        Demo("lines", "Line widths, dash patterns, caps and joins", lines_demo),
        Demo("shapes", "Rectangles, circles, arcs and clipping", shapes_demo),
        Demo("fonts", "A sample of each of the 14 standard fonts", fonts_demo),
        Demo("grid", "A grid sheet ruled every 5 points", grid_demo),
        Demo("text", "Standard fonts, spacing and multi-line text", text_demo),
        Demo("truetype-fonts", "A TrueType font loaded from a file", truetype_fonts_demo, needs_font=True),
    )
}


def build_demo(
    name: str,
    *,
    font_data: Optional[bytes] = None,
    embedding: bool = True,
    options: Optional[DocumentOptions] = None,
) -> Document:
    """Build the demo called ``name``; raises ``KeyError`` for unknown names."""
    demo = DEMOS[name]
    LOGGER.debug("Building demo %s", name)
    if demo.needs_font:
        if font_data is None:
            raise ValueError(f"Demo {name!r} needs a TrueType font")
        return demo.build(font_data, embedding=embedding, options=options)
    return demo.build(options)


__all__: Tuple[str, ...] = (
    "Demo",
    "DEMOS",
    "SAMPLE_TEXT",
    "build_demo",
    "draw_grid",
    "fonts_demo",
    "grid_demo",
    "lines_demo",
    "shapes_demo",
    "text_demo",
    "truetype_fonts_demo",
)
