"""Drawing contexts: the scoped, state-checked view of a page's content stream.

A :class:`DrawingContext` only exists inside :meth:`Page.draw_path` (or
:meth:`Page.drawing`). Its high-level operations always return the content
stream to page-description mode; :class:`PathBuilder` and :class:`TextBuilder`
expose the operators of one graphics object at a time for incremental work.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .exceptions import StaleHandleError, raise_for_status
from .fonts import DEFAULT_FONT, Font, TrueTypeFont
from .graphics import GraphicsMode, Operand
from .path import Path
from .types import BLACK, SOLID, Color, DashStyle, LineCap, LineJoin

if TYPE_CHECKING:  # pragma: no cover
    from .page import Page

LOGGER = logging.getLogger(__name__)


@dataclass
class GraphicsState:
    """Graphics properties of a drawing context, initialised to their defaults."""

    line_width: float = 1.0
    line_cap: LineCap = LineCap.BUTT
    line_join: LineJoin = LineJoin.MITER
    miter_limit: float = 10.0
    dash: DashStyle = SOLID
    stroke_color: Color = BLACK
    fill_color: Color = BLACK
    font: Font = DEFAULT_FONT
    font_size: float = 11.0
    text_leading: float = 0.0
    char_spacing: float = 0.0
    word_spacing: float = 0.0


def _rgb(color: Color) -> Tuple[float, float, float]:
    return (color.red, color.green, color.blue)


# Operator and operands that set each general graphics property.
_GENERAL_STATE_OPERATORS: Dict[str, Callable[[object], Tuple[str, Tuple[Operand, ...]]]] = {
    "line_width": lambda value: ("w", (value,)),
    "line_cap": lambda value: ("J", (int(value),)),
    "line_join": lambda value: ("j", (int(value),)),
    "miter_limit": lambda value: ("M", (value,)),
    "dash": lambda value: ("d", (list(value.pattern), value.phase)),
    "stroke_color": lambda value: ("RG", _rgb(value)),
    "fill_color": lambda value: ("rg", _rgb(value)),
}

# Text-state properties and the operator that writes them inside a text object.
_TEXT_STATE_OPERATORS: Dict[str, str] = {
    "text_leading": "TL",
    "char_spacing": "Tc",
    "word_spacing": "Tw",
}

# Raw operators that overwrite a tracked general property.
_GENERAL_STATE_ATTRIBUTES: Dict[str, str] = {
    "w": "line_width",
    "J": "line_cap",
    "j": "line_join",
    "M": "miter_limit",
    "d": "dash",
    "RG": "stroke_color",
    "rg": "fill_color",
}


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")


class DrawingContext:
    """Graphics context bound to one page for the duration of one drawing scope.

    The context must not be stored or used once the scope that produced it has
    ended; doing so raises :class:`~pdfdrawx.exceptions.StaleHandleError`.
    """

    def __init__(self, page: "Page") -> None:
        self._page = page
        self._stream = page._content
        self._state = GraphicsState()
        # Properties whose stream value is unknown after a raw operator.
        self._dirty: Set[str] = set()
        # State saved by each raw "q" that has not been restored yet.
        self._raw_saves: List[Tuple[GraphicsState, Set[str], Dict[str, float]]] = []
        self._active = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _initialize(self) -> None:
        self._active = True

    def _finalize(self) -> None:
        """Return the stream to page description and restore default properties."""
        if not self._active:
            return
        try:
            closing = self._stream.close()
            if closing == "n":
                LOGGER.warning("Discarded a path that was constructed but never painted")
            elif closing is not None:
                LOGGER.debug("Closed an open text object on finalize")

            if self._raw_saves:
                LOGGER.warning("Restoring %d graphics state(s) saved with a raw 'q'", len(self._raw_saves))
                while self._raw_saves:
                    self._emit("Q")
                    self._restore_raw_save()

            defaults = GraphicsState()
            for attribute, build in _GENERAL_STATE_OPERATORS.items():
                value = getattr(self._state, attribute)
                if attribute in self._dirty or value != getattr(defaults, attribute):
                    operator, operands = build(getattr(defaults, attribute))
                    self._emit(operator, *operands)
            self._state = defaults
            self._dirty.clear()
        finally:
            self._active = False

    def _ensure_active(self) -> None:
        if not self._active:
            raise StaleHandleError("Drawing context used outside of its draw_path scope")

    def _emit(self, operator: str, *operands: Operand) -> None:
        self._ensure_active()
        mode = self._stream.mode
        status = self._stream.emit(operator, *operands)
        raise_for_status(status, f"Operator '{operator}' is not allowed in {mode.value} mode")

    @property
    def page(self) -> "Page":
        self._ensure_active()
        return self._page

    @property
    def mode(self) -> GraphicsMode:
        self._ensure_active()
        return self._stream.mode

    @property
    def is_active(self) -> bool:
        return self._active

    def invoke(self, operator: str, *operands: Operand) -> None:
        """Write a raw operator, checked only against the graphics-mode table.

        Operands are written as given: numbers, names (``"/F1"``), ``bytes`` as
        literal strings and lists as arrays. Fonts selected with a raw ``Tf`` are
        not registered with the page.

        General-state operators (``w J j M d RG rg``) are always reset when the
        scope ends, and every raw ``q`` still open by then is closed with ``Q``.
        """
        self._emit(operator, *operands)
        if operator in _GENERAL_STATE_ATTRIBUTES:
            self._dirty.add(_GENERAL_STATE_ATTRIBUTES[operator])
        elif operator in _TEXT_STATE_OPERATORS.values():
            self._page._text_state[operator] = operands[0] if len(operands) == 1 else math.nan
        elif operator == "q":
            self._raw_saves.append((replace(self._state), set(self._dirty), dict(self._page._text_state)))
        elif operator == "Q" and self._raw_saves:
            self._restore_raw_save()

    def _restore_raw_save(self) -> None:
        self._state, self._dirty, self._page._text_state = self._raw_saves.pop()

    # ------------------------------------------------------------------
    # General graphics state
    # ------------------------------------------------------------------
    def _set_general(self, attribute: str, value: object) -> None:
        self._ensure_active()
        if attribute not in self._dirty and getattr(self._state, attribute) == value:
            return
        operator, operands = _GENERAL_STATE_OPERATORS[attribute](value)
        self._emit(operator, *operands)
        setattr(self._state, attribute, value)
        self._dirty.discard(attribute)

    @property
    def line_width(self) -> float:
        self._ensure_active()
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        _require_finite("Line width", value)
        if value < 0:
            raise ValueError(f"Line width must not be negative, got {value}")
        self._set_general("line_width", value)

    @property
    def line_cap(self) -> LineCap:
        self._ensure_active()
        return self._state.line_cap

    @line_cap.setter
    def line_cap(self, value: LineCap) -> None:
        self._set_general("line_cap", LineCap(value))

    @property
    def line_join(self) -> LineJoin:
        self._ensure_active()
        return self._state.line_join

    @line_join.setter
    def line_join(self, value: LineJoin) -> None:
        self._set_general("line_join", LineJoin(value))

    @property
    def miter_limit(self) -> float:
        self._ensure_active()
        return self._state.miter_limit

    @miter_limit.setter
    def miter_limit(self, value: float) -> None:
        _require_finite("Miter limit", value)
        if value < 1:
            raise ValueError(f"Miter limit must be at least 1, got {value}")
        self._set_general("miter_limit", value)

    @property
    def dash(self) -> DashStyle:
        self._ensure_active()
        return self._state.dash

    @dash.setter
    def dash(self, value: DashStyle) -> None:
        self._set_general("dash", value)

    @property
    def stroke_color(self) -> Color:
        self._ensure_active()
        return self._state.stroke_color

    @stroke_color.setter
    def stroke_color(self, value: Color) -> None:
        self._set_general("stroke_color", value)

    @property
    def fill_color(self) -> Color:
        self._ensure_active()
        return self._state.fill_color

    @fill_color.setter
    def fill_color(self, value: Color) -> None:
        self._set_general("fill_color", value)

    # ------------------------------------------------------------------
    # Text state
    # ------------------------------------------------------------------
    @property
    def font(self) -> Font:
        self._ensure_active()
        return self._state.font

    @font.setter
    def font(self, value: Font) -> None:
        self._ensure_active()
        value.check_usable_by(self._page._owner())
        self._state.font = value
        if self._stream.mode is GraphicsMode.TEXT_OBJECT:
            self._select_font()

    @property
    def font_size(self) -> float:
        self._ensure_active()
        return self._state.font_size

    @font_size.setter
    def font_size(self, value: float) -> None:
        self._ensure_active()
        _require_finite("Font size", value)
        if value <= 0:
            raise ValueError(f"Font size must be positive, got {value}")
        self._state.font_size = value
        if self._stream.mode is GraphicsMode.TEXT_OBJECT:
            self._select_font()

    def _set_text_state(self, attribute: str, value: float) -> None:
        self._ensure_active()
        _require_finite(attribute.replace("_", " ").capitalize(), value)
        setattr(self._state, attribute, value)
        if self._stream.mode is GraphicsMode.TEXT_OBJECT:
            self._sync_text_state()

    @property
    def text_leading(self) -> float:
        self._ensure_active()
        return self._state.text_leading

    @text_leading.setter
    def text_leading(self, value: float) -> None:
        self._set_text_state("text_leading", value)

    @property
    def char_spacing(self) -> float:
        self._ensure_active()
        return self._state.char_spacing

    @char_spacing.setter
    def char_spacing(self, value: float) -> None:
        self._set_text_state("char_spacing", value)

    @property
    def word_spacing(self) -> float:
        self._ensure_active()
        return self._state.word_spacing

    @word_spacing.setter
    def word_spacing(self, value: float) -> None:
        self._set_text_state("word_spacing", value)

    def _select_font(self) -> None:
        resource = self._page._use_font(self._state.font)
        self._emit("Tf", f"/{resource}", self._state.font_size)

    def _sync_text_state(self) -> None:
        # Text state survives ET, so only values that differ from what the
        # page's stream last saw are written.
        written = self._page._text_state
        for attribute, operator in _TEXT_STATE_OPERATORS.items():
            value = getattr(self._state, attribute)
            if written.get(operator, 0.0) != value:
                self._emit(operator, value)
                written[operator] = value

    def _encode_for_show(self, text: str) -> bytes:
        font = self._state.font
        encoded = font.encode(text)
        if isinstance(font, TrueTypeFont):
            font.record_usage(encoded)
        return encoded

    def text_width(self, text: str) -> float:
        """Width of ``text`` with the current font, size and spacing."""
        self._ensure_active()
        font = self._state.font
        encoded = font.encode(text)
        width = font.measure(text, self._state.font_size)
        width += self._state.char_spacing * len(encoded)
        width += self._state.word_spacing * encoded.count(b" ")
        return width

    # ------------------------------------------------------------------
    # Special graphics state
    # ------------------------------------------------------------------
    def concat(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        """Concatenate a matrix to the current transformation matrix."""
        self._emit("cm", a, b, c, d, e, f)

    @contextmanager
    def saved_state(self) -> Iterator["DrawingContext"]:
        """Save the graphics state on entry and restore it on exit (``q``/``Q``)."""
        self._emit("q")
        snapshot = replace(self._state)
        dirty_snapshot = set(self._dirty)
        text_snapshot = dict(self._page._text_state)
        raw_depth = len(self._raw_saves)
        try:
            yield self
        finally:
            if self._active:
                self._stream.close()
                while len(self._raw_saves) > raw_depth:
                    self._emit("Q")
                    self._restore_raw_save()
                self._emit("Q")
                self._state = snapshot
                self._dirty = dirty_snapshot
                self._page._text_state = text_snapshot

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def _construct(self, path: Path) -> None:
        for operator, operands in path:
            self._emit(operator, *operands)

    def _paint(self, path: Path, operator: str) -> None:
        self._ensure_active()
        if path.is_empty:
            return
        self._construct(path)
        self._emit(operator)

    def stroke(self, path: Path) -> None:
        self._paint(path, "S")

    def fill(self, path: Path, even_odd: bool = False) -> None:
        self._paint(path, "f*" if even_odd else "f")

    def fill_and_stroke(self, path: Path, even_odd: bool = False) -> None:
        self._paint(path, "B*" if even_odd else "B")

    def clip(self, path: Path, even_odd: bool = False) -> None:
        """Intersect the clipping path with ``path``; best used inside :meth:`saved_state`."""
        self._ensure_active()
        if path.is_empty:
            return
        self._construct(path)
        self._emit("W*" if even_odd else "W")
        self._emit("n")

    def begin_path(self) -> "PathBuilder":
        self._ensure_active()
        return PathBuilder(self)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------
    def begin_text(self) -> "TextBuilder":
        """Open a text object with the current font and text state applied."""
        self._emit("BT")
        self._select_font()
        self._sync_text_state()
        return TextBuilder(self)

    def show(self, text: str, x: float, y: float) -> None:
        """Show ``text`` with its baseline starting at ``(x, y)``."""
        with self.begin_text() as builder:
            builder.move_text_position(x, y)
            builder.show(text)

    def show_lines(self, lines: Iterable[str], x: float, y: float) -> None:
        """Show ``lines`` one below the other, spaced by the text leading.

        A leading of zero falls back to the font size.
        """
        leading = self._state.text_leading or self._state.font_size
        with self.begin_text() as builder:
            builder.move_text_position(x, y)
            for index, line in enumerate(lines):
                if index:
                    builder.move_text_position(0, -leading)
                builder.show(line)


class PathBuilder:
    """Incremental path construction; exposes path-object operators only."""

    def __init__(self, context: DrawingContext) -> None:
        self._context = context

    def __enter__(self) -> "PathBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        context = self._context
        if context.is_active and context.mode is GraphicsMode.PATH_OBJECT:
            if exc_type is None:
                LOGGER.warning("Discarded a path that was constructed but never painted")
            self.end_path()

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._context._emit("m", x, y)
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self._context._emit("l", x, y)
        return self

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> "PathBuilder":
        self._context._emit("c", x1, y1, x2, y2, x3, y3)
        return self

    def rectangle(self, x: float, y: float, width: float, height: float) -> "PathBuilder":
        self._context._emit("re", x, y, width, height)
        return self

    def close_subpath(self) -> "PathBuilder":
        self._context._emit("h")
        return self

    def append(self, path: Path) -> "PathBuilder":
        self._context._construct(path)
        return self

    def stroke(self, close: bool = False) -> None:
        self._context._emit("s" if close else "S")

    def fill(self, even_odd: bool = False) -> None:
        self._context._emit("f*" if even_odd else "f")

    def fill_and_stroke(self, even_odd: bool = False, close: bool = False) -> None:
        operator = "b" if close else "B"
        self._context._emit(operator + "*" if even_odd else operator)

    def clip(self, even_odd: bool = False) -> None:
        self._context._emit("W*" if even_odd else "W")
        self._context._emit("n")

    def end_path(self) -> None:
        """End the path without painting it."""
        self._context._emit("n")


class TextBuilder:
    """Operations legal inside a text object; :meth:`end` closes it."""

    def __init__(self, context: DrawingContext) -> None:
        self._context = context
        self._open = True

    def __enter__(self) -> "TextBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._open and self._context.is_active and self._context.mode is GraphicsMode.TEXT_OBJECT:
            self.end()

    @property
    def is_open(self) -> bool:
        return self._open

    def set_font(self, font: Font, size: Optional[float] = None) -> "TextBuilder":
        self._context.font = font
        if size is not None:
            self._context.font_size = size
        return self

    def set_leading(self, leading: float) -> "TextBuilder":
        self._context.text_leading = leading
        return self

    def set_char_spacing(self, spacing: float) -> "TextBuilder":
        self._context.char_spacing = spacing
        return self

    def set_word_spacing(self, spacing: float) -> "TextBuilder":
        self._context.word_spacing = spacing
        return self

    def move_text_position(self, dx: float, dy: float) -> "TextBuilder":
        """Move to the start of the next line, offset from the start of the current one."""
        self._context._emit("Td", dx, dy)
        return self

    def set_text_matrix(self, a: float, b: float, c: float, d: float, e: float, f: float) -> "TextBuilder":
        self._context._emit("Tm", a, b, c, d, e, f)
        return self

    def next_line(self) -> "TextBuilder":
        self._context._emit("T*")
        return self

    def show(self, text: str) -> "TextBuilder":
        self._context._emit("Tj", self._context._encode_for_show(text))
        return self

    def show_next_line(self, text: str) -> "TextBuilder":
        self._context._emit("'", self._context._encode_for_show(text))
        return self

    def end(self) -> None:
        self._context._emit("ET")
        self._open = False


__all__: List[str] = [
    "GraphicsState",
    "DrawingContext",
    "PathBuilder",
    "TextBuilder",
]
