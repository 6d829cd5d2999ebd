"""Pages: geometry, rotation and the guarded entry to a drawing context."""

from __future__ import annotations

import logging
import weakref
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Tuple, TypeVar

from .context import DrawingContext
from .exceptions import ReentrantContextError, StaleHandleError, StatusCode, translate_status
from .fonts import Font
from .graphics import ContentStream, GraphicsMode
from .types import MAX_PAGE_DIMENSION, MIN_PAGE_DIMENSION, PageDirection, PageSize

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_rotation(angle: int) -> int:
    return ((angle % 360) + 360) % 360


class Page:
    """A single page of a :class:`~pdfdrawx.document.Document`.

    Pages are created by the document and hold only a weak reference to it;
    every access checks that the document is still open.
    """

    def __init__(self, document: "Document", width: float, height: float) -> None:
        self._document_ref = weakref.ref(document)
        self._width = PageSize.A4.width
        self._height = PageSize.A4.height
        self._rotation = 0
        self._content = ContentStream()
        self._context_open = False
        self._fonts: Dict[str, Font] = {}
        # Text state values last written to the content stream.
        self._text_state: Dict[str, float] = {}
        self.width = width
        self.height = height

    def _owner(self) -> "Document":
        document = self._document_ref()
        if document is None or document.closed:
            raise StaleHandleError("The document that owns this page has been released")
        return document

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def width(self) -> float:
        self._owner()
        return self._width

    @width.setter
    def width(self, value: float) -> None:
        self._owner()
        if MIN_PAGE_DIMENSION <= value <= MAX_PAGE_DIMENSION:
            self._width = float(value)
        else:
            LOGGER.debug("Ignoring out-of-range page width %s", value)

    @property
    def height(self) -> float:
        self._owner()
        return self._height

    @height.setter
    def height(self, value: float) -> None:
        self._owner()
        if MIN_PAGE_DIMENSION <= value <= MAX_PAGE_DIMENSION:
            self._height = float(value)
        else:
            LOGGER.debug("Ignoring out-of-range page height %s", value)

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def set_size(self, size: PageSize, direction: PageDirection = PageDirection.PORTRAIT) -> None:
        """Apply a predefined paper size; landscape swaps width and height."""
        self._owner()
        width, height = size.width, size.height
        if direction is PageDirection.LANDSCAPE:
            width, height = height, width
        self._width = width
        self._height = height

    @property
    def rotation(self) -> int:
        self._owner()
        return self._rotation

    def rotate(self, angle: int) -> None:
        """Set the page rotation in degrees; only multiples of 90 are accepted."""
        self._owner()
        normalized = normalize_rotation(angle)
        if normalized % 90 != 0:
            raise translate_status(
                StatusCode.INVALID_ROTATE_VALUE,
                f"Page rotation must be a multiple of 90 degrees, got {angle}",
            )
        self._rotation = normalized

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    @property
    def content(self) -> bytes:
        self._owner()
        return self._content.getvalue()

    @property
    def graphics_mode(self) -> GraphicsMode:
        self._owner()
        return self._content.mode

    @property
    def context_open(self) -> bool:
        self._owner()
        return self._context_open

    @property
    def fonts(self) -> Tuple[Tuple[str, Font], ...]:
        """Fonts referenced by this page, with their resource names."""
        self._owner()
        return tuple(self._fonts.items())

    def _use_font(self, font: Font) -> str:
        document = self._owner()
        font.check_usable_by(document)
        name = document._arena.register_font(font)
        self._fonts[name] = font
        return name

    @contextmanager
    def drawing(self) -> Iterator[DrawingContext]:
        """Open the page's drawing context for the duration of a ``with`` block."""
        self._owner()
        if self._context_open:
            raise ReentrantContextError("A drawing context is already open on this page")

        self._context_open = True
        context = DrawingContext(self)
        try:
            context._initialize()
            yield context
        finally:
            try:
                context._finalize()
            finally:
                self._context_open = False

    def draw_path(self, body: Callable[[DrawingContext], T]) -> T:
        """Run ``body`` with a fresh drawing context and return its result."""
        with self.drawing() as context:
            return body(context)

    def __repr__(self) -> str:
        return f"Page({self._width:g}x{self._height:g}, rotation={self._rotation})"


__all__: Tuple[str, ...] = ("Page", "normalize_rotation")
