"""The top-level document: owns pages and fonts and produces the PDF bytes."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, List, Optional, Tuple, Union

from .arena import ResourceArena
from .backends import PDFBackend, PypdfBackend
from .context import DrawingContext
from .exceptions import StaleHandleError, StatusCode, translate_status
from .fonts import Font, TrueTypeFont
from .graphics import GraphicsMode
from .page import Page
from .types import CompressionMode, DocumentInfo, DocumentOptions, PageDirection, PageSize
from .utils import time_block

LOGGER = logging.getLogger(__name__)

PageBody = Callable[[DrawingContext], Any]

_INFO_FIELDS = ("title", "author", "subject", "keywords", "creator", "creation_date")


class Document:
    """A PDF document under construction.

    Example:
        >>> with Document() as doc:
        ...     doc.add_page(210, 210, lambda ctx: ctx.stroke(Path().moving(10, 10).appending_line(200, 200)))
        ...     data = doc.get_data()

    The document exclusively owns its pages and fonts. After :meth:`close`,
    or once the document is garbage collected, any page or TrueType font it
    handed out raises :class:`~pdfdrawx.exceptions.StaleHandleError`.
    """

    def __init__(self, options: Optional[DocumentOptions] = None, backend: Optional[PDFBackend] = None) -> None:
        self.options = options or DocumentOptions()
        self._backend = backend or PypdfBackend()
        self._arena = ResourceArena()
        self._compression_mode = self.options.compression_mode
        self._info = self.options.info
        self._closed = False

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release every page and font owned by this document."""
        if self._closed:
            return
        self._closed = True
        self._arena.release()
        LOGGER.debug("Closed document")

    def _ensure_open(self) -> None:
        if self._closed:
            raise StaleHandleError("The document has been closed")

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    @property
    def pages(self) -> Tuple[Page, ...]:
        self._ensure_open()
        return self._arena.pages

    def add_page(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        body: Optional[PageBody] = None,
    ) -> Page:
        """Append a page and, when ``body`` is given, draw on it.

        Omitted dimensions come from the document's default page size.
        Errors raised by ``body`` propagate unchanged; the page stays in the
        document.
        """
        self._ensure_open()
        default_width, default_height = self._default_dimensions()
        page = Page(
            self,
            default_width if width is None else width,
            default_height if height is None else height,
        )
        self._arena.adopt_page(page)
        LOGGER.debug("Added page %d (%sx%s)", len(self._arena.pages), page.width, page.height)
        if body is not None:
            page.draw_path(body)
        return page

    def add_page_of_size(
        self,
        size: PageSize,
        direction: PageDirection = PageDirection.PORTRAIT,
        body: Optional[PageBody] = None,
    ) -> Page:
        page = self.add_page()
        page.set_size(size, direction)
        if body is not None:
            page.draw_path(body)
        return page

    def _default_dimensions(self) -> Tuple[float, float]:
        size = self.options.default_page_size
        if self.options.default_direction is PageDirection.LANDSCAPE:
            return size.height, size.width
        return size.width, size.height

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def load_true_type_font(self, data: bytes, embedding_glyph_data: bool) -> TrueTypeFont:
        """Load a TrueType font from raw bytes.

        The font belongs to this document from now on; it receives a page
        resource name the first time a page uses it.

        Args:
            data: The complete font file.
            embedding_glyph_data: Embed a subset of the glyph outlines. When
                false the font is referenced by name and must be installed
                where the PDF is viewed.

        Raises:
            FontLoadError: If the bytes are not a usable TrueType font.
        """
        self._ensure_open()
        font = TrueTypeFont(data, embedding=embedding_glyph_data, owner=self)
        self._arena.adopt_font(font)
        LOGGER.info(
            "Loaded TrueType font %s (%d bytes, %s)",
            font.name,
            len(data),
            "embedded" if embedding_glyph_data else "not embedded",
        )
        return font

    @property
    def loaded_fonts(self) -> Tuple[TrueTypeFont, ...]:
        """TrueType fonts loaded into this document, in load order."""
        self._ensure_open()
        return self._arena.loaded_fonts

    @property
    def fonts(self) -> Tuple[Tuple[str, Font], ...]:
        """Fonts referenced by any page, in registration order."""
        self._ensure_open()
        return self._arena.fonts

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    @property
    def compression_mode(self) -> CompressionMode:
        return self._compression_mode

    def set_compression_mode(self, mode: Union[CompressionMode, str]) -> None:
        self._ensure_open()
        try:
            self._compression_mode = CompressionMode.parse(mode)
        except ValueError as exc:
            raise translate_status(StatusCode.INVALID_COMPRESSION_MODE, str(exc)) from exc

    @property
    def info(self) -> DocumentInfo:
        return self._info

    def set_info(self, **fields: Any) -> None:
        """Update document information entries (title, author, ...)."""
        self._ensure_open()
        unknown = sorted(set(fields) - set(_INFO_FIELDS))
        if unknown:
            raise TypeError(f"Unknown document info field(s): {', '.join(unknown)}")
        self._info = replace(self._info, **fields)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def _check_pages(self) -> None:
        for number, page in enumerate(self._arena.pages, start=1):
            if page.context_open:
                raise translate_status(
                    StatusCode.INCONSISTENT_PAGE_STATE,
                    f"Page {number} still has an open drawing context",
                )
            if page.graphics_mode is not GraphicsMode.PAGE_DESCRIPTION:
                raise translate_status(
                    StatusCode.INCONSISTENT_PAGE_STATE,
                    f"Page {number} content stream ends in {page.graphics_mode.value} mode",
                )

    def get_data(self) -> bytes:
        """Serialize the document and return the complete PDF file."""
        self._ensure_open()
        self._check_pages()
        with time_block(LOGGER, "serializing document"):
            data = self._backend.serialize(self)
        LOGGER.info("Serialized %d page(s) into %d bytes", len(self._arena.pages), len(data))
        return data

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{len(self._arena.pages)} pages"
        return f"Document({state})"


__all__: List[str] = ["Document", "PageBody"]
