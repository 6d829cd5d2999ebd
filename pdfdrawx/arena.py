"""Document-scoped ownership of pages and font resources."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Tuple

from .exceptions import StaleHandleError
from .fonts import Font

if TYPE_CHECKING:  # pragma: no cover
    from .page import Page

LOGGER = logging.getLogger(__name__)


class ResourceArena:
    """Owns every page and font of one document until :meth:`release`.

    Loaded fonts are adopted as soon as they are created. Page-resource names
    (``F1``, ``F2``, ...) are assigned in the order fonts are first used on a
    page, so identical call sequences give identical output.
    """

    def __init__(self) -> None:
        self._pages: List["Page"] = []
        self._loaded: List[Font] = []
        self._fonts: Dict[Font, str] = {}
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def _ensure_alive(self) -> None:
        if self._released:
            raise StaleHandleError("The resource arena has been released")

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def adopt_page(self, page: "Page") -> None:
        self._ensure_alive()
        self._pages.append(page)

    @property
    def pages(self) -> Tuple["Page", ...]:
        self._ensure_alive()
        return tuple(self._pages)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def adopt_font(self, font: Font) -> None:
        self._ensure_alive()
        self._loaded.append(font)

    @property
    def loaded_fonts(self) -> Tuple[Font, ...]:
        self._ensure_alive()
        return tuple(self._loaded)

    def register_font(self, font: Font) -> str:
        """Return the resource name of ``font``, registering it on first use."""
        self._ensure_alive()
        name = self._fonts.get(font)
        if name is None:
            name = f"F{len(self._fonts) + 1}"
            self._fonts[font] = name
            LOGGER.debug("Registered font %s as /%s", font.name, name)
        return name

    def resource_name(self, font: Font) -> str:
        self._ensure_alive()
        return self._fonts[font]

    @property
    def fonts(self) -> Tuple[Tuple[str, Font], ...]:
        self._ensure_alive()
        return tuple((name, font) for font, name in self._fonts.items())

    # ------------------------------------------------------------------
    def release(self) -> None:
        """Drop every page and font; handles that outlive this become stale."""
        if self._released:
            return
        LOGGER.debug("Releasing arena with %d pages and %d loaded fonts", len(self._pages), len(self._loaded))
        self._pages.clear()
        self._loaded.clear()
        self._fonts.clear()
        self._released = True
