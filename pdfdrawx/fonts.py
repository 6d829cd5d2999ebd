"""Font resources: the standard Type 1 fonts and TrueType fonts loaded from bytes.

Text is shown with single-byte WinAnsi codes, so each font exposes the encoded
form of a string and advance widths in 1/1000 text-space units. Standard font
metrics come from reportlab's bundled AFM data; TrueType fonts are parsed and
subset with fontTools.
"""

from __future__ import annotations

import hashlib
import io
import logging
import re
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Set, Tuple

from fontTools import subset as ftsubset
from fontTools.ttLib import TTFont, TTLibError
from reportlab.pdfbase.pdfmetrics import stringWidth

from .exceptions import (
    FontLoadError,
    ForeignHandleError,
    StaleHandleError,
    StatusCode,
    translate_status,
)

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document

LOGGER = logging.getLogger(__name__)

WIN_ANSI = "cp1252"
FIRST_CHAR = 32
LAST_CHAR = 255

_NAME_UNSAFE = re.compile(r"[^A-Za-z0-9_.\-]")


class Font(ABC):
    """Base class for fonts usable by a drawing context."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The font's PostScript name."""

    @property
    def is_embedded(self) -> bool:
        return False

    @abstractmethod
    def encode(self, text: str) -> bytes:
        """Encode ``text`` into the character codes shown in the content stream."""

    @abstractmethod
    def measure(self, text: str, font_size: float) -> float:
        """Width of ``text`` in text-space units at ``font_size``."""

    def check_usable_by(self, document: "Document") -> None:
        """Raise a contract error unless ``document`` may reference this font."""


class StandardFont(Font):
    """One of the 14 standard Type 1 fonts; referenced by name, never embedded."""

    def __init__(self, name: str) -> None:
        if name not in STANDARD_FONT_NAMES:
            raise ValueError(f"Unknown standard font: {name}")
        self._name = name
        self._codec = "latin-1" if name in _SYMBOLIC_FONTS else WIN_ANSI

    @property
    def name(self) -> str:
        return self._name

    @property
    def uses_win_ansi(self) -> bool:
        return self._codec == WIN_ANSI

    def encode(self, text: str) -> bytes:
        encoded = text.encode(self._codec, errors="replace")
        if b"?" in encoded and "?" not in text:
            LOGGER.warning("Text %r contains characters %s cannot encode", text, self._name)
        return encoded

    def measure(self, text: str, font_size: float) -> float:
        shown = self.encode(text).decode(self._codec)
        return float(stringWidth(shown, self._name, font_size))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StandardFont):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(("standard", self._name))

    def __repr__(self) -> str:
        return f"StandardFont({self._name!r})"


STANDARD_FONT_NAMES: Tuple[str, ...] = (
    "Courier",
    "Courier-Bold",
    "Courier-Oblique",
    "Courier-BoldOblique",
    "Helvetica",
    "Helvetica-Bold",
    "Helvetica-Oblique",
    "Helvetica-BoldOblique",
    "Times-Roman",
    "Times-Bold",
    "Times-Italic",
    "Times-BoldItalic",
    "Symbol",
    "ZapfDingbats",
)
_SYMBOLIC_FONTS = frozenset({"Symbol", "ZapfDingbats"})

COURIER = StandardFont("Courier")
COURIER_BOLD = StandardFont("Courier-Bold")
HELVETICA = StandardFont("Helvetica")
HELVETICA_BOLD = StandardFont("Helvetica-Bold")
HELVETICA_OBLIQUE = StandardFont("Helvetica-Oblique")
TIMES_ROMAN = StandardFont("Times-Roman")
TIMES_BOLD = StandardFont("Times-Bold")
TIMES_ITALIC = StandardFont("Times-Italic")
SYMBOL = StandardFont("Symbol")
ZAPF_DINGBATS = StandardFont("ZapfDingbats")


def standard_font(name: str) -> StandardFont:
    """Return the standard font called ``name``."""
    return StandardFont(name)


@dataclass(frozen=True)
class TrueTypeMetrics:
    """Metrics read from a TrueType font, scaled to 1/1000 em."""

    postscript_name: str
    widths: Tuple[int, ...]
    missing_width: int
    ascent: int
    descent: int
    cap_height: int
    bbox: Tuple[int, int, int, int]
    italic_angle: float
    stem_v: int
    flags: int


def _postscript_name(ttfont: TTFont) -> str:
    names = ttfont["name"]
    for name_id in (6, 4, 1):
        candidate = names.getDebugName(name_id)
        if candidate:
            cleaned = _NAME_UNSAFE.sub("", candidate)
            if cleaned:
                return cleaned
    return "TrueTypeFont"


def read_true_type_metrics(data: bytes) -> TrueTypeMetrics:
    """Parse ``data`` and return its metrics; raises :class:`FontLoadError`."""

    if not data:
        raise translate_status(StatusCode.INVALID_FONT_DATA, "Font data is empty")

    try:
        ttfont = TTFont(io.BytesIO(data), recalcTimestamp=False)
        if "glyf" not in ttfont:
            raise translate_status(
                StatusCode.UNSUPPORTED_FONT,
                "Only fonts with TrueType outlines can be loaded",
            )
        cmap = ttfont.getBestCmap()
        if not cmap:
            raise translate_status(StatusCode.UNSUPPORTED_FONT, "Font has no Unicode character map")

        head = ttfont["head"]
        hhea = ttfont["hhea"]
        metrics = ttfont["hmtx"].metrics
        post = ttfont["post"]
        os2 = ttfont["OS/2"] if "OS/2" in ttfont else None
        scale = 1000.0 / head.unitsPerEm

        def scaled(value: float) -> int:
            return int(round(value * scale))

        notdef = ttfont.getGlyphOrder()[0]
        missing_width = scaled(metrics[notdef][0]) if notdef in metrics else 0

        widths = []
        for code in range(FIRST_CHAR, LAST_CHAR + 1):
            try:
                char = bytes((code,)).decode(WIN_ANSI)
            except UnicodeDecodeError:
                widths.append(missing_width)
                continue
            glyph = cmap.get(ord(char))
            widths.append(scaled(metrics[glyph][0]) if glyph in metrics else missing_width)

        if os2 is not None and os2.sTypoAscender:
            ascent, descent = scaled(os2.sTypoAscender), scaled(os2.sTypoDescender)
        else:
            ascent, descent = scaled(hhea.ascent), scaled(hhea.descent)
        cap_height = ascent
        if os2 is not None and os2.version >= 2 and getattr(os2, "sCapHeight", 0):
            cap_height = scaled(os2.sCapHeight)
        weight = os2.usWeightClass if os2 is not None else 400

        flags = 32
        if post.isFixedPitch:
            flags |= 1
        if post.italicAngle:
            flags |= 64

        return TrueTypeMetrics(
            postscript_name=_postscript_name(ttfont),
            widths=tuple(widths),
            missing_width=missing_width,
            ascent=ascent,
            descent=descent,
            cap_height=cap_height,
            bbox=(scaled(head.xMin), scaled(head.yMin), scaled(head.xMax), scaled(head.yMax)),
            italic_angle=float(post.italicAngle),
            stem_v=int(round(50 + (weight / 65.0) ** 2)),
            flags=flags,
        )
    except FontLoadError:
        raise
    except TTLibError as exc:
        raise translate_status(StatusCode.INVALID_FONT_DATA, f"Not a valid TrueType font: {exc}") from exc
    except Exception as exc:
        raise translate_status(
            StatusCode.INVALID_FONT_DATA, f"Unexpected error reading font data: {exc}"
        ) from exc


class TrueTypeFont(Font):
    """A TrueType font owned by the document that loaded it.

    The handle only keeps a weak reference to its document. Measuring or
    showing text after that document is closed or collected raises
    :class:`~pdfdrawx.exceptions.StaleHandleError`.
    """

    def __init__(self, data: bytes, *, embedding: bool, owner: "Document") -> None:
        self._metrics = read_true_type_metrics(data)
        self._data = bytes(data)
        self._embedding = embedding
        self._owner_ref = weakref.ref(owner)
        self._used_codes: Set[int] = set()

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------
    def _live_owner(self) -> "Document":
        owner = self._owner_ref()
        if owner is None or owner.closed:
            raise StaleHandleError(
                f"The document that loaded font {self._metrics.postscript_name} has been released"
            )
        return owner

    def check_usable_by(self, document: "Document") -> None:
        if self._live_owner() is not document:
            raise ForeignHandleError(
                f"Font {self._metrics.postscript_name} belongs to a different document"
            )

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._metrics.postscript_name

    @property
    def metrics(self) -> TrueTypeMetrics:
        return self._metrics

    @property
    def is_embedded(self) -> bool:
        return self._embedding

    @property
    def used_codes(self) -> FrozenSet[int]:
        return frozenset(self._used_codes)

    def encode(self, text: str) -> bytes:
        encoded = text.encode(WIN_ANSI, errors="replace")
        if b"?" in encoded and "?" not in text:
            LOGGER.warning("Text %r contains characters %s cannot encode", text, self.name)
        return encoded

    def glyph_width(self, code: int) -> int:
        if FIRST_CHAR <= code <= LAST_CHAR:
            return self._metrics.widths[code - FIRST_CHAR]
        return self._metrics.missing_width

    def measure(self, text: str, font_size: float) -> float:
        self._live_owner()
        units = sum(self.glyph_width(code) for code in self.encode(text))
        return units * font_size / 1000.0

    def record_usage(self, encoded: bytes) -> None:
        self._used_codes.update(encoded)

    # ------------------------------------------------------------------
    # Embedding
    # ------------------------------------------------------------------
    def _used_unicodes(self) -> Set[int]:
        unicodes = set()
        for code in self._used_codes:
            try:
                unicodes.add(ord(bytes((code,)).decode(WIN_ANSI)))
            except UnicodeDecodeError:
                continue
        return unicodes

    @property
    def subset_tag(self) -> str:
        """Six-letter subset prefix derived from the characters used."""
        digest = hashlib.sha1(bytes(sorted(self._used_codes))).digest()
        return "".join(chr(ord("A") + byte % 26) for byte in digest[:6])

    @property
    def base_font(self) -> str:
        if self._embedding:
            return f"{self.subset_tag}+{self.name}"
        return self.name

    def font_file_data(self) -> bytes:
        """Return the font program to embed, reduced to the characters shown."""
        ttfont = TTFont(io.BytesIO(self._data), recalcTimestamp=False)
        options = ftsubset.Options(notdef_outline=True, recommended_glyphs=True)
        options.name_IDs = ["*"]
        options.drop_tables += ["FFTM", "GPOS", "GSUB", "GDEF", "hdmx", "meta"]
        subsetter = ftsubset.Subsetter(options)
        subsetter.populate(unicodes=sorted(self._used_unicodes()))
        subsetter.subset(ttfont)

        output = io.BytesIO()
        ttfont.save(output)
        data = output.getvalue()
        LOGGER.debug("Subset %s to %d bytes (from %d)", self.name, len(data), len(self._data))
        return data

    def __repr__(self) -> str:
        return f"TrueTypeFont({self.name!r}, embedded={self._embedding})"


DEFAULT_FONT: Font = HELVETICA

__all__: Tuple[str, ...] = (
    "Font",
    "StandardFont",
    "TrueTypeFont",
    "TrueTypeMetrics",
    "STANDARD_FONT_NAMES",
    "standard_font",
    "read_true_type_metrics",
    "DEFAULT_FONT",
    "COURIER",
    "COURIER_BOLD",
    "HELVETICA",
    "HELVETICA_BOLD",
    "HELVETICA_OBLIQUE",
    "TIMES_ROMAN",
    "TIMES_BOLD",
    "TIMES_ITALIC",
    "SYMBOL",
    "ZAPF_DINGBATS",
)
