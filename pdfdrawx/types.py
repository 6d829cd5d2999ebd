"""
Type definitions and dataclasses for pdfdrawx.

This module defines the value types shared by pages, drawing contexts and
documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, Flag, IntEnum
from typing import Optional, Tuple, Union

MIN_PAGE_DIMENSION = 3.0
MAX_PAGE_DIMENSION = 14400.0


class PageSize(Enum):
    """Predefined page sizes, as ``(width, height)`` in points, portrait."""

    LETTER = (612.0, 792.0)
    LEGAL = (612.0, 1008.0)
    A3 = (841.89, 1190.551)
    A4 = (595.276, 841.89)
    A5 = (419.528, 595.276)
    B4 = (708.661, 1000.63)
    B5 = (498.898, 708.661)
    EXECUTIVE = (522.0, 756.0)
    US4x6 = (288.0, 432.0)
    US4x8 = (288.0, 576.0)
    US5x7 = (360.0, 504.0)
    COMM10 = (297.0, 684.0)

    @property
    def width(self) -> float:
        return self.value[0]

    @property
    def height(self) -> float:
        return self.value[1]


class PageDirection(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class CompressionMode(Flag):
    """Which stream kinds are Flate-compressed when the document is written."""

    NONE = 0
    TEXT = 1
    IMAGE = 2
    METADATA = 4
    ALL = TEXT | IMAGE | METADATA

    @classmethod
    def parse(cls, value: Union["CompressionMode", str]) -> "CompressionMode":
        """Return the mode for ``value``; raises ``ValueError`` for unknown names."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Unknown compression mode: {value!r}")


class LineCap(IntEnum):
    BUTT = 0
    ROUND = 1
    PROJECTING_SQUARE = 2


class LineJoin(IntEnum):
    MITER = 0
    ROUND = 1
    BEVEL = 2


@dataclass(frozen=True)
class Color:
    """An RGB colour with components in ``[0, 1]``."""

    red: float
    green: float
    blue: float

    def __post_init__(self) -> None:
        for component in (self.red, self.green, self.blue):
            if not 0.0 <= component <= 1.0:
                raise ValueError(f"Colour components must be within [0, 1], got {component}")

    @classmethod
    def gray(cls, level: float) -> "Color":
        return cls(level, level, level)

    @classmethod
    def from_rgb255(cls, red: int, green: int, blue: int) -> "Color":
        return cls(red / 255.0, green / 255.0, blue / 255.0)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class DashStyle:
    """A dash pattern: alternating on/off lengths and the starting phase."""

    pattern: Tuple[float, ...] = ()
    phase: float = 0.0

    def __post_init__(self) -> None:
        if any(length < 0 for length in self.pattern):
            raise ValueError("Dash lengths must not be negative")
        if self.pattern and not any(self.pattern):
            raise ValueError("A dash pattern cannot consist of zeros only")


SOLID = DashStyle()


@dataclass(frozen=True)
class DocumentInfo:
    """
    Document information dictionary entries.

    Attributes:
        title: Document title
        author: Person who created the document
        subject: Subject of the document
        keywords: Keywords associated with the document
        creator: Application that created the original content
        producer: Application that produced the PDF
        creation_date: Creation timestamp; omitted from the output when unset
    """

    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    keywords: Optional[str] = None
    creator: Optional[str] = None
    producer: str = "pdfdrawx"
    creation_date: Optional[datetime] = None


@dataclass(frozen=True)
class DocumentOptions:
    """Options controlling document construction and output."""

    compression_mode: CompressionMode = CompressionMode.NONE
    info: DocumentInfo = field(default_factory=DocumentInfo)
    default_page_size: PageSize = PageSize.A4
    default_direction: PageDirection = PageDirection.PORTRAIT
