"""
pdfdrawx - Build PDF documents from pages, paths, text and TrueType fonts.

Drawing happens inside a scoped drawing context that tracks the content
stream's graphics mode, so only operators that are legal at that point can be
written. Pages and fonts are owned by their document and become stale once it
is closed.

Quick Start:
    >>> from pdfdrawx import Document, Path
    >>> with Document() as doc:
    ...     doc.add_page(210, 210, lambda ctx: ctx.stroke(
    ...         Path().moving(10, 105).appending_line(200, 105)))
    ...     data = doc.get_data()

Main Classes:
    - Document: Owns pages and fonts and produces the PDF bytes
    - Page: Page geometry, rotation and the entry to drawing
    - DrawingContext: Graphics properties, paths and text for one page
    - Path: Immutable path description

Exceptions:
    - PDFDrawError: Base of recoverable errors, carries a status code
    - ContractViolation: Base of misuse errors (stale or foreign handles,
      reentrant drawing)

For CLI usage, use the 'pdfdrawx' command after installation.
"""

# Core classes
from pdfdrawx.context import DrawingContext, PathBuilder, TextBuilder
from pdfdrawx.document import Document
from pdfdrawx.page import Page
from pdfdrawx.path import Path

# Fonts
from pdfdrawx.fonts import (
    DEFAULT_FONT,
    STANDARD_FONT_NAMES,
    Font,
    StandardFont,
    TrueTypeFont,
    standard_font,
)

# Data types
from pdfdrawx.graphics import GraphicsMode
from pdfdrawx.types import (
    Color,
    CompressionMode,
    DashStyle,
    DocumentInfo,
    DocumentOptions,
    LineCap,
    LineJoin,
    PageDirection,
    PageSize,
)

# Exceptions
from pdfdrawx.exceptions import (
    ContractViolation,
    FontLoadError,
    ForeignHandleError,
    IllegalOperatorForStateError,
    InvalidCompressionModeError,
    InvalidRotationError,
    PDFDrawError,
    ReentrantContextError,
    SerializationError,
    StaleHandleError,
    StatusCode,
)

__version__ = "1.0.0"
__author__ = "pdfdrawx Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "Document",
    "Page",
    "DrawingContext",
    "PathBuilder",
    "TextBuilder",
    "Path",
    # Fonts
    "Font",
    "StandardFont",
    "TrueTypeFont",
    "DEFAULT_FONT",
    "STANDARD_FONT_NAMES",
    "standard_font",
    # Data types
    "GraphicsMode",
    "Color",
    "CompressionMode",
    "DashStyle",
    "DocumentInfo",
    "DocumentOptions",
    "LineCap",
    "LineJoin",
    "PageDirection",
    "PageSize",
    # Exceptions
    "PDFDrawError",
    "InvalidRotationError",
    "FontLoadError",
    "IllegalOperatorForStateError",
    "InvalidCompressionModeError",
    "SerializationError",
    "ContractViolation",
    "ReentrantContextError",
    "StaleHandleError",
    "ForeignHandleError",
    "StatusCode",
    # Version info
    "__version__",
]
