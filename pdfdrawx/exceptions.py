"""
Custom exceptions for pdfdrawx.

This module defines the engine status codes, the typed errors raised to
callers and :func:`raise_for_status`, which translates one into the other.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional, Type


class StatusCode(IntEnum):
    """Status codes reported by the low-level content and document engine."""

    OK = 0
    INVALID_GRAPHICS_MODE = 0x1051
    UNKNOWN_OPERATOR = 0x1052
    INVALID_ROTATE_VALUE = 0x1056
    INVALID_FONT_DATA = 0x1061
    UNSUPPORTED_FONT = 0x1062
    INVALID_COMPRESSION_MODE = 0x1071
    INCONSISTENT_PAGE_STATE = 0x1081


class PDFDrawError(Exception):
    """Base exception for all recoverable pdfdrawx errors."""

    def __init__(self, message: str = "", *, code: Optional[int] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.code = code

    @property
    def default_message(self) -> str:
        return "An unknown PDF drawing error occurred."


class InvalidRotationError(PDFDrawError):
    """Raised when a page rotation angle is not a multiple of 90 degrees."""

    @property
    def default_message(self) -> str:
        return "Page rotation must be a multiple of 90 degrees."


class FontLoadError(PDFDrawError):
    """Raised when font bytes are malformed or use an unsupported format."""

    @property
    def default_message(self) -> str:
        return "Invalid or unsupported font data."


class IllegalOperatorForStateError(PDFDrawError):
    """Raised when an operator is not allowed in the current graphics mode."""

    @property
    def default_message(self) -> str:
        return "Operator is not allowed in the current graphics mode."


class InvalidCompressionModeError(PDFDrawError):
    """Raised when an unknown compression mode is requested."""

    @property
    def default_message(self) -> str:
        return "Invalid compression mode."


class SerializationError(PDFDrawError):
    """Raised when the document cannot be serialized in its current state."""

    @property
    def default_message(self) -> str:
        return "Document is in an inconsistent state and cannot be serialized."


class ContractViolation(RuntimeError):
    """Base class for programming errors in the use of documents and pages.

    These are not subclasses of :class:`PDFDrawError` on purpose, so that a
    handler for recoverable errors never hides them.
    """


class ReentrantContextError(ContractViolation):
    """Raised when a drawing context is requested while one is already open."""


class StaleHandleError(ContractViolation):
    """Raised when a page, font or context outlives the scope that owns it."""


class ForeignHandleError(ContractViolation):
    """Raised when a font handle is used with a document that does not own it."""


_STATUS_ERRORS: Dict[StatusCode, Type[PDFDrawError]] = {
    StatusCode.INVALID_GRAPHICS_MODE: IllegalOperatorForStateError,
    StatusCode.UNKNOWN_OPERATOR: IllegalOperatorForStateError,
    StatusCode.INVALID_ROTATE_VALUE: InvalidRotationError,
    StatusCode.INVALID_FONT_DATA: FontLoadError,
    StatusCode.UNSUPPORTED_FONT: FontLoadError,
    StatusCode.INVALID_COMPRESSION_MODE: InvalidCompressionModeError,
    StatusCode.INCONSISTENT_PAGE_STATE: SerializationError,
}


def translate_status(status: int, message: str = "") -> PDFDrawError:
    """Return the typed error for a failing ``status``."""

    try:
        code = StatusCode(status)
    except ValueError:
        return PDFDrawError(message or f"Unknown engine status 0x{status:04X}", code=status)
    error_class = _STATUS_ERRORS.get(code, PDFDrawError)
    return error_class(message, code=int(code))


def raise_for_status(status: int, message: str = "") -> None:
    """Raise the typed error matching ``status`` unless it is :attr:`StatusCode.OK`."""

    if status == StatusCode.OK:
        return
    raise translate_status(status, message)
