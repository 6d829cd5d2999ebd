from __future__ import annotations

import pytest

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
    raise_for_status,
    translate_status,
)
from pdfdrawx.types import Color, CompressionMode, DashStyle, DocumentInfo, PageSize


@pytest.mark.parametrize(
    ("status", "error_class"),
    [
        (StatusCode.INVALID_GRAPHICS_MODE, IllegalOperatorForStateError),
        (StatusCode.UNKNOWN_OPERATOR, IllegalOperatorForStateError),
        (StatusCode.INVALID_ROTATE_VALUE, InvalidRotationError),
        (StatusCode.INVALID_FONT_DATA, FontLoadError),
        (StatusCode.UNSUPPORTED_FONT, FontLoadError),
        (StatusCode.INVALID_COMPRESSION_MODE, InvalidCompressionModeError),
        (StatusCode.INCONSISTENT_PAGE_STATE, SerializationError),
    ],
)
def test_translate_status_maps_codes(status: StatusCode, error_class: type) -> None:
    error = translate_status(status, "boom")

    assert type(error) is error_class
    assert error.code == status
    assert str(error) == "boom"


def test_translate_unknown_status() -> None:
    error = translate_status(0x9999)

    assert type(error) is PDFDrawError
    assert error.code == 0x9999
    assert "0x9999" in error.message


def test_default_messages_are_used_when_message_is_empty() -> None:
    error = translate_status(StatusCode.INVALID_ROTATE_VALUE)

    assert error.message == "Page rotation must be a multiple of 90 degrees."


def test_raise_for_status() -> None:
    raise_for_status(StatusCode.OK)

    with pytest.raises(InvalidRotationError) as exc_info:
        raise_for_status(StatusCode.INVALID_ROTATE_VALUE, "bad angle")
    assert exc_info.value.code == StatusCode.INVALID_ROTATE_VALUE


@pytest.mark.parametrize("error_class", [ReentrantContextError, StaleHandleError, ForeignHandleError])
def test_contract_violations_are_not_recoverable_errors(error_class: type) -> None:
    assert issubclass(error_class, ContractViolation)
    assert issubclass(error_class, RuntimeError)
    assert not issubclass(error_class, PDFDrawError)


def test_compression_mode_parse() -> None:
    assert CompressionMode.parse("all") == CompressionMode.ALL
    assert CompressionMode.parse(" Text ") == CompressionMode.TEXT
    assert CompressionMode.parse(CompressionMode.METADATA) is CompressionMode.METADATA
    assert CompressionMode.TEXT in CompressionMode.ALL
    with pytest.raises(ValueError):
        CompressionMode.parse("zip")


def test_color_components_are_validated() -> None:
    assert Color.from_rgb255(255, 0, 0) == Color(1.0, 0.0, 0.0)
    assert Color.gray(0.5) == Color(0.5, 0.5, 0.5)
    with pytest.raises(ValueError):
        Color(1.5, 0, 0)


def test_dash_style_is_validated() -> None:
    with pytest.raises(ValueError):
        DashStyle((3, -1))
    with pytest.raises(ValueError):
        DashStyle((0, 0))


def test_page_size_dimensions() -> None:
    assert PageSize.A4.width == pytest.approx(595.276)
    assert PageSize.A4.height == pytest.approx(841.89)
    assert PageSize.LETTER.width == 612


def test_document_info_defaults() -> None:
    info = DocumentInfo()

    assert info.producer == "pdfdrawx"
    assert info.creation_date is None
