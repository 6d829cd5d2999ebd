"""pypdf backend implementation for pdfdrawx."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Dict

from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NumberObject,
    StreamObject,
)

from ..exceptions import StatusCode, translate_status
from ..fonts import FIRST_CHAR, LAST_CHAR, Font, StandardFont, TrueTypeFont
from ..types import CompressionMode, DocumentInfo
from ..utils import pdf_date
from .base import PDFBackend

if TYPE_CHECKING:  # pragma: no cover
    from ..document import Document

LOGGER = logging.getLogger(__name__)

_PROC_SET = ("/PDF", "/Text")


def _name(value: str) -> NameObject:
    return NameObject(value if value.startswith("/") else f"/{value}")


def _stream(data: bytes, compress: bool) -> StreamObject:
    stream = DecodedStreamObject()
    stream.set_data(data)
    if compress:
        return stream.flate_encode()
    return stream


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` to build the object graph."""

    def serialize(self, document: "Document") -> bytes:
        mode = document.compression_mode
        writer = PdfWriter()

        font_refs: Dict[str, IndirectObject] = {}
        for resource, font in document.fonts:
            font_refs[resource] = self._add_font(writer, font, mode)

        for page in document.pages:
            pdf_page = writer.add_blank_page(width=page.width, height=page.height)
            if page.rotation:
                pdf_page[NameObject("/Rotate")] = NumberObject(page.rotation)

            resources = DictionaryObject()
            resources[NameObject("/ProcSet")] = ArrayObject(NameObject(name) for name in _PROC_SET)
            if page.fonts:
                page_fonts = DictionaryObject()
                for resource, _font in page.fonts:
                    page_fonts[_name(resource)] = font_refs[resource]
                resources[NameObject("/Font")] = page_fonts
            pdf_page[NameObject("/Resources")] = resources

            content = _stream(page.content, CompressionMode.TEXT in mode)
            pdf_page[NameObject("/Contents")] = writer._add_object(content)

        self._write_info(writer, document.info)

        output = io.BytesIO()
        try:
            writer.write(output)
        except Exception as exc:
            raise translate_status(
                StatusCode.INCONSISTENT_PAGE_STATE, f"pypdf failed to write the document: {exc}"
            ) from exc
        return output.getvalue()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _add_font(self, writer: PdfWriter, font: Font, mode: CompressionMode) -> IndirectObject:
        if isinstance(font, StandardFont):
            return writer._add_object(self._standard_font(font))
        if isinstance(font, TrueTypeFont):
            return writer._add_object(self._true_type_font(writer, font, mode))
        raise TypeError(f"Unsupported font type: {type(font).__name__}")

    def _standard_font(self, font: StandardFont) -> DictionaryObject:
        font_dict = DictionaryObject()
        font_dict[NameObject("/Type")] = NameObject("/Font")
        font_dict[NameObject("/Subtype")] = NameObject("/Type1")
        font_dict[NameObject("/BaseFont")] = _name(font.name)
        if font.uses_win_ansi:
            font_dict[NameObject("/Encoding")] = NameObject("/WinAnsiEncoding")
        return font_dict

    def _true_type_font(self, writer: PdfWriter, font: TrueTypeFont, mode: CompressionMode) -> DictionaryObject:
        metrics = font.metrics
        base_font = _name(font.base_font)

        descriptor = DictionaryObject()
        descriptor[NameObject("/Type")] = NameObject("/FontDescriptor")
        descriptor[NameObject("/FontName")] = base_font
        descriptor[NameObject("/Flags")] = NumberObject(metrics.flags)
        descriptor[NameObject("/FontBBox")] = ArrayObject(NumberObject(value) for value in metrics.bbox)
        descriptor[NameObject("/ItalicAngle")] = FloatObject(metrics.italic_angle)
        descriptor[NameObject("/Ascent")] = NumberObject(metrics.ascent)
        descriptor[NameObject("/Descent")] = NumberObject(metrics.descent)
        descriptor[NameObject("/CapHeight")] = NumberObject(metrics.cap_height)
        descriptor[NameObject("/StemV")] = NumberObject(metrics.stem_v)
        descriptor[NameObject("/MissingWidth")] = NumberObject(metrics.missing_width)

        if font.is_embedded:
            data = font.font_file_data()
            font_file = _stream(data, CompressionMode.METADATA in mode)
            font_file[NameObject("/Length1")] = NumberObject(len(data))
            descriptor[NameObject("/FontFile2")] = writer._add_object(font_file)
            LOGGER.debug("Embedding %s (%d bytes)", font.base_font, len(data))

        font_dict = DictionaryObject()
        font_dict[NameObject("/Type")] = NameObject("/Font")
        font_dict[NameObject("/Subtype")] = NameObject("/TrueType")
        font_dict[NameObject("/BaseFont")] = base_font
        font_dict[NameObject("/FirstChar")] = NumberObject(FIRST_CHAR)
        font_dict[NameObject("/LastChar")] = NumberObject(LAST_CHAR)
        font_dict[NameObject("/Widths")] = ArrayObject(NumberObject(width) for width in metrics.widths)
        font_dict[NameObject("/Encoding")] = NameObject("/WinAnsiEncoding")
        font_dict[NameObject("/FontDescriptor")] = writer._add_object(descriptor)
        return font_dict

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    def _write_info(self, writer: PdfWriter, info: DocumentInfo) -> None:
        metadata = {"/Producer": info.producer}
        if info.title:
            metadata["/Title"] = info.title
        if info.author:
            metadata["/Author"] = info.author
        if info.subject:
            metadata["/Subject"] = info.subject
        if info.keywords:
            metadata["/Keywords"] = info.keywords
        if info.creator:
            metadata["/Creator"] = info.creator
        if info.creation_date is not None:
            metadata["/CreationDate"] = pdf_date(info.creation_date)
        writer.add_metadata(metadata)
