"""Backend protocol for PDF serialization."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from ..document import Document


class PDFBackend(Protocol):
    """Protocol defining how a finished document becomes PDF bytes."""

    def serialize(self, document: "Document") -> bytes:
        """Return the complete PDF file for ``document``.

        The document's pages are all in page-description mode with no open
        drawing context when this is called.
        """
