"""Serialization backends for pdfdrawx."""

from .base import PDFBackend
from .pypdf_backend import PypdfBackend

__all__ = [
    "PDFBackend",
    "PypdfBackend",
]
