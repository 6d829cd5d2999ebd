"""Utility helpers for pdfdrawx."""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

_ESCAPES = {
    ord("\\"): b"\\\\",
    ord("("): b"\\(",
    ord(")"): b"\\)",
    ord("\r"): b"\\r",
    ord("\n"): b"\\n",
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure package-wide logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_number(value: float) -> str:
    """Format a number the way content-stream operands are written.

    Integers are written without a fractional part and reals with at most four
    decimals, trailing zeros removed. NaN and infinities have no PDF form and
    raise ``ValueError``.
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid numeric operands")
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"{value} is not a valid PDF number")
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def escape_string(data: bytes) -> bytes:
    """Return ``data`` as a PDF literal string, parentheses included."""
    escaped = bytearray(b"(")
    for byte in data:
        escaped += _ESCAPES.get(byte, bytes((byte,)))
    escaped += b")"
    return bytes(escaped)


def pdf_date(moment: datetime) -> str:
    """Format a :class:`datetime` as a PDF date string."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    offset = moment.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset else 0
    if minutes == 0:
        suffix = "Z"
    else:
        sign = "+" if minutes > 0 else "-"
        hours, mins = divmod(abs(minutes), 60)
        suffix = f"{sign}{hours:02d}'{mins:02d}'"
    return f"D:{moment.strftime('%Y%m%d%H%M%S')}{suffix}"


@contextmanager
def time_block(logger: logging.Logger, message: str) -> Iterator[None]:
    """Context manager that logs the execution time of a code block."""
    start = datetime.now(tz=timezone.utc)
    logger.debug("Starting %s", message)
    try:
        yield
    finally:
        end = datetime.now(tz=timezone.utc)
        elapsed = (end - start).total_seconds()
        logger.debug("%s completed in %.3fs", message, elapsed)
