"""Graphics modes, the operator transition table and the content stream engine.

A page's content stream is always in one of three graphics modes. Each mode
restricts which operators may be written next::

    PAGE_DESCRIPTION --path construction--> PATH_OBJECT
    PATH_OBJECT      --path painting------> PAGE_DESCRIPTION
    PAGE_DESCRIPTION --BT-----------------> TEXT_OBJECT
    TEXT_OBJECT      --ET-----------------> PAGE_DESCRIPTION

:class:`ContentStream` appends operators only when the table allows them and
reports the outcome as a :class:`~pdfdrawx.exceptions.StatusCode`.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

from .exceptions import StatusCode
from .utils import escape_string, format_number

Operand = Union[int, float, str, bytes, Sequence["Operand"]]


class GraphicsMode(Enum):
    PAGE_DESCRIPTION = "page-description"
    PATH_OBJECT = "path-object"
    TEXT_OBJECT = "text-object"


class OperatorFamily(Enum):
    GENERAL_STATE = "general graphics state"
    SPECIAL_STATE = "special graphics state"
    COLOR = "color"
    PATH_CONSTRUCTION = "path construction"
    PATH_PAINTING = "path painting"
    CLIPPING = "clipping path"
    BEGIN_TEXT = "begin text"
    END_TEXT = "end text"
    TEXT_STATE = "text state"
    TEXT_SHOWING = "text showing"
    TEXT_POSITIONING = "text positioning"


def _family(family: OperatorFamily, *operators: str) -> Dict[str, OperatorFamily]:
    return {operator: family for operator in operators}


OPERATOR_FAMILIES: Dict[str, OperatorFamily] = {
    **_family(OperatorFamily.GENERAL_STATE, "w", "J", "j", "M", "d", "ri", "i", "gs"),
    **_family(OperatorFamily.SPECIAL_STATE, "q", "Q", "cm"),
    **_family(OperatorFamily.COLOR, "CS", "cs", "SC", "SCN", "sc", "scn", "G", "g", "RG", "rg", "K", "k"),
    **_family(OperatorFamily.PATH_CONSTRUCTION, "m", "l", "c", "v", "y", "h", "re"),
    **_family(OperatorFamily.PATH_PAINTING, "S", "s", "f", "F", "f*", "B", "B*", "b", "b*", "n"),
    **_family(OperatorFamily.CLIPPING, "W", "W*"),
    **_family(OperatorFamily.BEGIN_TEXT, "BT"),
    **_family(OperatorFamily.END_TEXT, "ET"),
    **_family(OperatorFamily.TEXT_STATE, "Tc", "Tw", "Tz", "TL", "Tf", "Tr", "Ts"),
    **_family(OperatorFamily.TEXT_SHOWING, "Tj", "TJ", "'", '"'),
    **_family(OperatorFamily.TEXT_POSITIONING, "Td", "TD", "Tm", "T*"),
}

_PAGE = GraphicsMode.PAGE_DESCRIPTION
_PATH = GraphicsMode.PATH_OBJECT
_TEXT = GraphicsMode.TEXT_OBJECT

TRANSITIONS: Dict[Tuple[GraphicsMode, OperatorFamily], GraphicsMode] = {
    (_PAGE, OperatorFamily.GENERAL_STATE): _PAGE,
    (_PAGE, OperatorFamily.SPECIAL_STATE): _PAGE,
    (_PAGE, OperatorFamily.COLOR): _PAGE,
    (_PAGE, OperatorFamily.PATH_CONSTRUCTION): _PATH,
    (_PATH, OperatorFamily.PATH_CONSTRUCTION): _PATH,
    (_PATH, OperatorFamily.CLIPPING): _PATH,
    (_PATH, OperatorFamily.PATH_PAINTING): _PAGE,
    (_PAGE, OperatorFamily.BEGIN_TEXT): _TEXT,
    (_TEXT, OperatorFamily.GENERAL_STATE): _TEXT,
    (_TEXT, OperatorFamily.COLOR): _TEXT,
    (_TEXT, OperatorFamily.TEXT_STATE): _TEXT,
    (_TEXT, OperatorFamily.TEXT_SHOWING): _TEXT,
    (_TEXT, OperatorFamily.TEXT_POSITIONING): _TEXT,
    (_TEXT, OperatorFamily.END_TEXT): _PAGE,
}

# "n" ends a path without painting it, which discards it.
CLOSING_OPERATORS: Dict[GraphicsMode, str] = {
    _PATH: "n",
    _TEXT: "ET",
}


def next_mode(mode: GraphicsMode, operator: str) -> Optional[GraphicsMode]:
    """Return the mode reached by ``operator`` from ``mode``, or ``None`` if illegal."""
    family = OPERATOR_FAMILIES.get(operator)
    if family is None:
        return None
    return TRANSITIONS.get((mode, family))


def format_operand(operand: Operand) -> bytes:
    if isinstance(operand, bytes):
        return escape_string(operand)
    if isinstance(operand, str):
        return operand.encode("ascii")
    if isinstance(operand, (int, float)):
        return format_number(operand).encode("ascii")
    return b"[" + b" ".join(format_operand(item) for item in operand) + b"]"


class ContentStream:
    """An append-only content stream that enforces the graphics-mode table."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._mode = GraphicsMode.PAGE_DESCRIPTION
        self._operator_count = 0

    @property
    def mode(self) -> GraphicsMode:
        return self._mode

    @property
    def operator_count(self) -> int:
        return self._operator_count

    def emit(self, operator: str, *operands: Operand) -> StatusCode:
        """Append ``operands operator`` if the current mode allows it."""
        if operator not in OPERATOR_FAMILIES:
            return StatusCode.UNKNOWN_OPERATOR
        target = next_mode(self._mode, operator)
        if target is None:
            return StatusCode.INVALID_GRAPHICS_MODE

        parts = [format_operand(operand) for operand in operands]
        parts.append(operator.encode("ascii"))
        self._buffer += b" ".join(parts) + b"\n"
        self._mode = target
        self._operator_count += 1
        return StatusCode.OK

    def close(self) -> Optional[str]:
        """Emit the operator that returns the stream to page description.

        Returns the operator written, or ``None`` when the stream was already in
        page-description mode.
        """
        operator = CLOSING_OPERATORS.get(self._mode)
        if operator is not None:
            self.emit(operator)
        return operator

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)
