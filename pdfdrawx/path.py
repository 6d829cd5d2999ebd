"""Immutable path descriptions.

A :class:`Path` records path-construction operators without touching any page.
Every ``moving``/``appending_*``/``closing_subpath`` call returns a new path,
so paths can be shared between pages and documents.
"""

from __future__ import annotations

import math
from typing import Iterator, Optional, Tuple

PathOperation = Tuple[str, Tuple[float, ...]]

# Control-point distance for approximating a quarter circle with one cubic Bezier.
KAPPA = 0.5522847498


class Path:
    """A sequence of path-construction operators."""

    __slots__ = ("_operations", "_current_point", "_subpath_start")

    def __init__(self) -> None:
        self._operations: Tuple[PathOperation, ...] = ()
        self._current_point: Optional[Tuple[float, float]] = None
        self._subpath_start: Optional[Tuple[float, float]] = None

    def _derive(
        self,
        operations: Tuple[PathOperation, ...],
        current_point: Optional[Tuple[float, float]],
        subpath_start: Optional[Tuple[float, float]],
    ) -> "Path":
        for _, operands in operations:
            _check_finite(*operands)
        path = Path.__new__(Path)
        path._operations = self._operations + operations
        path._current_point = current_point
        path._subpath_start = subpath_start
        return path

    @property
    def operations(self) -> Tuple[PathOperation, ...]:
        return self._operations

    @property
    def current_point(self) -> Optional[Tuple[float, float]]:
        return self._current_point

    @property
    def is_empty(self) -> bool:
        return not self._operations

    def __iter__(self) -> Iterator[PathOperation]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._operations == other._operations

    def __hash__(self) -> int:
        return hash(self._operations)

    def __repr__(self) -> str:
        return f"Path({len(self._operations)} operations)"

    def _require_current_point(self, what: str) -> Tuple[float, float]:
        if self._current_point is None:
            raise ValueError(f"Cannot append a {what} to a path without a current point; call moving() first")
        return self._current_point

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def moving(self, x: float, y: float) -> "Path":
        """Begin a new subpath at ``(x, y)``."""
        point = (x, y)
        return self._derive((("m", point),), point, point)

    def appending_line(self, x: float, y: float) -> "Path":
        """Append a straight line from the current point to ``(x, y)``."""
        self._require_current_point("line")
        point = (x, y)
        return self._derive((("l", point),), point, self._subpath_start)

    def appending_curve(
        self,
        control1: Tuple[float, float],
        control2: Tuple[float, float],
        end: Tuple[float, float],
    ) -> "Path":
        """Append a cubic Bezier curve from the current point to ``end``."""
        self._require_current_point("curve")
        operands = (*control1, *control2, *end)
        return self._derive((("c", operands),), end, self._subpath_start)

    def appending_rectangle(self, x: float, y: float, width: float, height: float) -> "Path":
        """Append a closed rectangle as a complete subpath."""
        start = (x, y)
        return self._derive((("re", (x, y, width, height)),), start, start)

    def appending_ellipse(self, x: float, y: float, x_radius: float, y_radius: float) -> "Path":
        """Append a closed ellipse centred on ``(x, y)``, starting at its leftmost point."""
        if x_radius <= 0 or y_radius <= 0:
            raise ValueError("Ellipse radii must be positive")
        kx = x_radius * KAPPA
        ky = y_radius * KAPPA
        start = (x - x_radius, y)
        operations: Tuple[PathOperation, ...] = (
            ("m", start),
            ("c", (x - x_radius, y + ky, x - kx, y + y_radius, x, y + y_radius)),
            ("c", (x + kx, y + y_radius, x + x_radius, y + ky, x + x_radius, y)),
            ("c", (x + x_radius, y - ky, x + kx, y - y_radius, x, y - y_radius)),
            ("c", (x - kx, y - y_radius, x - x_radius, y - ky, x - x_radius, y)),
        )
        return self._derive(operations, start, start)

    def appending_circle(self, x: float, y: float, radius: float) -> "Path":
        """Append a closed circle centred on ``(x, y)``."""
        return self.appending_ellipse(x, y, radius, radius)

    def appending_arc(
        self,
        x: float,
        y: float,
        radius: float,
        begin_angle: float,
        end_angle: float,
    ) -> "Path":
        """Append a circular arc centred on ``(x, y)``.

        Angles are in degrees, measured clockwise from the 12 o'clock
        position, and ``begin_angle`` must be smaller than ``end_angle`` by less
        than a full turn. The arc is joined to the current point with a line,
        or starts a new subpath when the path has no current point.
        """
        _check_finite(x, y, radius, begin_angle, end_angle)
        if radius <= 0:
            raise ValueError("Arc radius must be positive")
        if begin_angle >= end_angle or end_angle - begin_angle >= 360:
            raise ValueError(
                f"Invalid arc angles {begin_angle}..{end_angle}: begin must be smaller "
                "than end by less than 360 degrees"
            )

        def point_at(angle: float) -> Tuple[float, float]:
            radians = math.radians(angle)
            return (x + radius * math.sin(radians), y + radius * math.cos(radians))

        start = point_at(begin_angle)
        operator = "l" if self._current_point is not None else "m"
        operations = [(operator, start)]
        subpath_start = self._subpath_start if operator == "l" else start

        segments = max(1, math.ceil((end_angle - begin_angle) / 90.0))
        sweep = (end_angle - begin_angle) / segments
        angle = begin_angle
        for _ in range(segments):
            operations.append(("c", _arc_segment(x, y, radius, angle, angle + sweep)))
            angle += sweep

        return self._derive(tuple(operations), point_at(end_angle), subpath_start)

    def closing_subpath(self) -> "Path":
        """Close the current subpath with a straight line to its start."""
        self._require_current_point("closing segment")
        return self._derive((("h", ()),), self._subpath_start, self._subpath_start)


def _check_finite(*values: float) -> None:
    for value in values:
        if not math.isfinite(value):
            raise ValueError(f"Path coordinates must be finite, got {value}")

def _arc_segment(x: float, y: float, radius: float, begin: float, end: float) -> Tuple[float, ...]:
    """Bezier control points for an arc of at most 90 degrees (clockwise from 12 o'clock)."""
    # Convert to counter-clockwise angles from the positive x axis.
    theta1 = math.radians(90.0 - begin)
    theta2 = math.radians(90.0 - end)
    k = 4.0 / 3.0 * math.tan((theta2 - theta1) / 4.0)

    x0, y0 = x + radius * math.cos(theta1), y + radius * math.sin(theta1)
    x3, y3 = x + radius * math.cos(theta2), y + radius * math.sin(theta2)
    x1 = x0 - k * radius * math.sin(theta1)
    y1 = y0 + k * radius * math.cos(theta1)
    x2 = x3 + k * radius * math.sin(theta2)
    y2 = y3 - k * radius * math.cos(theta2)
    return (x1, y1, x2, y2, x3, y3)
