from __future__ import annotations

import math

import pytest

from pdfdrawx.path import KAPPA, Path


def test_empty_path() -> None:
    path = Path()

    assert path.is_empty
    assert path.current_point is None
    assert list(path) == []


def test_paths_are_immutable() -> None:
    base = Path().moving(10, 10)
    line = base.appending_line(200, 200)

    assert len(base) == 1
    assert line.operations == (("m", (10, 10)), ("l", (200, 200)))
    assert line.current_point == (200, 200)
    assert base != line


def test_equal_paths_hash_alike() -> None:
    first = Path().moving(0, 0).appending_line(5, 5)
    second = Path().moving(0, 0).appending_line(5, 5)

    assert first == second
    assert len({first, second}) == 1


def test_line_requires_current_point() -> None:
    with pytest.raises(ValueError):
        Path().appending_line(1, 1)
    with pytest.raises(ValueError):
        Path().closing_subpath()


def test_closing_subpath_returns_to_start() -> None:
    path = Path().moving(1, 2).appending_line(5, 2).appending_line(5, 6).closing_subpath()

    assert path.operations[-1] == ("h", ())
    assert path.current_point == (1, 2)


def test_rectangle_is_a_complete_subpath() -> None:
    path = Path().appending_rectangle(10, 20, 30, 40)

    assert path.operations == (("re", (10, 20, 30, 40)),)
    assert path.current_point == (10, 20)


def test_curve() -> None:
    path = Path().moving(0, 0).appending_curve((0, 10), (10, 10), (10, 0))

    assert path.operations[-1] == ("c", (0, 10, 10, 10, 10, 0))
    assert path.current_point == (10, 0)


def test_circle_uses_four_bezier_segments() -> None:
    path = Path().appending_circle(100, 100, 50)
    operators = [operator for operator, _ in path]

    assert operators == ["m", "c", "c", "c", "c"]
    assert path.operations[0] == ("m", (50, 100))
    first_curve = path.operations[1][1]
    assert first_curve[1] == pytest.approx(100 + 50 * KAPPA)
    assert first_curve[4:] == (100, 150)


def test_ellipse_rejects_non_positive_radii() -> None:
    with pytest.raises(ValueError):
        Path().appending_ellipse(0, 0, 0, 10)


def test_arc_starts_new_subpath_without_current_point() -> None:
    path = Path().appending_arc(100, 100, 50, 0, 90)

    operator, start = path.operations[0]
    assert operator == "m"
    assert start == pytest.approx((100, 150))
    assert path.current_point == pytest.approx((150, 100))
    assert [operator for operator, _ in path] == ["m", "c"]


def test_arc_joins_current_point_with_line() -> None:
    path = Path().moving(100, 100).appending_arc(100, 100, 50, 90, 180)

    assert [operator for operator, _ in path] == ["m", "l", "c"]
    assert path.operations[1][1] == pytest.approx((150, 100))
    assert path.current_point == pytest.approx((100, 50))


def test_long_arcs_are_split_into_quarter_segments() -> None:
    path = Path().appending_arc(0, 0, 10, 0, 300)
    curves = [operands for operator, operands in path if operator == "c"]

    assert len(curves) == 4
    end_x, end_y = curves[-1][4:]
    assert end_x == pytest.approx(10 * math.sin(math.radians(300)))
    assert end_y == pytest.approx(10 * math.cos(math.radians(300)))


@pytest.mark.parametrize(("begin", "end"), [(90, 90), (180, 90), (0, 360), (-10, 400)])
def test_invalid_arc_angles(begin: float, end: float) -> None:
    with pytest.raises(ValueError):
        Path().appending_arc(0, 0, 10, begin, end)


@pytest.mark.parametrize(
    "build",
    [
        lambda: Path().moving(float("nan"), 1),
        lambda: Path().moving(0, 0).appending_line(float("inf"), 5),
        lambda: Path().appending_rectangle(0, 0, float("-inf"), 10),
        lambda: Path().appending_circle(10, 10, float("inf")),
        lambda: Path().appending_arc(10, 10, 5, 0, float("nan")),
    ],
)
def test_non_finite_coordinates_are_rejected(build) -> None:
    with pytest.raises(ValueError):
        build()
