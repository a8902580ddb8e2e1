# src/phantomkit/core/generators.py

"""
Built-in pattern generators.

Each generator comes in two layers:
  • a frozen parameter class (CheckerParams, DeltaParams) that validates and
    normalizes its fields on construction
  • a pure render function  render_*(size, params) -> np.ndarray

plus a keyword-style convenience wrapper (checker_image, delta_image).

Arrays have shape == size; axis 0 follows size[0], axis 1 follows size[1].
Values are 0.0 (background) or 1.0 (foreground). Nothing here touches the
registry; registry.py registers the render functions at import time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Tuple

import numpy as np

from phantomkit.core.errors import InvalidParameter
from phantomkit.core.phantom import Size, check_count, check_pair, check_size, is_int


DEFAULT_SIZE: Size = (81, 81)

Spacing = Callable[[int], int]


def constant_spacing(step: int) -> Spacing:
    """Spacing function that returns `step` for every point index."""
    if not is_int(step):
        raise InvalidParameter("distance_of_points", f"expected an integer step, got {step!r}")
    step = int(step)

    def spacing(index: int) -> int:
        return step

    spacing.__name__ = f"constant_spacing({step})"
    return spacing


def _check_flag(name: str, value) -> bool:
    if not isinstance(value, (bool, np.bool_)):
        raise InvalidParameter(name, f"expected a boolean, got {value!r}")
    return bool(value)


# ======================================================================
# Checkerboard
# ======================================================================

@dataclass(frozen=True)
class CheckerParams:
    """
    checkers_count : cells along each axis (>= 1)
    stripe_width   : width of the zero-valued separators (>= 0)
    alternate      : if True, only cells with an even (i + j) are filled
    """

    checkers_count: Tuple[int, int] = (8, 8)
    stripe_width: Tuple[int, int] = (1, 1)
    alternate: bool = False

    def __post_init__(self):
        object.__setattr__(self, "checkers_count", check_pair("checkers_count", self.checkers_count, minimum=1))
        object.__setattr__(self, "stripe_width", check_pair("stripe_width", self.stripe_width, minimum=0))
        object.__setattr__(self, "alternate", _check_flag("alternate", self.alternate))


def _cell_spans(length: int, count: int, stripe: int) -> List[Tuple[int, int]]:
    """
    Half-open [start, stop) spans of the cells along one axis.

    Cells are framed by stripes; any remainder stays at the trailing edge.
    A layout that leaves no room gives zero-width cells.
    """
    cell = max((length - stripe * (count + 1)) // count, 0)
    return [
        (stripe * (k + 1) + cell * k, stripe * (k + 1) + cell * (k + 1))
        for k in range(count)
    ]


def render_checkerboard(size, params: CheckerParams) -> np.ndarray:
    size = check_size(size)
    image = np.zeros(size, dtype=np.float64)

    rows = _cell_spans(size[0], params.checkers_count[0], params.stripe_width[0])
    cols = _cell_spans(size[1], params.checkers_count[1], params.stripe_width[1])

    for i, (r0, r1) in enumerate(rows):
        for j, (c0, c1) in enumerate(cols):
            if params.alternate and (i + j) % 2:
                continue
            image[r0:r1, c0:c1] = 1.0

    return image


def checker_image(
    size=DEFAULT_SIZE,
    checkers_count=(8, 8),
    stripe_width=(1, 1),
    alternate=False,
) -> np.ndarray:
    """
    Phantom with a checker board pattern.

    Best effort: the board covers as much of the image as the layout allows,
    leftover pixels stay zero at the trailing edge.

    Example:
        >>> checker_image((8, 8), (2, 3), (2, 1)).astype(int)
        array([[0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 1, 0, 1, 0, 1, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 1, 0, 1, 0, 1, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0]])
    """
    params = CheckerParams(
        checkers_count=checkers_count,
        stripe_width=stripe_width,
        alternate=alternate,
    )
    return render_checkerboard(size, params)


# ======================================================================
# Delta (point grid)
# ======================================================================

def _default_spacing() -> Tuple[Spacing, Spacing]:
    return (constant_spacing(2), constant_spacing(2))


@dataclass(frozen=True)
class DeltaParams:
    """
    num_of_points      : number of points to stamp (>= 0)
    size_of_point      : block size of each point (>= 1 on both axes)
    distance_of_points : (fx, fy), each mapping the 1-based point index to the
                         offset from the previous point; ints mean constant steps
    pivot              : top-left corner of the first point (may lie outside)
    circular_shape     : stamp an inscribed ellipse instead of a full block
    """

    num_of_points: int
    size_of_point: Tuple[int, int] = (1, 1)
    distance_of_points: Tuple[Spacing, Spacing] = field(default_factory=_default_spacing)
    pivot: Tuple[int, int] = (0, 0)
    circular_shape: bool = False

    def __post_init__(self):
        object.__setattr__(self, "num_of_points", check_count("num_of_points", self.num_of_points, minimum=0))
        object.__setattr__(self, "size_of_point", check_pair("size_of_point", self.size_of_point, minimum=1))
        object.__setattr__(self, "distance_of_points", self._normalize_spacing(self.distance_of_points))
        object.__setattr__(self, "pivot", check_pair("pivot", self.pivot, minimum=None))
        object.__setattr__(self, "circular_shape", _check_flag("circular_shape", self.circular_shape))

    @staticmethod
    def _normalize_spacing(value) -> Tuple[Spacing, Spacing]:
        try:
            fx, fy = value
        except (TypeError, ValueError):
            raise InvalidParameter(
                "distance_of_points", f"expected a pair of functions or integers, got {value!r}"
            ) from None

        out = []
        for item in (fx, fy):
            if is_int(item):
                out.append(constant_spacing(item))
            elif callable(item):
                out.append(item)
            else:
                raise InvalidParameter(
                    "distance_of_points", f"expected a function or integer, got {item!r}"
                )
        return tuple(out)


def _point_stamp(size_of_point: Tuple[int, int], circular: bool) -> np.ndarray:
    """Block of ones, or the filled ellipse inscribed in it (pixel-centre test)."""
    if not circular:
        return np.ones(size_of_point, dtype=np.float64)

    pw, ph = size_of_point
    rr = (np.arange(pw) + 0.5 - pw / 2) / (pw / 2)
    cc = (np.arange(ph) + 0.5 - ph / 2) / (ph / 2)
    inside = rr[:, None] ** 2 + cc[None, :] ** 2 <= 1.0
    return inside.astype(np.float64)


def _paste_clipped(image: np.ndarray, stamp: np.ndarray, x: int, y: int) -> None:
    """OR the stamp into image at anchor (x, y), dropping whatever falls outside."""
    pw, ph = stamp.shape
    r0, c0 = max(x, 0), max(y, 0)
    r1, c1 = min(x + pw, image.shape[0]), min(y + ph, image.shape[1])
    if r0 >= r1 or c0 >= c1:
        return

    region = image[r0:r1, c0:c1]
    np.maximum(region, stamp[r0 - x:r1 - x, c0 - y:c1 - y], out=region)


def _offset(fn: Spacing, index: int, axis: int) -> int:
    step = fn(index)
    if not is_int(step):
        raise InvalidParameter(
            "distance_of_points",
            f"axis {axis} function returned {step!r} for point {index}; expected an integer",
        )
    return int(step)


def render_delta(size, params: DeltaParams) -> np.ndarray:
    size = check_size(size)
    image = np.zeros(size, dtype=np.float64)

    if params.num_of_points == 0:
        return image

    stamp = _point_stamp(params.size_of_point, params.circular_shape)
    fx, fy = params.distance_of_points
    x, y = params.pivot

    for index in range(1, params.num_of_points + 1):
        if index > 1:
            x += _offset(fx, index, 0)
            y += _offset(fy, index, 1)
        _paste_clipped(image, stamp, x, y)

    return image


def delta_image(
    size,
    num_of_points,
    *,
    size_of_point=(1, 1),
    distance_of_points=None,
    pivot=(0, 0),
    circular_shape=False,
) -> np.ndarray:
    """
    Phantom with discrete points.

    The first point sits at `pivot`; point i (i >= 2) is placed
    (fx(i), fy(i)) away from point i - 1. Points leaving the image are clipped.

    Example, two blocks:
        >>> delta_image((8, 8), 2, size_of_point=(3, 2),
        ...             distance_of_points=(lambda i: 0, lambda i: 4),
        ...             pivot=(2, 2)).astype(int)
        array([[0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 1, 1, 0, 0, 1, 1],
               [0, 0, 1, 1, 0, 0, 1, 1],
               [0, 0, 1, 1, 0, 0, 1, 1],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0],
               [0, 0, 0, 0, 0, 0, 0, 0]])
    """
    params = DeltaParams(
        num_of_points=num_of_points,
        size_of_point=size_of_point,
        distance_of_points=_default_spacing() if distance_of_points is None else distance_of_points,
        pivot=pivot,
        circular_shape=circular_shape,
    )
    return render_delta(size, params)
