# src/phantomkit/core/phantom.py

"""
TestImage value object plus the argument checks shared by generators,
the resolver and the remote path.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Tuple

import numpy as np

from phantomkit.core.errors import InvalidParameter


Size = Tuple[int, int]


# ------------------------------------------------------------
# Validation helpers
# ------------------------------------------------------------

def is_int(value) -> bool:
    """True for ints and numpy integers, False for bools."""
    return isinstance(value, Integral) and not isinstance(value, bool)


def check_pair(name: str, value, minimum: int | None = 1) -> Tuple[int, int]:
    """
    Validate a pair of integers and return it as a tuple of plain ints.

    minimum=None skips the lower bound (used for pivots, which may lie
    outside the image).
    """
    try:
        first, second = value
    except (TypeError, ValueError):
        raise InvalidParameter(name, f"expected a pair of integers, got {value!r}") from None

    if not (is_int(first) and is_int(second)):
        raise InvalidParameter(name, f"expected integers, got {value!r}")

    if minimum is not None and (first < minimum or second < minimum):
        raise InvalidParameter(name, f"values must be >= {minimum}, got {value!r}")

    return int(first), int(second)


def check_size(size) -> Size:
    return check_pair("size", size, minimum=1)


def check_count(name: str, value, minimum: int = 1) -> int:
    if not is_int(value):
        raise InvalidParameter(name, f"expected an integer, got {value!r}")
    if value < minimum:
        raise InvalidParameter(name, f"must be >= {minimum}, got {value!r}")
    return int(value)


# ------------------------------------------------------------
# TestImage
# ------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class TestImage:
    """
    A named phantom.

    pixels is a fresh float64 array owned by this instance and flagged
    read-only, so two TestImages never share writable storage.
    """

    __test__ = False  # keep pytest from collecting this class

    name: str
    pixels: np.ndarray
    source: str = "generator"

    @classmethod
    def wrap(cls, name: str, pixels, source: str = "generator") -> "TestImage":
        arr = np.array(pixels, dtype=np.float64, copy=True)
        arr.flags.writeable = False
        return cls(name=name, pixels=arr, source=source)

    @property
    def size(self) -> Size:
        return tuple(int(n) for n in self.pixels.shape)

    def to_array(self) -> np.ndarray:
        """Writable copy of the pixel data."""
        return self.pixels.copy()
