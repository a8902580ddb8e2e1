# src/phantomkit/core/rescale.py

from __future__ import annotations

import numpy as np
from PIL import Image

from phantomkit.core.errors import InvalidParameter
from phantomkit.core.phantom import Size, check_size


DEFAULT_INTERPOLATION = "linear"

_RESAMPLERS = {
    "nearest": Image.Resampling.NEAREST,
    "linear": Image.Resampling.BILINEAR,
}

INTERPOLATIONS = tuple(_RESAMPLERS)


def check_interpolation(interpolation: str | None) -> str:
    if interpolation is None:
        return DEFAULT_INTERPOLATION
    key = str(interpolation).lower().strip()
    if key not in _RESAMPLERS:
        raise InvalidParameter(
            "interpolation",
            f"expected one of {', '.join(INTERPOLATIONS)}, got {interpolation!r}",
        )
    return key


def _nearest_indices(source_len: int, target_len: int) -> np.ndarray:
    # Source index under each target pixel centre
    idx = np.floor((np.arange(target_len) + 0.5) * source_len / target_len).astype(np.intp)
    return np.minimum(idx, source_len - 1)


def rescale(pixels: np.ndarray, target_size, interpolation: str | None = None) -> np.ndarray:
    """
    Resample a 2-D array to target_size (output shape == target_size).

    "nearest" gathers source pixels by index in float64, so every output
    value is exactly a source value.

    "linear" goes through Pillow's bilinear filter in 32-bit float ("F")
    mode: values are rounded to float32 (24-bit mantissa, exact for
    integers up to 2**24) and the result is clipped to the source min/max.
    """
    target: Size = check_size(target_size)
    method = check_interpolation(interpolation)

    src = np.asarray(pixels, dtype=np.float64)
    if src.ndim != 2 or src.size == 0:
        raise InvalidParameter("pixels", f"expected a non-empty 2-D array, got shape {src.shape}")

    if src.shape == target:
        return src.copy()

    if method == "nearest":
        return src[np.ix_(_nearest_indices(src.shape[0], target[0]),
                          _nearest_indices(src.shape[1], target[1]))]

    # PIL sizes are (columns, rows)
    img = Image.fromarray(src.astype(np.float32))
    resized = img.resize((target[1], target[0]), resample=_RESAMPLERS[method])

    out = np.asarray(resized, dtype=np.float64)
    return np.clip(out, src.min(), src.max())
