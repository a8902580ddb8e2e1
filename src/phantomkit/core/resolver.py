# src/phantomkit/core/resolver.py

"""
Name → image dispatch.

    get_image(name, size, *args, **kwargs)

1. A registered generator under `name` always wins.
2. Otherwise `name` is treated as a remote source id and fetched + rescaled.
3. If the remote side has no such id either → UnknownImage.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from phantomkit.core import registry as _registry
from phantomkit.core.errors import GeneratorOutputError, SourceNotFound, UnknownImage
from phantomkit.core.phantom import TestImage, check_size
from phantomkit.core.remote import fetch_and_scale


def _check_generator_output(name: str, result, size) -> np.ndarray:
    try:
        arr = np.asarray(result, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise GeneratorOutputError(name, f"returned data that is not a numeric array: {e}") from e
    if arr.shape != size:
        raise GeneratorOutputError(name, f"returned shape {arr.shape}, expected {size}")
    if not np.all(np.isfinite(arr)):
        raise GeneratorOutputError(name, "returned non-finite values")
    return arr


def get_image(name: str, size, *args, **kwargs) -> TestImage:
    """
    Retrieve a test image by name.

    Generator arguments are forwarded to the generator (validated into its
    parameter class when it has one). For remote images the only accepted
    keywords are `interpolation` and `source`.
    """
    size = check_size(size)

    entry = _registry.REGISTRY.lookup(name)
    if entry is not None:
        logger.debug(f"[Resolver] '{name}' → generator (size={size})")
        pixels = _check_generator_output(name, entry(size, *args, **kwargs), size)
        return TestImage.wrap(name, pixels, source="generator")

    logger.debug(f"[Resolver] '{name}' not registered → remote source (size={size})")
    try:
        pixels = fetch_and_scale(name, size, *args, **kwargs)
    except SourceNotFound as e:
        raise UnknownImage(name, e.reason) from e

    return TestImage.wrap(name, pixels, source="remote")


def testimage(name: str, size, *args, **kwargs) -> np.ndarray:
    """
    Like get_image() but returns a writable pixel array.

    Example:
        >>> testimage("delta_image", (8, 8), 2, size_of_point=(3, 2),
        ...           distance_of_points=(lambda i: 0, lambda i: 4), pivot=(2, 2))
    """
    return get_image(name, size, *args, **kwargs).to_array()
