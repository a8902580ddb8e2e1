"""
phantomkit — synthetic and remote test images ("phantoms") for imaging pipelines.

    from phantomkit import get_image, register

    img = get_image("checker_image", (64, 64), (4, 4))
    img.pixels.shape   # (64, 64)
"""

from phantomkit.core.errors import (
    GeneratorOutputError,
    InvalidParameter,
    PhantomError,
    RetrievalFailure,
    SourceNotFound,
    UnknownImage,
)
from phantomkit.core.phantom import TestImage
from phantomkit.core.generators import (
    CheckerParams,
    DeltaParams,
    checker_image,
    constant_spacing,
    delta_image,
    render_checkerboard,
    render_delta,
)
from phantomkit.core.registry import (
    BUILTIN_GENERATORS,
    GeneratorEntry,
    Registry,
    lookup,
    register,
    testimage_gen,
)
from phantomkit.core.rescale import rescale
from phantomkit.core.remote import (
    FolderImageSource,
    HttpImageSource,
    RemoteSource,
    fetch_and_scale,
    get_remote_source,
    reset_remote_source,
    set_remote_source,
)
from phantomkit.core.resolver import get_image, testimage

__version__ = "0.1.0"

__all__ = [
    "BUILTIN_GENERATORS",
    "CheckerParams",
    "DeltaParams",
    "FolderImageSource",
    "GeneratorEntry",
    "GeneratorOutputError",
    "HttpImageSource",
    "InvalidParameter",
    "PhantomError",
    "Registry",
    "RemoteSource",
    "RetrievalFailure",
    "SourceNotFound",
    "TestImage",
    "UnknownImage",
    "checker_image",
    "constant_spacing",
    "delta_image",
    "fetch_and_scale",
    "get_image",
    "get_remote_source",
    "lookup",
    "register",
    "render_checkerboard",
    "render_delta",
    "rescale",
    "reset_remote_source",
    "set_remote_source",
    "testimage",
    "testimage_gen",
]
