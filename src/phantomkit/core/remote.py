# src/phantomkit/core/remote.py

"""
Remote reference images.

This module provides:
  • RemoteSource        → the collaborator protocol: retrieve(id) -> (pixels, native_size)
  • HttpImageSource     → GET {base_url}/{id}.{extension} via requests
  • FolderImageSource   → <root>/<id>.<ext> on local disk
  • get_remote_source() / set_remote_source()
  • fetch_and_scale(...)

No caching and no retries: a failed retrieval surfaces immediately as
RetrievalFailure (SourceNotFound when the source has no such id).
"""

from __future__ import annotations

import io
import threading
from pathlib import Path
from urllib.parse import quote
from typing import Iterable, List, Optional, Protocol, Tuple

import numpy as np
import requests
from loguru import logger
from PIL import Image, UnidentifiedImageError

from phantomkit.config_loader import get_config
from phantomkit.core.errors import InvalidParameter, PhantomError, RetrievalFailure, SourceNotFound
from phantomkit.core.phantom import Size, check_size
from phantomkit.core.rescale import check_interpolation, rescale


class RemoteSource(Protocol):
    def retrieve(self, source_id: str) -> Tuple[np.ndarray, Size]:
        ...


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def decode_image(source_id: str, data) -> np.ndarray:
    """Decode image bytes (or a path) to a greyscale float64 array."""
    try:
        with Image.open(data) as im:
            if im.mode.startswith("I;16"):
                im = im.convert("I")
            elif im.mode not in ("L", "I", "F"):
                im = im.convert("L")
            arr = np.asarray(im.convert("F"), dtype=np.float64)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise RetrievalFailure(source_id, f"could not decode image: {e}") from e
    return arr.copy()


def _normalize_extensions(exts: Iterable[str]) -> List[str]:
    return [f".{ext.lower().lstrip('.')}" for ext in exts]


# ------------------------------------------------------------
# HTTP source
# ------------------------------------------------------------

class HttpImageSource:
    """Fetches `{base_url}/{source_id}.{extension}` with a plain GET."""

    def __init__(self, base_url: str, extension: str = "png", timeout: float = 30):
        if not base_url:
            raise InvalidParameter("base_url", "an HTTP remote source needs a base URL")
        self.base_url = base_url.rstrip("/")
        self.extension = extension.lstrip(".")
        self.timeout = timeout

    def url_for(self, source_id: str) -> str:
        # ids are a single path segment; "/" and "?" are escaped, not followed
        return f"{self.base_url}/{quote(source_id, safe='')}.{self.extension}"

    def retrieve(self, source_id: str) -> Tuple[np.ndarray, Size]:
        url = self.url_for(source_id)
        logger.debug(f"[Remote] Downloading: {url}")

        try:
            resp = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RetrievalFailure(source_id, f"request to {url} failed: {e}") from e

        if resp.status_code == 404:
            raise SourceNotFound(source_id, f"no image at {url}")

        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise RetrievalFailure(source_id, str(e)) from e

        arr = decode_image(source_id, io.BytesIO(resp.content))
        return arr, arr.shape

    def __repr__(self) -> str:
        return f"HttpImageSource({self.base_url!r})"


# ------------------------------------------------------------
# Folder source
# ------------------------------------------------------------

class FolderImageSource:
    """Serves `<root>/<source_id>.<ext>` for the configured extensions."""

    def __init__(self, root, extensions: Iterable[str] = ("png", "jpg", "jpeg", "tif", "tiff")):
        self.root = Path(root).expanduser().resolve()
        self.extensions = _normalize_extensions(extensions)

    def _find(self, source_id: str) -> Optional[Path]:
        # ids are bare file stems; anything with a path component is not ours
        if not source_id or Path(source_id).name != source_id:
            return None
        for ext in self.extensions:
            path = self.root / f"{source_id}{ext}"
            if path.is_file():
                return path
        return None

    def available(self) -> List[str]:
        """Sorted ids of the images under root."""
        if not self.root.is_dir():
            return []
        return sorted(
            {p.stem for p in self.root.iterdir() if p.is_file() and p.suffix.lower() in self.extensions}
        )

    def retrieve(self, source_id: str) -> Tuple[np.ndarray, Size]:
        path = self._find(source_id)
        if path is None:
            raise SourceNotFound(source_id, f"not found under {self.root}")

        logger.debug(f"[Remote] Loading: {path}")
        arr = decode_image(source_id, path)
        return arr, arr.shape

    def __repr__(self) -> str:
        return f"FolderImageSource({str(self.root)!r})"


# ------------------------------------------------------------
# Configured default source
# ------------------------------------------------------------

_UNSET = object()
_source_lock = threading.Lock()
_source = _UNSET


def source_from_config(cfg: dict | None = None) -> Optional[RemoteSource]:
    """Build the remote source described by the [remote] config section (None if disabled)."""
    if cfg is None:
        cfg = get_config()
    remote = cfg.get("remote", {})
    provider = str(remote.get("provider", "none")).lower().strip()

    if provider in ("", "none"):
        return None

    if provider == "http":
        return HttpImageSource(
            base_url=remote.get("base_url", ""),
            extension=remote.get("extension", "png"),
            timeout=remote.get("timeout", 30),
        )

    if provider == "folder":
        return FolderImageSource(
            root=remote.get("image_folder", "./phantoms"),
            extensions=remote.get("image_extensions", ["png", "jpg", "jpeg", "tif", "tiff"]),
        )

    raise InvalidParameter("remote.provider", f"unknown provider '{provider}' (none, http, folder)")


def get_remote_source() -> Optional[RemoteSource]:
    """Return the active remote source, building it from config on first use."""
    global _source
    current = _source
    if current is not _UNSET:
        return current

    with _source_lock:
        if _source is _UNSET:
            _source = source_from_config()
            logger.debug(f"[Remote] Using remote source from config: {_source!r}")
        return _source


def set_remote_source(source: Optional[RemoteSource]) -> None:
    """Replace the active remote source (None disables remote images)."""
    global _source
    with _source_lock:
        _source = source


def reset_remote_source() -> None:
    """Forget the active source; the next call rebuilds it from config."""
    global _source
    with _source_lock:
        _source = _UNSET


def default_interpolation() -> str:
    return check_interpolation(get_config().get("remote", {}).get("interpolation"))


# ------------------------------------------------------------
# Fetch + rescale
# ------------------------------------------------------------

def _check_source_data(source_id: str, pixels, native_size) -> np.ndarray:
    arr = np.asarray(pixels, dtype=np.float64)

    if arr.ndim != 2 or arr.size == 0:
        raise RetrievalFailure(source_id, f"expected a non-empty 2-D image, got shape {arr.shape}")
    if tuple(native_size) != arr.shape:
        raise RetrievalFailure(
            source_id, f"reported size {tuple(native_size)} does not match data shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise RetrievalFailure(source_id, "image contains non-finite values")
    if arr.min() < 0:
        raise RetrievalFailure(source_id, "image contains negative values")

    return arr


def fetch_and_scale(
    source_id: str,
    target_size,
    *args,
    interpolation: str | None = None,
    source: Optional[RemoteSource] = None,
    **kwargs,
) -> np.ndarray:
    """
    Retrieve `source_id` from the remote source and resample it to target_size.

    interpolation defaults to [remote] interpolation from config ("linear").
    source overrides the configured remote source for this call.

    Remote images take no other arguments: the resampler is chosen by
    `interpolation` alone, and any extra positional or keyword argument
    raises InvalidParameter("args"). That check runs after retrieval, so
    an id the source does not have is reported as such first.
    """
    target = check_size(target_size)
    method = check_interpolation(interpolation) if interpolation is not None else default_interpolation()

    if source is None:
        source = get_remote_source()
    if source is None:
        raise SourceNotFound(source_id, "no remote source configured")

    try:
        pixels, native_size = source.retrieve(source_id)
    except PhantomError:
        raise
    except (OSError, ValueError) as e:
        raise RetrievalFailure(source_id, str(e)) from e

    arr = _check_source_data(source_id, pixels, native_size)

    # An unknown id takes precedence over argument errors
    if args or kwargs:
        extra = list(args) + sorted(kwargs)
        raise InvalidParameter(
            "args", f"remote image '{source_id}' takes no generator parameters, got {extra!r}"
        )

    logger.debug(
        f"[Remote] Rescaling '{source_id}' {arr.shape} → {target} ({method})"
    )
    return rescale(arr, target, method)
