# src/phantomkit/core/registry.py

"""
Process-wide registry of named test-image generators.

Writers serialize on a single lock and publish a new dict (copy-on-write);
readers grab the current dict reference without locking, so a lookup never
sees a half-applied registration.

Use:
    from phantomkit.core.registry import register, lookup

    register("ramp", lambda size: np.tile(np.linspace(0, 1, size[1]), (size[0], 1)))

or, with a validated parameter class:

    @testimage_gen("bars", params=BarParams)
    def render_bars(size, params): ...
"""

from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from loguru import logger

from phantomkit.core.errors import InvalidParameter
from phantomkit.core.generators import (
    CheckerParams,
    DeltaParams,
    render_checkerboard,
    render_delta,
)


@dataclass(frozen=True)
class GeneratorEntry:
    """
    function : callable(size, params) when `params` is a class,
               callable(size, *args, **kwargs) otherwise
    params   : parameter class built from the caller's arguments, or None
    """

    name: str
    function: Callable
    params: Optional[type] = None
    description: str = ""

    def build_params(self, *args, **kwargs):
        return self.params(*args, **kwargs)

    def check_arguments(self, size, *args, **kwargs) -> None:
        """Raise InvalidParameter if `function` cannot accept these arguments."""
        try:
            signature = inspect.signature(self.function)
        except (TypeError, ValueError):
            # No introspectable signature (some builtins); let the call decide
            return
        try:
            signature.bind(size, *args, **kwargs)
        except TypeError as e:
            raise InvalidParameter(self.name, str(e)) from e

    def __call__(self, size, *args, **kwargs):
        if self.params is None:
            self.check_arguments(size, *args, **kwargs)
            return self.function(size, *args, **kwargs)
        try:
            params = self.build_params(*args, **kwargs)
        except TypeError as e:
            # Wrong arity / unknown keyword for the parameter class
            raise InvalidParameter(self.name, str(e)) from e
        return self.function(size, params)


def _describe(function: Callable) -> str:
    doc = (getattr(function, "__doc__", None) or "").strip()
    return doc.splitlines()[0] if doc else ""


class Registry:
    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, GeneratorEntry] = {}

    # ------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------

    def register(
        self,
        name: str,
        function: Callable,
        params: Optional[type] = None,
        description: Optional[str] = None,
    ) -> None:
        """Insert or overwrite the generator stored under `name`."""
        if not isinstance(name, str) or not name:
            raise InvalidParameter("name", f"expected a non-empty string, got {name!r}")
        if not callable(function):
            raise InvalidParameter("function", f"{function!r} is not callable")
        if params is not None and not isinstance(params, type):
            raise InvalidParameter("params", f"expected a class, got {params!r}")

        entry = GeneratorEntry(
            name=name,
            function=function,
            params=params,
            description=description if description is not None else _describe(function),
        )

        with self._lock:
            replaced = name in self._entries
            updated = dict(self._entries)
            updated[name] = entry
            self._entries = updated

        logger.debug(
            f"[Registry] {'Replaced' if replaced else 'Registered'} generator '{name}'"
        )

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def lookup(self, name: str) -> Optional[GeneratorEntry]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return sorted(self._entries)

    def entries(self) -> List[GeneratorEntry]:
        snapshot = self._entries
        return [snapshot[k] for k in sorted(snapshot)]

    def __contains__(self, name) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


BUILTIN_GENERATORS = ("checker_image", "delta_image")


def _register_builtins(registry: Registry) -> None:
    registry.register(
        "checker_image",
        render_checkerboard,
        params=CheckerParams,
        description="Checker board cells separated by zero-valued stripes",
    )
    registry.register(
        "delta_image",
        render_delta,
        params=DeltaParams,
        description="Discrete points placed by per-index spacing functions",
    )


def new_registry(with_builtins: bool = True) -> Registry:
    registry = Registry()
    if with_builtins:
        _register_builtins(registry)
    return registry


REGISTRY = new_registry()


# ======================================================================
# Module-level API (operates on the process-wide REGISTRY)
# ======================================================================

def register(name: str, function: Callable, params: Optional[type] = None, description: Optional[str] = None) -> None:
    REGISTRY.register(name, function, params=params, description=description)


def lookup(name: str) -> Optional[GeneratorEntry]:
    return REGISTRY.lookup(name)


def testimage_gen(name: Optional[str] = None, params: Optional[type] = None, description: Optional[str] = None):
    """
    Decorator that registers the function under `name` (default: its __name__)
    and returns it unchanged.
    """

    def decorator(function):
        register(name or function.__name__, function, params=params, description=description)
        return function

    return decorator
