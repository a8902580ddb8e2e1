# src/phantomkit/core/errors.py

"""
Exception taxonomy.

Callers can tell apart:
    • UnknownImage      → no generator and no remote source has this name
    • InvalidParameter  → the generator exists but rejected the arguments
    • RetrievalFailure  → the remote source could not supply the data
"""

from __future__ import annotations


class PhantomError(Exception):
    """Base class for every error raised by phantomkit."""


class InvalidParameter(PhantomError, ValueError):
    """A size, count or dimension argument is malformed."""

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(f"Invalid parameter '{parameter}': {message}")


class UnknownImage(PhantomError, LookupError):
    """The name matches neither a registered generator nor a remote source."""

    def __init__(self, name: str, detail: str | None = None):
        self.name = name
        message = f"Unknown test image '{name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RetrievalFailure(PhantomError):
    """The remote source collaborator could not supply the image."""

    def __init__(self, source_id: str, reason: str):
        self.source_id = source_id
        self.reason = reason
        super().__init__(f"Failed to retrieve remote image '{source_id}': {reason}")


class SourceNotFound(RetrievalFailure):
    """The remote source answered, but has no image under this id."""


class GeneratorOutputError(PhantomError):
    """A registered generator returned an array of the wrong shape or with non-finite values."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"Generator '{name}' {message}")
