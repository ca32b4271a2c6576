"""Error taxonomy shared by the store, the query service and the adapters."""

from __future__ import annotations


class SafetyNetError(Exception):
    """Base class for every error raised by the SafetyNet core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SafetyNetError):
    """Lookup by identity key found no match."""


class ConflictError(SafetyNetError):
    """A create would break a uniqueness rule."""


class InvalidFormatError(SafetyNetError, ValueError):
    """A birthdate is missing or does not parse."""


class PersistenceError(SafetyNetError):
    """The backing store could not be read or written."""
