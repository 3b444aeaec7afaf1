"""Errors raised by the grave manager services."""


class GraveManagerError(Exception):
    """Base class for all grave manager errors."""


class InvalidArgumentError(GraveManagerError, ValueError):
    """A required argument was None."""


class IllegalEntityError(GraveManagerError):
    """
    An entity is in the wrong state for the operation.

    Raised for an id that is already set on create or missing on update/delete,
    a referenced row that does not exist, a body that is already buried, a full
    grave, or an update/delete that did not touch exactly one row.
    """


class ValidationError(GraveManagerError):
    """An entity broke one of its domain rules."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ServiceFailureError(GraveManagerError):
    """The storage layer failed; the original error is chained as ``__cause__``."""
