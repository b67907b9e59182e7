"""
Error kinds raised and reported by the router.

Routers never translate these into HTTP responses themselves; that is the
job of whatever consumes the error channel (see exception_handlers).
"""

from __future__ import annotations


class TableRestError(Exception):
    """Base class for errors carrying a machine-checkable code."""

    default_code = "ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class NotFoundError(TableRestError):
    """A resource, or the DAO operation needed to reach it, does not exist."""

    default_code = "NOT_FOUND"


class ValidationError(TableRestError):
    """Client input failed validation."""

    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, code: str | None = None, field: str | None = None):
        self.field = field
        super().__init__(message, code)


class ConditionError(TableRestError):
    """
    A filter condition is malformed or references something it may not.

    Raised by the condition parser and by DAOs validating a condition
    against their schema. Routers re-tag it as a ValidationError on the
    ``where`` field.
    """

    default_code = "CONDITION_ERROR"


class RouterConfigurationError(RuntimeError):
    """A router was wired incorrectly (not a per-request failure)."""
