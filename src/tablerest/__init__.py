"""
tablerest - generic REST-style CRUD dispatch for relational tables.

This package provides:
- specs: Table descriptors and the filter condition tree
- runtime: GenericRouter, DAO helpers and the FastAPI binding
- errors: Error kinds reported by routers
"""

__version__ = "0.1.0"

from tablerest.errors import (
    ConditionError,
    NotFoundError,
    RouterConfigurationError,
    TableRestError,
    ValidationError,
)
from tablerest.specs import ColumnSpec, DatabaseSpec, TableSpec

__all__ = [
    "ColumnSpec",
    "DatabaseSpec",
    "TableSpec",
    "TableRestError",
    "NotFoundError",
    "ValidationError",
    "ConditionError",
    "RouterConfigurationError",
]
