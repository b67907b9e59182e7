"""
Table descriptors and filter conditions.

This module exports the descriptors routers are built from and the filter
condition tree accepted by filtered list queries.
"""

from tablerest.specs.filter import (
    BooleanOperator,
    Comparison,
    ComparisonOperator,
    Conjunction,
    FilterCondition,
    InList,
    NullCheck,
    NullOperator,
    check_condition,
    parse_condition,
)
from tablerest.specs.table import ColumnSpec, DatabaseSpec, TableSpec

__all__ = [
    # Tables
    "ColumnSpec",
    "TableSpec",
    "DatabaseSpec",
    # Filters
    "BooleanOperator",
    "ComparisonOperator",
    "NullOperator",
    "Comparison",
    "InList",
    "NullCheck",
    "Conjunction",
    "FilterCondition",
    "parse_condition",
    "check_condition",
]
