"""
In-memory DAO.

Implements every router capability over a dict store. Intended for tests,
demos and prototyping; it validates filter conditions the way a database
DAO is expected to (raising ConditionError) so routers exercise their full
error path against it.
"""

from __future__ import annotations

import copy
import re
from itertools import count
from typing import Any

from tablerest.errors import NotFoundError, ValidationError
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
    is_placeholder,
    placeholder_name,
)
from tablerest.specs.table import TableSpec

_FILTER_NODES = (Comparison, InList, NullCheck, Conjunction)


# =============================================================================
# Condition Evaluation
# =============================================================================


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.DOTALL)


def _compare(record_value: Any, operator: ComparisonOperator, target: Any) -> bool:
    if record_value is None or target is None:
        if operator == ComparisonOperator.EQ:
            return record_value is None and target is None
        if operator == ComparisonOperator.NEQ:
            return (record_value is None) != (target is None)
        return False

    if operator == ComparisonOperator.EQ:
        return str(record_value) == str(target)
    if operator == ComparisonOperator.NEQ:
        return str(record_value) != str(target)
    if operator == ComparisonOperator.LIKE:
        return _like_to_regex(str(target)).fullmatch(str(record_value)) is not None
    if operator == ComparisonOperator.NOT_LIKE:
        return _like_to_regex(str(target)).fullmatch(str(record_value)) is None
    try:
        if operator == ComparisonOperator.LT:
            return record_value < target  # type: ignore[no-any-return]
        if operator == ComparisonOperator.LTE:
            return record_value <= target  # type: ignore[no-any-return]
        if operator == ComparisonOperator.GT:
            return record_value > target  # type: ignore[no-any-return]
        if operator == ComparisonOperator.GTE:
            return record_value >= target  # type: ignore[no-any-return]
    except TypeError:
        return False
    return False


def evaluate_condition(
    condition: FilterCondition,
    record: dict[str, Any],
    params: dict[str, Any],
    table_alias: str,
) -> bool:
    """
    Evaluate a condition tree against one record.

    Args:
        condition: Root of the condition tree
        record: Row keyed by column alias
        params: Parameter map for placeholders
        table_alias: Alias qualifying column names in the condition

    Returns:
        True if the record satisfies the condition
    """
    prefix = f"{table_alias}."

    def column_value(column: str) -> Any:
        return record.get(column.removeprefix(prefix))

    def resolve(value: str) -> Any:
        if is_placeholder(value):
            return params[placeholder_name(value)]
        return column_value(value)

    if isinstance(condition, Conjunction):
        results = (
            evaluate_condition(op, record, params, table_alias) for op in condition.operands
        )
        return all(results) if condition.operator == BooleanOperator.AND else any(results)

    if isinstance(condition, Comparison):
        return _compare(
            column_value(condition.column), condition.operator, resolve(condition.value)
        )

    if isinstance(condition, InList):
        actual = column_value(condition.column)
        return any(str(actual) == str(resolve(v)) for v in condition.values)

    # NullCheck
    target = resolve(condition.value) if condition.value is not None else None
    matches = column_value(condition.column) == target
    return matches if condition.operator == NullOperator.IS else not matches


# =============================================================================
# DAO
# =============================================================================


class InMemoryDAO:
    """Dict-backed DAO for a single table, optionally nested under a parent."""

    def __init__(
        self,
        table: TableSpec,
        parent_table: TableSpec | None = None,
        rows: list[dict[str, Any]] | None = None,
    ):
        self.table = table
        self.parent_table = parent_table
        self._rows: dict[str, dict[str, Any]] = {}
        self._ids = count(1)

        for row in rows or []:
            self._insert(row)

    @property
    def pk(self) -> str:
        return self.table.pk_alias

    def _next_id(self) -> int:
        while True:
            candidate = next(self._ids)
            if str(candidate) not in self._rows:
                return candidate

    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(row)
        if stored.get(self.pk) is None:
            stored[self.pk] = self._next_id()
        self._rows[str(stored[self.pk])] = stored
        return copy.deepcopy(stored)

    def _get(self, resource_id: Any) -> dict[str, Any]:
        key = str(resource_id)
        if resource_id is None or key not in self._rows:
            raise NotFoundError(f"{self.table.name} {resource_id} not found.")
        return self._rows[key]

    async def create(self, body: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise ValidationError("Resource must be an object.", "VAL_BODY")
        return self._insert(body)

    async def retrieve(
        self, arg: Any = None, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """
        List rows.

        Args:
            arg: A FilterCondition, a parent ID, or None for all rows
            params: Parameter map for a FilterCondition
        """
        rows = list(self._rows.values())

        if isinstance(arg, _FILTER_NODES):
            check_condition(arg, params, self.table.filterable_columns)
            resolved = params or {}
            rows = [r for r in rows if evaluate_condition(arg, r, resolved, self.table.alias)]
        elif arg is not None and self.parent_table is not None:
            fk = self.parent_table.pk_alias
            rows = [r for r in rows if str(r.get(fk)) == str(arg)]

        return copy.deepcopy(rows)

    async def retrieve_by_id(self, resource_id: Any) -> dict[str, Any]:
        return copy.deepcopy(self._get(resource_id))

    async def update(self, body: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise ValidationError("Resource must be an object.", "VAL_BODY")
        stored = self._get(body.get(self.pk))
        stored.update(copy.deepcopy(body))
        return copy.deepcopy(stored)

    async def delete(self, criteria: dict[str, Any]) -> dict[str, Any]:
        stored = self._get(criteria.get(self.pk))
        del self._rows[str(stored[self.pk])]
        return criteria

    async def replace(
        self, parent_table_name: str, parent_id: Any, rows: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        if self.parent_table is None or parent_table_name != self.parent_table.name:
            raise ValidationError(
                f"{self.table.name} is not a child of {parent_table_name}.", "VAL_PARENT"
            )
        if not isinstance(rows, list):
            raise ValidationError("Replacement resources must be an array.", "VAL_BODY")

        fk = self.parent_table.pk_alias
        for key in [k for k, r in self._rows.items() if str(r.get(fk)) == str(parent_id)]:
            del self._rows[key]

        return [self._insert({**row, fk: parent_id}) for row in rows]

    async def options(self) -> dict[str, Any]:
        return {
            "table": self.table.name,
            "alias": self.table.alias,
            "primaryKey": [col.alias for col in self.table.primary_key],
            "columns": [col.alias for col in self.table.all_columns],
            "parent": self.parent_table.name if self.parent_table else None,
        }
