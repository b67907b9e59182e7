"""
Identifier resolution from route parameters.

Identifiers are read from request params under the exposed name of the
table's first primary key column. Values are not coerced or checked here;
the DAO decides whether an identifier is acceptable.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

from tablerest.specs.table import TableSpec

if TYPE_CHECKING:
    from tablerest.runtime.generic_router import RequestContext

# Signature of a body reconciler: (table, parent_table, request) -> None
BodyReconciler = Callable[[TableSpec, "TableSpec | None", "RequestContext"], None]


def resolve_id(table: TableSpec, params: Mapping[str, Any]) -> Any:
    """Return the table's own identifier from params, or None if absent."""
    return params.get(table.pk_alias)


def resolve_parent_id(parent_table: TableSpec, params: Mapping[str, Any]) -> Any:
    """Return the parent table's identifier from params, or None if absent."""
    return params.get(parent_table.pk_alias)


def reconcile_body(
    table: TableSpec,
    parent_table: TableSpec | None,
    request: RequestContext,
) -> None:
    """
    Overwrite identifier fields in the request body with route identifiers.

    Route-derived identifiers win over identifiers supplied in the payload:
    the parent identifier (when a parent table is configured) and the
    resource's own identifier are copied from params into the body when
    present in params. The parent copy is conditional too: a parent id
    absent from params leaves the body's value in place rather than
    overwriting it with None. The body is modified in place, and applying
    the reconciler again to the same request changes nothing. Bodies that
    are not mappings (e.g. the list sent to a replace) are left alone.
    """
    body = request.body
    if not isinstance(body, MutableMapping):
        return

    params = request.params

    if parent_table is not None and parent_table.pk_alias in params:
        body[parent_table.pk_alias] = resolve_parent_id(parent_table, params)

    if table.pk_alias in params:
        body[table.pk_alias] = resolve_id(table, params)
