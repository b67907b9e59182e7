"""
DAO capability detection.

A DAO is any object (or mapping) exposing some of the operations in
CAPABILITIES. Nothing is checked at construction time: each router call
looks its operation up on the DAO when it runs, and a missing or None slot
means the operation is not implemented.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

CAPABILITIES = (
    "create",
    "retrieve",
    "retrieve_by_id",
    "update",
    "delete",
    "replace",
    "options",
)

DaoMethod = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class DaoOperations:
    """
    Explicit DAO with independently optional operation slots.

    Useful for wiring plain functions into a router without writing a
    class::

        dao = DaoOperations(retrieve=fetch_users, retrieve_by_id=fetch_user)
    """

    create: DaoMethod | None = None
    retrieve: DaoMethod | None = None
    retrieve_by_id: DaoMethod | None = None
    update: DaoMethod | None = None
    delete: DaoMethod | None = None
    replace: DaoMethod | None = None
    options: DaoMethod | None = None


def get_method(dao: Any, name: str) -> DaoMethod | None:
    """Look up an operation on a DAO object or mapping."""
    if isinstance(dao, Mapping):
        return dao.get(name)
    return getattr(dao, name, None)


def has_method(dao: Any, name: str) -> bool:
    """
    Check whether a DAO provides an operation.

    Presence only: the slot's value is not inspected beyond being non-None.
    """
    return get_method(dao, name) is not None


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def verify(dao: Any, name: str, on_missing: Callable[[str], Any]) -> bool:
    """
    Check a capability, reporting it once if missing.

    Args:
        dao: DAO object or mapping
        name: Operation name
        on_missing: Called with the operation name when it is absent; may
            return an awaitable

    Returns:
        True if the caller should proceed, False if it should stop
    """
    if has_method(dao, name):
        return True
    await maybe_await(on_missing(name))
    return False
