"""
Generic CRUD router.

GenericRouter dispatches create/retrieve/update/delete/replace/options
calls for one table (optionally nested under a parent table) to a DAO.
Every operation has the same shape::

    await router.create(request, response, next_)

- ``request`` is a RequestContext (body, params, query)
- ``response`` is a Responder; on success ``response.json(value)`` is
  called once, preceded by ``response.status(201)`` for create/replace
- ``next_`` is the error channel; on failure it is called once with the
  error and the responder is never used

DAO failures are forwarded unchanged, except that filtered retrieval
re-tags condition errors as ValidationError on the ``where`` field.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from tablerest.errors import NotFoundError, RouterConfigurationError
from tablerest.runtime.capability import get_method, has_method, maybe_await, verify
from tablerest.runtime.filter_validator import as_where_error, is_condition_error, parse_filter
from tablerest.runtime.identifiers import (
    BodyReconciler,
    reconcile_body,
    resolve_id,
    resolve_parent_id,
)
from tablerest.runtime.logging import get_logger, log_with_context
from tablerest.specs.table import TableSpec

logger = get_logger("Router")

# =============================================================================
# Call Interface
# =============================================================================


@dataclass
class RequestContext:
    """Per-call request data. Never retained by the router."""

    body: Any = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)


class Responder(Protocol):
    """Success channel: ``status()`` returns the responder for chaining."""

    def status(self, code: int) -> Responder: ...

    def json(self, value: Any) -> Any: ...


ErrorChannel = Callable[[BaseException], Any]
NotImplementedHandler = Callable[[str, RequestContext, Responder, ErrorChannel], Any]


def report_not_found(
    method: str, request: RequestContext, response: Responder, next_: ErrorChannel
) -> Any:
    """Default handler for a missing DAO operation."""
    return next_(NotFoundError(f"Method {method} not available."))


# =============================================================================
# Router
# =============================================================================


class GenericRouter:
    """
    CRUD dispatch for a single table.

    Holds no per-call state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        dao: Any,
        table: TableSpec,
        parent_table: TableSpec | None = None,
        *,
        on_not_implemented: NotImplementedHandler | None = None,
        body_reconciler: BodyReconciler | None = reconcile_body,
    ):
        """
        Initialize the router.

        Args:
            dao: Data-access object (or mapping) providing any of create,
                retrieve, retrieve_by_id, update, delete, replace, options.
                Each operation returns an awaitable.
            table: The table CRUD is performed on
            parent_table: Optional parent table scoping this table's rows
            on_not_implemented: Called as (method, request, response, next_)
                when the DAO lacks an operation. Defaults to reporting a
                NotFoundError on the error channel.
            body_reconciler: Applied to the request before create/update to
                copy route identifiers into the body. None disables it.
        """
        self.dao = dao
        self.table = table
        self.parent_table = parent_table
        self.on_not_implemented: NotImplementedHandler = on_not_implemented or report_not_found
        self.body_reconciler = body_reconciler

    def has_method(self, method: str) -> bool:
        """Check if the DAO implements method."""
        return has_method(self.dao, method)

    async def _verify_impl(
        self, method: str, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> bool:
        def _missing(name: str) -> Any:
            log_with_context(
                logger,
                logging.WARNING,
                f"Method {name} not available.",
                table=self.table.name,
                method=name,
            )
            return self.on_not_implemented(name, request, response, next_)

        return await verify(self.dao, method, _missing)

    async def _dispatch(
        self,
        method: str,
        args: tuple[Any, ...],
        response: Responder,
        next_: ErrorChannel,
        status: int | None = None,
        translate_error: Callable[[Exception], Exception] | None = None,
    ) -> None:
        """Call the DAO and settle the result on exactly one channel."""
        log_with_context(
            logger, logging.DEBUG, f"{self.table.name}.{method}", table=self.table.name
        )
        dao_method = get_method(self.dao, method)

        try:
            result = await maybe_await(dao_method(*args))  # type: ignore[misc]
        except Exception as err:
            if translate_error is not None:
                err = translate_error(err)
            await self._forward(method, err, next_)
            return

        try:
            responder = response.status(status) if status is not None else response
            await maybe_await(responder.json(result))
        except Exception as err:
            await self._forward(method, err, next_)

    async def _forward(self, method: str, err: Exception, next_: ErrorChannel) -> None:
        log_with_context(
            logger,
            logging.DEBUG,
            f"{self.table.name}.{method} failed: {err}",
            table=self.table.name,
            error_type=type(err).__name__,
        )
        await maybe_await(next_(err))

    def _reconcile(self, request: RequestContext) -> None:
        if self.body_reconciler is not None:
            self.body_reconciler(self.table, self.parent_table, request)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """Create the resource in request.body. Responds 201."""
        if not await self._verify_impl("create", request, response, next_):
            return

        self._reconcile(request)
        await self._dispatch("create", (request.body,), response, next_, status=201)

    async def retrieve(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """
        Retrieve a list of resources.

        With a parent table the parent's ID is expected in params and is
        passed to the DAO; otherwise the DAO is called with no arguments.
        """
        if not await self._verify_impl("retrieve", request, response, next_):
            return

        args: tuple[Any, ...] = ()
        if self.parent_table is not None:
            args = (resolve_parent_id(self.parent_table, request.params),)

        await self._dispatch("retrieve", args, response, next_)

    async def retrieve_by_id(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """Retrieve a single resource by the ID in params."""
        if not await self._verify_impl("retrieve_by_id", request, response, next_):
            return

        await self._dispatch(
            "retrieve_by_id", (resolve_id(self.table, request.params),), response, next_
        )

    async def retrieve_where(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """
        Retrieve a list of resources filtered by ``where``/``params`` in query.

        Malformed filters are reported without calling the DAO. Condition
        errors raised by the DAO are re-tagged as ValidationError on the
        ``where`` field; other DAO errors are forwarded unchanged.
        """
        if not await self._verify_impl("retrieve", request, response, next_):
            return

        try:
            condition, params = parse_filter(request.query)
        except Exception as err:
            await self._forward("retrieve", err, next_)
            return

        def _translate(err: Exception) -> Exception:
            return as_where_error(err) if is_condition_error(err) else err

        await self._dispatch(
            "retrieve", (condition, params), response, next_, translate_error=_translate
        )

    async def update(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """Update the resource in request.body."""
        if not await self._verify_impl("update", request, response, next_):
            return

        self._reconcile(request)
        await self._dispatch("update", (request.body,), response, next_)

    async def delete(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """Delete the resource identified in params."""
        if not await self._verify_impl("delete", request, response, next_):
            return

        criteria = {self.table.pk_alias: resolve_id(self.table, request.params)}
        await self._dispatch("delete", (criteria,), response, next_)

    async def replace(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """
        Replace all child resources of the parent identified in params.

        request.body holds the list of replacement resources. Responds 201.

        Raises:
            RouterConfigurationError: If the router has no parent table
        """
        if not await self._verify_impl("replace", request, response, next_):
            return

        if self.parent_table is None:
            raise RouterConfigurationError("Parent table is required for replace operations.")

        parent_id = resolve_parent_id(self.parent_table, request.params)
        await self._dispatch(
            "replace",
            (self.parent_table.name, parent_id, request.body),
            response,
            next_,
            status=201,
        )

    async def options(
        self, request: RequestContext, response: Responder, next_: ErrorChannel
    ) -> None:
        """Describe the resource (accepted properties, requirements, etc.)."""
        if not await self._verify_impl("options", request, response, next_):
            return

        await self._dispatch("options", (), response, next_)
