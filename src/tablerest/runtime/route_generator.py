"""
Route generator - exposes GenericRouter operations as FastAPI routes.

Paths are derived from table aliases. For a table ``users`` with primary
key ``userID``::

    POST    /users              create
    GET     /users              retrieve (retrieve_where with ?where/?params)
    OPTIONS /users              options
    GET     /users/{userID}     retrieve_by_id
    PUT     /users/{userID}     update
    DELETE  /users/{userID}     delete

With a parent table the collection is nested under the parent, e.g.
``/users/{userID}/usersCourses``, and ``PUT`` on the collection replaces
all of the parent's children.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from tablerest.errors import ValidationError
from tablerest.runtime.config import TableRestConfig
from tablerest.runtime.filter_validator import PARAMS_KEY, WHERE_KEY
from tablerest.runtime.generic_router import GenericRouter, RequestContext
from tablerest.runtime.logging import get_logger

logger = get_logger("HTTP")

Endpoint = Callable[[Request], Awaitable[Response]]

_BODY_METHODS = ("POST", "PUT", "PATCH")


class CaptureResponder:
    """Responder that records the status and value for a JSONResponse."""

    def __init__(self) -> None:
        self.status_code = 200
        self.value: Any = None
        self.sent = False

    def status(self, code: int) -> CaptureResponder:
        self.status_code = code
        return self

    def json(self, value: Any) -> None:
        self.value = value
        self.sent = True

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=jsonable_encoder(self.value))


async def _parse_request_body(request: Request) -> Any:
    """Parse a JSON request body. An empty body is an empty object."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Request body does not contain valid JSON: {e}", "VAL_JSON", "body"
        ) from e
    except RecursionError as e:
        raise ValidationError(
            "Request body does not contain valid JSON: nested too deeply.", "VAL_JSON", "body"
        ) from e


async def build_request_context(request: Request) -> RequestContext:
    """Collect path params, query params and body into a RequestContext."""
    body: Any = {}
    if request.method in _BODY_METHODS:
        body = await _parse_request_body(request)
    return RequestContext(
        body=body,
        params=dict(request.path_params),
        query=dict(request.query_params),
    )


async def run_operation(
    operation: Callable[..., Awaitable[None]], context: RequestContext
) -> Response:
    """
    Run a router operation and turn its outcome into a response.

    An error reported on the error channel is raised so the application's
    exception handlers can map it to a status code.
    """
    responder = CaptureResponder()
    errors: list[BaseException] = []

    await operation(context, responder, errors.append)

    if errors:
        raise errors[0]
    return responder.to_response()


def create_operation_handler(router: GenericRouter, operation: str) -> Endpoint:
    """Create an endpoint calling one router operation."""
    bound = getattr(router, operation)

    async def handler(request: Request) -> Response:
        context = await build_request_context(request)
        return await run_operation(bound, context)

    handler.__name__ = f"{router.table.alias}_{operation}"
    return handler


def create_list_handler(router: GenericRouter) -> Endpoint:
    """Create a list endpoint; filter query values switch to retrieve_where."""

    async def handler(request: Request) -> Response:
        context = await build_request_context(request)
        if context.query.get(WHERE_KEY) or context.query.get(PARAMS_KEY):
            return await run_operation(router.retrieve_where, context)
        return await run_operation(router.retrieve, context)

    handler.__name__ = f"{router.table.alias}_list"
    return handler


class RouteGenerator:
    """
    Generates FastAPI routes for GenericRouter instances.

    Example:
        >>> generator = RouteGenerator()
        >>> generator.add_resource(GenericRouter(dao, users))
        >>> app.include_router(generator.router)
    """

    def __init__(self, config: TableRestConfig | None = None):
        self.config = config or TableRestConfig()
        self._router = APIRouter(prefix=self.config.prefix)

    @staticmethod
    def collection_path(router: GenericRouter) -> str:
        """Path of the resource collection for a router."""
        if router.parent_table is not None:
            parent = router.parent_table
            return f"/{parent.alias}/{{{parent.pk_alias}}}/{router.table.alias}"
        return f"/{router.table.alias}"

    @classmethod
    def item_path(cls, router: GenericRouter) -> str:
        """Path of a single resource for a router."""
        return f"{cls.collection_path(router)}/{{{router.table.pk_alias}}}"

    def _add(self, path: str, method: str, endpoint: Endpoint, summary: str, tag: str) -> None:
        self._router.add_api_route(
            path,
            endpoint,
            methods=[method],
            summary=summary,
            tags=[tag],
            response_model=None,
        )
        logger.debug(f"Registered {method} {self.config.prefix}{path}")

    def add_resource(self, router: GenericRouter) -> APIRouter:
        """
        Register all routes for a router.

        Args:
            router: The GenericRouter to expose

        Returns:
            The APIRouter the routes were added to
        """
        name = router.table.name
        tag = router.table.alias
        collection = self.collection_path(router)
        item = self.item_path(router)

        routes: list[tuple[str, str, Endpoint, str]] = [
            (collection, "POST", create_operation_handler(router, "create"), f"Create {name}"),
            (collection, "GET", create_list_handler(router), f"List {name}"),
            (item, "GET", create_operation_handler(router, "retrieve_by_id"), f"Get {name}"),
            (item, "PUT", create_operation_handler(router, "update"), f"Update {name}"),
            (item, "DELETE", create_operation_handler(router, "delete"), f"Delete {name}"),
        ]

        if router.parent_table is not None:
            routes.append(
                (
                    collection,
                    "PUT",
                    create_operation_handler(router, "replace"),
                    f"Replace {name} of {router.parent_table.name}",
                )
            )

        if self.config.include_options:
            options = create_operation_handler(router, "options")
            routes.append((collection, "OPTIONS", options, f"Describe {name}"))

        for path, method, endpoint, summary in routes:
            self._add(path, method, endpoint, summary, tag)

        return self._router

    def generate_all_routes(self, routers: list[GenericRouter]) -> APIRouter:
        """Register routes for every router and return the APIRouter."""
        for router in routers:
            self.add_resource(router)
        return self._router

    @property
    def router(self) -> APIRouter:
        """Get the generated router."""
        return self._router
