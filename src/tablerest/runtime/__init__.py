"""
tablerest runtime

Dispatches CRUD requests for a table to a data-access object (DAO).

This module provides:
- GenericRouter: per-table dispatcher with a uniform (request, response,
  next_) call signature
- Capability detection and identifier resolution helpers
- InMemoryDAO: a dict-backed DAO for tests and prototyping
- FastAPI binding (RouteGenerator, create_app)

Example usage:
    >>> from tablerest.specs import DatabaseSpec
    >>> from tablerest.runtime import GenericRouter, InMemoryDAO, create_app
    >>>
    >>> db = DatabaseSpec.from_json_file("schema.json")
    >>> users = db.get_table_by_alias("users")
    >>> app = create_app([GenericRouter(InMemoryDAO(users), users)])
"""

from tablerest.runtime.app_factory import create_app
from tablerest.runtime.capability import CAPABILITIES, DaoOperations, has_method
from tablerest.runtime.config import TableRestConfig, load_config
from tablerest.runtime.exception_handlers import register_exception_handlers
from tablerest.runtime.generic_router import (
    GenericRouter,
    RequestContext,
    Responder,
    report_not_found,
)
from tablerest.runtime.identifiers import reconcile_body, resolve_id, resolve_parent_id
from tablerest.runtime.logging import get_logger, setup_logging
from tablerest.runtime.memory_dao import InMemoryDAO
from tablerest.runtime.route_generator import RouteGenerator

__all__ = [
    # Dispatch
    "GenericRouter",
    "RequestContext",
    "Responder",
    "report_not_found",
    # Capabilities
    "CAPABILITIES",
    "DaoOperations",
    "has_method",
    # Identifiers
    "resolve_id",
    "resolve_parent_id",
    "reconcile_body",
    # DAO
    "InMemoryDAO",
    # HTTP
    "RouteGenerator",
    "create_app",
    "register_exception_handlers",
    # Config / logging
    "TableRestConfig",
    "load_config",
    "setup_logging",
    "get_logger",
]
