"""App factory for serving generic routers over HTTP."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from fastapi import FastAPI

from tablerest.runtime.config import TableRestConfig
from tablerest.runtime.exception_handlers import register_exception_handlers
from tablerest.runtime.generic_router import GenericRouter
from tablerest.runtime.logging import get_logger, setup_logging
from tablerest.runtime.route_generator import RouteGenerator

logger = get_logger("App")


def create_app(
    routers: Iterable[GenericRouter],
    config: TableRestConfig | None = None,
    project_root: Path | None = None,
) -> FastAPI:
    """
    Create a FastAPI application exposing the given routers.

    Args:
        routers: One GenericRouter per exposed table
        config: Runtime configuration (defaults to TableRestConfig())
        project_root: Base for a relative log directory (default: cwd)

    Returns:
        FastAPI application

    Example:
        >>> users = db.get_table_by_alias("users")
        >>> app = create_app([GenericRouter(InMemoryDAO(users), users)])
        >>> # Run with uvicorn: uvicorn mymodule:app
    """
    config = config or TableRestConfig()
    setup_logging(config.log_level, config.get_log_dir(project_root or Path.cwd()))

    routers = list(routers)
    app = FastAPI(title=config.title)
    register_exception_handlers(app)

    generator = RouteGenerator(config)
    app.include_router(generator.generate_all_routes(routers))

    logger.info(f"Serving {len(routers)} table(s): {', '.join(r.table.alias for r in routers)}")
    return app
