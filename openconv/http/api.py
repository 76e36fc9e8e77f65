from __future__ import annotations

"""FastAPI application factory.

The HTTP surface is how a presentation layer reads the derived views
(timeline, member groups, counters) and triggers the named store actions.
Every module under :mod:`openconv.http.routes` exposes an ``APIRouter`` named
``router`` which ``create_app`` registers automatically.
"""

from importlib import import_module
import pkgutil

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

import structlog

from ..context import AppContext
from .ws import ConnectionManager, store_events_endpoint


logger = structlog.get_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request and whether it succeeds or fails."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        logger.info("request.start", method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
            logger.info(
                "request.success",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            return response
        except Exception as exc:  # pragma: no cover - defensive logging
            logger.exception(
                "request.failure",
                method=request.method,
                path=request.url.path,
                error=str(exc),
            )
            raise


def create_app(ctx: AppContext) -> FastAPI:
    """Create the FastAPI application serving ``ctx``."""

    app = FastAPI(title="OpenConv state engine")
    app.state.ctx = ctx
    manager = ConnectionManager()
    manager.attach(ctx.store)
    app.state.ws_manager = manager
    app.add_middleware(RequestLoggingMiddleware)
    app.add_api_websocket_route("/ws/store", store_events_endpoint)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    from . import routes as routes_pkg

    for _, module_name, _ in pkgutil.iter_modules(routes_pkg.__path__):
        module = import_module(f"{routes_pkg.__name__}.{module_name}")
        router = getattr(module, "router", None)
        if router is not None:
            app.include_router(router)

    return app
