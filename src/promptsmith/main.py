from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from promptsmith import __version__
from promptsmith.api import api_router
from promptsmith.core.config import get_settings
from promptsmith.core.logging import configure_logging
from promptsmith.core.middleware import RequestIdMiddleware
from promptsmith.providers.base import ConnectionPool
from promptsmith.providers.manager import ClientManager
from promptsmith.registry.models import ModelRegistry
from promptsmith.services.ai_service import AIService

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(level=settings.promptsmith_log_level)
    log.info("app.start", extra={"env": settings.promptsmith_env})

    registry = ModelRegistry.from_settings(settings)
    if registry.degraded:
        log.warning("app.models_degraded", extra={"error": registry.load_error})
    pool = ConnectionPool(
        timeout=httpx.Timeout(
            settings.provider_timeout_seconds,
            connect=settings.provider_connect_timeout_seconds,
        )
    )
    manager = ClientManager(registry, pool=pool)
    app.state.model_registry = registry
    app.state.client_manager = manager
    app.state.ai_service = AIService(registry, manager)
    yield
    await manager.aclose()
    log.info("app.stop")


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"{where}: {message}" if where else message},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Promptsmith", version=__version__, lifespan=lifespan)
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.include_router(api_router)
    return app


app = create_app()
