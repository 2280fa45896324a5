"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes.stats import router as stats_router
from app.api.routes.task import router as task_router
from app.api.routes.timeline import router as timeline_router
from app.api.schemas.envelope import ErrorResponse
from app.core.config import Settings, settings as default_settings
from app.core.errors import TITLE_REQUIRED_MESSAGE, BalanceBuddyError, TaskNotFoundError
from app.core.logging import configure_logging, install_exception_hooks
from app.db.store import TaskStore
from app.observability.client import init_opik

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found"
INTERNAL_ERROR = "Something went wrong!"


def create_app(store: Optional[TaskStore] = None, app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around a task store.

    Each call gets its own store unless one is passed in, so tests never share
    state with each other or with the module-level ``app``.
    """
    config = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        logger.info("%s ready on port %s", config.app_name, config.port)
        for line in _describe_routes(application):
            logger.info("  %s", line)
        yield
        logger.info("%s shutting down; %s task(s) discarded", config.app_name, len(application.state.task_store))

    application = FastAPI(title=config.app_name, debug=config.debug, lifespan=lifespan)
    application.state.task_store = store if store is not None else TaskStore()

    # Must stay inside CORSMiddleware so 500 envelopes carry CORS headers.
    @application.middleware("http")
    async def assign_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = _error_response(500, INTERNAL_ERROR)
        response.headers["X-Request-ID"] = request_id
        return response

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root() -> str:
        return config.greeting

    application.include_router(task_router)
    application.include_router(timeline_router)
    application.include_router(stats_router)
    _register_exception_handlers(application)
    return application


def _register_exception_handlers(application: FastAPI) -> None:
    @application.exception_handler(BalanceBuddyError)
    async def handle_domain_error(request: Request, exc: BalanceBuddyError) -> JSONResponse:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
        return _error_response(exc.status_code, exc.detail)

    @application.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if any(tuple(err.get("loc", ()))[:1] == ("path",) for err in errors):
            return _error_response(TaskNotFoundError.status_code, TaskNotFoundError.default_detail)
        missing_body = TITLE_REQUIRED_MESSAGE if request.url.path == "/tasks" else "Request body is required"
        message = _validation_message(errors, missing_body=missing_body)
        logger.info("%s %s -> 400 %s", request.method, request.url.path, message)
        return _error_response(400, message)

    @application.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in (404, 405):
            return _error_response(404, ROUTE_NOT_FOUND)
        return _error_response(exc.status_code, str(exc.detail))


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _validation_message(errors: Sequence[Dict[str, Any]], missing_body: str = "Request body is required") -> str:
    if not errors:
        return "Invalid request"
    for err in errors:
        loc = tuple(err.get("loc", ()))
        if len(loc) > 1 and loc[0] == "body" and loc[1] == "title":
            return TITLE_REQUIRED_MESSAGE

    first = errors[0]
    loc = tuple(first.get("loc", ()))
    if loc == ("body",):
        if first.get("type") == "missing":
            return missing_body
        return "Request body must be a JSON object"
    field = ".".join(str(part) for part in loc[1:]) or "request"
    detail = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
    return f"Invalid value for '{field}': {detail}"


def _describe_routes(application: FastAPI) -> List[str]:
    lines = []
    for route in application.routes:
        methods = sorted(getattr(route, "methods", None) or [])
        path = getattr(route, "path", "")
        if not methods or path.startswith(("/docs", "/openapi", "/redoc")):
            continue
        lines.append(f"{'/'.join(m for m in methods if m != 'HEAD'):<7} {path}")
    return lines


def _validate_config(config: Settings) -> None:
    if not (1 <= config.port <= 65535):
        raise ValueError("PORT must be between 1 and 65535")
    if not isinstance(logging.getLevelName(config.log_level.upper()), int):
        raise ValueError(f"LOG_LEVEL {config.log_level!r} is not a logging level")
    if not config.cors_origins:
        raise ValueError("CORS_ORIGINS must list at least one origin")


app = create_app()


def run() -> None:
    configure_logging(log_level=default_settings.log_level)
    install_exception_hooks()
    init_opik()
    try:
        _validate_config(default_settings)
    except ValueError as exc:
        logger.error("Invalid API configuration: %s", exc)
        sys.exit(1)

    logger.info("Starting %s on http://%s:%s", default_settings.app_name, default_settings.host, default_settings.port)
    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":  # pragma: no cover - manual launch
    run()
