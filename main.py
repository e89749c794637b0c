"""
App entrypoint.

- Builds the FastAPI app from explicit Settings (see create_app)
- Loads the question bank once at startup
- Includes the v1 routes under /api/v1
"""
from __future__ import annotations
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pythonjsonlogger.json import JsonFormatter
from starlette.exceptions import HTTPException as StarletteHTTPException

import routers
from config import Settings, get_settings
from service.core import TriviaService

log = logging.getLogger("trivia.app")

_HANDLER_NAME = "trivia-stdout"


def _configure_logging(settings: Settings) -> None:
    """Root logger to stdout; JSON lines when log_format=json."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # create_app may run more than once per process (tests); keep a single handler.
    for h in list(root.handlers):
        if h.get_name() == _HANDLER_NAME:
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        ))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
    root.addHandler(handler)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = get_settings()
    _configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Server is running on http://%s:%d (%s)", settings.host, settings.port, settings.environment)
        for endpoint, what in routers.AVAILABLE_ENDPOINTS.items():
            log.info("  %-32s - %s", endpoint, what)
        yield

    app = FastAPI(
        title="Trivia Gate",
        version=settings.version,
        description="Issues short-lived quiz tokens and serves trivia question sets to holders of a fresh token.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.trivia = TriviaService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(routers.router, prefix="/api/v1")

    @app.get("/", tags=["meta"])
    def root() -> dict:
        return {
            "message": "Trivia Gate API server is running!",
            "endpoints": routers.AVAILABLE_ENDPOINTS,
            "titles": app.state.trivia.bank.titles(),
        }

    @app.exception_handler(routers.ServiceFault)
    async def service_fault_handler(request: Request, exc: routers.ServiceFault) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": exc.message, "details": exc.details})

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 404:
            return await http_exception_handler(request, exc)
        return JSONResponse(
            status_code=404,
            content={"error": "Endpoint not found", "availableEndpoints": routers.AVAILABLE_ENDPOINTS},
        )

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
        log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Something went wrong!", "details": str(exc)})

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
