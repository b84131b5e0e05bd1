"""Entry point for the browser-to-SIP calling service."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import twilio_routes
from api.routes import router as api_router
from config.settings import Settings, load_settings
from voice.errors import ConfigurationError, DialerError
from voice.tokens import TokenIssuer
from web.page import STATIC_DIR

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _voice_url_hint(settings: Settings) -> str:
    base = (settings.public_base_url or "http://your-domain").rstrip("/")
    return f"{base}{settings.webhook_route}"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit, immutable configuration.

    Without ``settings`` the environment is read here, so a missing variable raises
    ``ConfigurationError`` before any socket is bound.
    """

    if settings is None:
        settings = load_settings()

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        LOGGER.info("SIP calling service started")
        LOGGER.info("Webhook endpoint: %s", settings.webhook_route)
        LOGGER.info("Configure your TwiML App Voice URL to: %s", _voice_url_hint(settings))
        yield

    app = FastAPI(
        title="SIP Dialer",
        description="Places browser-originated Twilio Voice calls to a fixed SIP endpoint.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_issuer = TokenIssuer.from_settings(settings)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        LOGGER.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(DialerError)
    async def dialer_error_handler(request: Request, exc: DialerError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(StarletteHTTPException)
    async def unmatched_route_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)

        body = await request.body()
        LOGGER.warning(
            "Unhandled request: %s %s headers=%s body=%s",
            request.method,
            request.url.path,
            dict(request.headers),
            body.decode("utf-8", errors="replace"),
        )
        return JSONResponse(
            status_code=404,
            content={"error": "Not found", "method": request.method, "path": request.url.path},
        )

    app.include_router(api_router)
    app.include_router(twilio_routes.build_router(settings.webhook_path))
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    if settings.voice_sdk_dir.is_dir():
        app.mount("/twilio-sdk", StaticFiles(directory=settings.voice_sdk_dir), name="twilio-sdk")
    else:
        LOGGER.warning(
            "Twilio Voice SDK directory %s not found; /twilio-sdk will not be served",
            settings.voice_sdk_dir,
        )

    return app


def run() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level="INFO", format=LOG_FORMAT)
        LOGGER.error("%s Please check your .env file.", exc.detail)
        sys.exit(1)

    app = create_app(settings)
    LOGGER.info("Server running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
