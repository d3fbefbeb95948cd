"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from automator.api.routes import events, rules, scheduled
from automator.core.config import Settings, get_settings
from automator.core.logging import get_logger, setup_logging
from automator.engine.engine import AutomationEngine
from automator.handlers.base import ActionHandlers
from automator.handlers.email import SmtpEmailSender
from automator.handlers.webhook import HttpWebhookSender

logger = get_logger(__name__)


def build_engine(settings: Settings) -> AutomationEngine:
    """Build an engine with the handlers this service can provide itself.

    Task, schedule and inventory handlers belong to the business record
    store and are not wired here; their actions report a skip.
    """
    email = SmtpEmailSender(settings)
    handlers = ActionHandlers(
        email=email if email.configured else None,
        webhook=HttpWebhookSender(settings),
    )
    return AutomationEngine(handlers=handlers, settings=settings)


def create_app(engine: AutomationEngine | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        engine: Engine to serve; built from settings when omitted
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings)
        logger.info("Starting application")

        app.state.engine = engine or build_engine(settings)
        app.state.engine.start()

        yield

        logger.info("Shutting down application")
        await app.state.engine.shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Business process automation engine",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events.router, prefix="/api/v1")
    app.include_router(rules.router, prefix="/api/v1")
    app.include_router(scheduled.router, prefix="/api/v1")
    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        content = {
            "code": exc.status_code,
            "message": detail if isinstance(detail, str) else "HTTP error",
            "data": None if isinstance(detail, str) else detail,
        }
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "code": 422,
                "message": "Validation error",
                "data": [
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=500,
            content={
                "code": 500,
                "message": "Internal server error",
                "data": str(exc) if settings.debug else None,
            },
        )

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "version": settings.app_version}

    return app


# Application instance for uvicorn
app = create_app()
