"""FastAPI entry point for the signup bridge."""
from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from signup_bridge.config import settings
from signup_bridge.errors import BridgeError
from signup_bridge.models.signup import ErrorResponse, HealthResponse
from signup_bridge.routers import signup
from signup_bridge.services.browserless_service import browserless_service

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
# httpx logs full request URLs at INFO, and the Browserless token rides in the query string.
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

_app: FastAPI | None = None
_app_lock = threading.Lock()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Signup bridge starting (Browserless %s)",
        "configured" if browserless_service.is_configured else "not configured, mock mode",
    )
    yield
    await browserless_service.close()
    logger.info("Signup bridge stopped")


async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message, error=exc.error).model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    logger.warning("Rejected malformed request body: %s", details)
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(message="Invalid request body", error=details).model_dump(),
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Signup Bridge",
        description="Relays signups to a Keela form through Browserless automation",
        version="0.1.0",
        docs_url="/api",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BridgeError, bridge_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(signup.router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(automation_configured=browserless_service.is_configured)

    return app


def get_app() -> FastAPI:
    """Return the process-wide app, building it on first use only."""
    global _app
    if _app is None:
        with _app_lock:
            if _app is None:
                _app = create_app()
                logger.info("Application initialized")
    return _app


if __name__ == "__main__":
    uvicorn.run(
        "signup_bridge.main:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=True,
    )
