"""
Tablebook - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from tablebook import __version__
from tablebook.api import callfluent, diagnostics, reservations
from tablebook.api.deps import get_backend
from tablebook.config import settings
from tablebook.errors import BackendUnavailableError, TablebookError
from tablebook.integrations.callfluent import CallFluentClient
from tablebook.storage.base import ReservationBackend
from tablebook.storage.selector import select_backend
from tablebook.validation import describe_validation_errors
from tablebook.webhooks import callfluent as callfluent_webhook


def configure_logging() -> None:
    """Structured logging on top of stdlib logging"""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())
    
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Tablebook API", version=__version__)
    
    app.state.backend = await select_backend(settings)
    app.state.notifier = CallFluentClient.from_settings(settings)
    if app.state.notifier is None:
        logger.info("CallFluent not configured; outbound calls disabled")
    
    yield
    
    logger.info("Shutting down Tablebook API")
    await app.state.backend.close()
    if app.state.notifier is not None:
        await app.state.notifier.close()


# Create FastAPI application
app = FastAPI(
    title="Tablebook",
    description="Restaurant reservation admin API with CallFluent AI phone integration",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TablebookError)
async def tablebook_error_handler(request: Request, exc: TablebookError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    message = describe_validation_errors(exc.errors())
    logger.info("Rejected request body", path=request.url.path, error=message)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": __version__}


@app.get("/health/ready")
async def ready(backend: ReservationBackend = Depends(get_backend)):
    """Readiness check with storage verification"""
    
    try:
        await backend.probe()
        storage = "ok"
    except BackendUnavailableError as e:
        storage = f"failed: {e.message}"
    
    return {
        "status": "ready" if storage == "ok" else "not_ready",
        "checks": {"storage": storage, "backend": backend.name},
    }


# Include API routers
app.include_router(reservations.router, prefix="/api/reservations", tags=["Reservations"])
app.include_router(callfluent.router, prefix="/api/callfluent", tags=["CallFluent"])
app.include_router(diagnostics.router, prefix="/api/diagnostics", tags=["Diagnostics"])

# Include webhook routers
app.include_router(callfluent_webhook.router, prefix="/api/webhook", tags=["Webhooks"])


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "tablebook.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
