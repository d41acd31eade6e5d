from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.structured_logging import LoggerFactory, setup_logging
from .middleware.request_response import RequestResponseMiddleware
from .models.exceptions import (
    BrandGenieException,
    EXCEPTION_HANDLERS,
    to_http_exception
)
from .routers import generate, health, wizard
from .services.session_store import SessionStore

setup_logging(settings.log_level)
logger = LoggerFactory.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan handler owning the wizard session store."""
    app.state.sessions = SessionStore()
    logger.info("Brand Genie API started", environment=settings.service_env)

    yield

    # Shutdown: cancel any generation still running for live sessions
    app.state.sessions.close()
    logger.info("Shutdown event completed")


app = FastAPI(
    title=settings.service_name,
    description="Brand Genie API - AI-assisted brand kit wizard",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestResponseMiddleware)

origins = [o.strip() for o in (settings.cors_allow_origins or "").split(",") if o.strip()]
if not origins:
    # Default: wildcard in dev for tests; restrict in production
    origins = [] if settings.is_production else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-Processing-Time-Ms", "Content-Disposition"],
)


@app.exception_handler(BrandGenieException)
async def brand_genie_exception_handler(request: Request, exc: BrandGenieException):
    """Handle custom Brand Genie exceptions."""
    # Check if we have a specific handler for this exception type
    for exc_type, handler in EXCEPTION_HANDLERS.items():
        if isinstance(exc, exc_type):
            http_exc = handler(exc)
            return JSONResponse(
                status_code=http_exc.status_code,
                content=http_exc.detail
            )

    http_exc = to_http_exception(exc, status_code=500)
    return JSONResponse(
        status_code=http_exc.status_code,
        content=http_exc.detail
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.exception(
        "Unhandled exception occurred",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
    )

    message = "An unexpected error occurred while processing your request"
    if not settings.is_production:
        message = f"{message}: {exc}"
    return JSONResponse(
        status_code=500,
        content={"error": "InternalServerError", "message": message, "request_id": request_id},
    )


app.include_router(health.router)
app.include_router(wizard.router)
app.include_router(generate.router)
