"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from config.settings import settings
from src.api.routes import demos, health, hooks, leads, public
from src.api.routes.public import limiter
from src.store.client import data_clients
from src.utils.errors import DemoServiceError
from src.utils.logger import get_logger

logger = get_logger("app")


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a Retry-After hint."""
    logger.warning("rate_limit_exceeded", path=request.url.path)
    retry_after = getattr(exc, "retry_after", 60)
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Please slow down."},
        headers={"Retry-After": str(retry_after)},
    )


async def demo_service_error_handler(request: Request, exc: DemoServiceError) -> JSONResponse:
    """Translate service errors into JSON responses carrying their status."""
    if exc.status >= 500:
        logger.error("request_failed", path=request.url.path, **exc.to_dict())
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.status, error=exc.message)
    return JSONResponse(status_code=exc.status, content={"detail": exc.message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("app_starting", database_configured=data_clients.is_configured())
    yield
    logger.info("app_shutting_down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Interactive Demo API",
        description="Demo publishing, public viewing and lead capture",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(DemoServiceError, demo_service_error_handler)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(demos.router, prefix="/api", tags=["demos"])
    app.include_router(leads.router, prefix="/api", tags=["leads"])
    app.include_router(public.router, prefix="/api", tags=["public"])
    app.include_router(hooks.router, prefix="/api", tags=["hooks"])

    return app


# Create app instance for uvicorn
app = create_app()
