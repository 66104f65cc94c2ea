from typing import Optional
from fastapi import FastAPI
from contextlib import asynccontextmanager
import structlog

from app.core.config import Settings, get_settings
from app.core.logging import setup_logging
from app.api.api import api_router
from app.api.v1.schemas.common import HealthCheckResponse
from app.core.middleware import AuditLogMiddleware, CORSHeadersMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings: Settings = app.state.settings
    
    # Startup
    setup_logging(settings)
    logger = structlog.get_logger()
    
    logger.info(
        "Starting transactions service",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        storage_configured=bool(settings.URL and settings.ANON_KEY),
    )
    if not settings.URL:
        logger.warning("URL is not set; storage calls will fail")
    
    yield
    
    # Shutdown
    logger.info("Shutting down transactions service")


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    
    settings = settings or get_settings()
    
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Transactions CRUD endpoint backed by Supabase",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    
    # Outermost middleware is added last
    app.add_middleware(AuditLogMiddleware)
    app.add_middleware(CORSHeadersMiddleware)
    
    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)
    
    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthCheckResponse(status="healthy", version=settings.APP_VERSION)
    
    return app


app = create_application()
