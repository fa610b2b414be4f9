"""
Status Sheet - Main Application Entry Point
Project status sheets with milestone-driven duration and health tracking
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from statussheet.core.config import get_settings
from statussheet.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Status Sheet in {settings.ENVIRONMENT} mode...")

    # Initialize database if needed
    if settings.ENVIRONMENT == "local":
        from statussheet.infrastructure.local.database import init_db
        await init_db()

    # Start background scheduler for nightly recalculation
    from statussheet.services.background_scheduler import (
        start_background_scheduler,
        stop_background_scheduler,
    )
    await start_background_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down Status Sheet...")
    await stop_background_scheduler()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Status Sheet",
        description="Project status sheets with automatic health classification",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from statussheet.api import admin, ai, milestones, projects

    app.include_router(projects.router, prefix="/api")
    app.include_router(milestones.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")
    app.include_router(ai.router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
