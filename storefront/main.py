"""Main FastAPI application"""

from fastapi import FastAPI

from storefront.core.config import settings
from storefront.core.events import lifespan
from storefront.core.exceptions import register_exception_handlers
from storefront.core.middleware import setup_middleware
from storefront.api import api_router
from storefront.api.health import router as health_router

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Storefront API - cart, checkout and order lifecycle",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    setup_middleware(app)
    register_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api")
    app.include_router(health_router, tags=["Health"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/api/docs",
            "health": "/health"
        }

    return app

app = create_app()
