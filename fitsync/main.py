import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fitsync.exceptions.handlers import (
    application_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from fitsync.exceptions.errors import ApplicationException
from fitsync.database.connection import Database
from fitsync.api.v1.routes import user_router, health_router, bluetooth_router
from fitsync.middlewares.clerk_auth import ClerkAuthMiddleware, whitelisted_routes
from fitsync.core.config import settings
from fitsync.core.logger import get_logger

logger = get_logger("fitsync-backend")

# Enhanced Swagger configuration for development
swagger_ui_parameters = {
    "deepLinking": True,
    "displayRequestDuration": True,
    "tryItOutEnabled": True,
    "filter": True,
}

if settings.IS_DEVELOPMENT:
    swagger_ui_parameters["persistAuthorization"] = True


def create_app(database: Database = None, enable_auth: bool = True) -> FastAPI:
    """Build the API around an explicit storage handle."""
    database = database or Database.from_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FitSync API is starting...")
        try:
            await database.create_all()
            logger.info("Application database tables ensured.")
        except Exception as e:
            logger.error(f"Failed to initialize application: {e}")
            raise e

        yield

        logger.info("FitSync API is shutting down...")
        await database.dispose()

    app = FastAPI(
        title="FitSync Backend",
        version="1.0.0",
        lifespan=lifespan,
        description="""
        Device registry and health-data sync API.

        ## Authentication

        Uses Clerk JWT tokens. Include your JWT token in the Authorization header:
        ```
        Authorization: Bearer <your-jwt-token>
        ```
        """,
        swagger_ui_parameters=swagger_ui_parameters,
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if enable_auth:
        app.add_middleware(
            ClerkAuthMiddleware,
            whitelisted_routes=whitelisted_routes
        )

    # Include API routers
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(user_router, prefix="/api/v1")
    app.include_router(bluetooth_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "FitSync Backend API",
            "docs": "/docs",
            "development_mode": settings.IS_DEVELOPMENT,
            "version": "1.0.0"
        }

    # Exception handlers
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app


if __name__ == "__main__":
    uvicorn.run(
        "fitsync.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=8000,
        reload=settings.IS_DEVELOPMENT,
        limit_concurrency=20,
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30
    )
