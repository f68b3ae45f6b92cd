from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import logging
import os

from pulsa import __version__
from pulsa.core.config import Settings, get_settings
from pulsa.core.firebase_config import initialize_firebase_app
from pulsa.core.database import build_engine, build_session_factory, create_db_and_tables
from pulsa.crud.badge_crud import ensure_badge_catalog
from pulsa.routes import build_api_router

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the API application. The engine and session factory live on app.state,
    so every application (and every test) owns its own database handle.
    """
    app_settings = app_settings or get_settings()
    logging.basicConfig(level=app_settings.LOG_LEVEL)

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        description="API for the Pulsa e-learning platform: course catalog, quizzes, progress, certificates and badges.",
        version=__version__,
    )

    engine = build_engine(app_settings.DATABASE_URL, echo=app_settings.DATABASE_ECHO)
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # --- Event Handlers ---
    @app.on_event("startup")
    async def startup_event():
        logger.info("Application startup...")
        if app_settings.GOOGLE_APPLICATION_CREDENTIALS:
            try:
                initialize_firebase_app(app_settings.GOOGLE_APPLICATION_CREDENTIALS)
            except Exception as e:
                # Authenticated endpoints answer 500 until credentials are fixed
                logger.error(f"Critical error during Firebase initialization on startup: {e}", exc_info=True)
        else:
            logger.warning("GOOGLE_APPLICATION_CREDENTIALS is not set; token verification will fail.")

        # Production schema is managed with Alembic.
        if app_settings.CREATE_TABLES_ON_STARTUP:
            logger.info("Creating database tables if they don't exist (dev mode)...")
            create_db_and_tables(app.state.engine)

        db = app.state.session_factory()
        try:
            ensure_badge_catalog(db)
        except Exception as e:
            logger.error(f"Could not seed the badge catalog: {e}", exc_info=True)
        finally:
            db.close()

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Application shutdown...")
        app.state.engine.dispose()

    # --- Middleware ---
    logger.info(f"Allowed CORS origins: {app_settings.CORS_ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global Error Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception for request {request.method} {request.url}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected internal server error occurred."},
        )

    # --- API Routers ---
    app.include_router(build_api_router(app_settings.API_V1_STR))

    @app.get("/", tags=["Root"])
    async def read_root():
        """
        Root endpoint to check if the API is running.
        """
        return {"message": f"Welcome to the {app_settings.PROJECT_NAME}! Navigate to /docs for API documentation."}

    return app


app = create_app()

# --- Main execution (for development) ---
if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")
    log_level = os.getenv("UVICORN_LOG_LEVEL", "info")

    logger.info(f"Starting Uvicorn server on {host}:{port} with log level {log_level}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)
