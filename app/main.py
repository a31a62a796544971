"""FastAPI application entry point."""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.products import router as products_router
from app.config import Settings, get_settings
from app.database import Database
from app.exceptions import (
    ProductNotFoundError,
    ProductValidationError,
    StoreError,
    http_exception_handler,
    product_not_found_exception_handler,
    product_validation_exception_handler,
    request_validation_exception_handler,
    store_exception_handler,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Log to the console and, if configured, to a file."""
    handlers = [logging.StreamHandler()]  # Console output
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))  # File output

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Set specific log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def create_app(
    settings: Optional[Settings] = None, database: Optional[Database] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment when omitted
        database: Database to serve from; built from ``settings`` on startup
            when omitted
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect to the database on startup and release it on shutdown."""
        db = database or Database(settings.sqlalchemy_database_url)
        try:
            db.connect()
        except Exception:
            logger.exception("Error al conectar a la base de datos")
            raise
        app.state.database = db
        logger.info(f"Products API started in {settings.app_env} mode")

        try:
            yield
        finally:
            db.close()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and duration of every request."""
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms"
        )
        return response

    # Added last so it runs first, ahead of CORS and routing
    @app.middleware("http")
    async def reject_foreign_origins(request: Request, call_next):
        """Refuse browser requests coming from any origin but the frontend."""
        origin = request.headers.get("origin")
        if origin is not None and origin != settings.frontend_url:
            logger.warning(f"Rejected {request.method} {request.url.path} from origin {origin}")
            return JSONResponse(status_code=403, content={"error": "Error de CORS"})
        return await call_next(request)

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ProductValidationError, product_validation_exception_handler)
    app.add_exception_handler(ProductNotFoundError, product_not_found_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)

    # Include routers
    app.include_router(products_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


configure_logging(get_settings())
app = create_app()
