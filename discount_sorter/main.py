"""
Discount Sorter - Main Application
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .processor import CollectionLocks
from .routes import debug_router, reorder_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting Discount Sorter for {settings.shop or '<unset shop>'}...")
    missing = settings.missing_connection_settings()
    if missing:
        logger.warning(f"Missing settings, reorder requests will fail: {missing}")
    logger.info("Application ready")
    yield
    logger.info("Shutting down...")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 instead of 422."""
    messages = [
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body') or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "collectionId is required in a JSON body", "errors": messages},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around an explicit settings object."""
    if settings is None:
        settings = Settings()

    configure_logging(settings.log_level)

    app = FastAPI(
        title="Discount Sorter",
        description="Sort Shopify collections by discount percentage",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.collection_locks = CollectionLocks()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["X-Requested-With", "Content-Type", settings.secret_header],
        max_age=86400,
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    app.include_router(reorder_router)
    app.include_router(debug_router)

    @app.get("/health")
    async def health():
        """Health check endpoint (no auth required)."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "discount_sorter.main:app",
        host=app.state.settings.host,
        port=app.state.settings.port,
        reload=True
    )
