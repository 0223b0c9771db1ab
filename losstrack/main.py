"""
FastAPI application for the loss tracker.

To run: uvicorn losstrack.main:app --reload
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1 import api_router
from .config import settings
from .db import close_db, get_engine, init_db
from .error_handlers import register_exception_handlers
from .logging_config import get_logger
from .middleware import RequestLoggingMiddleware
from .reasons import ReasonService
from .store import SqlStore

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    engine = get_engine()
    init_db(engine)
    ReasonService(SqlStore(engine)).seed_default_reasons()
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Inventory loss tracking - fixed-width product import and per-reason export",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health")
def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "losstrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
