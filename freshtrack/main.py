from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from freshtrack.api.v1 import api_router
from freshtrack.core.config import settings
from freshtrack.core.database import Database
from freshtrack.dao import CategoryDao, ProductDao
from freshtrack.middleware.error_handler import freshtrack_exception_handler
from freshtrack.middleware.logging import configure_logging
from freshtrack.repositories.sql import SqlCategoryRepository, SqlProductRepository
from freshtrack.tasks.scheduler import get_scheduler_status, start_scheduler, stop_scheduler
from freshtrack.utils.exceptions import FreshTrackError

logger = logging.getLogger(__name__)


def create_app(
    database: Optional[Database] = None, enable_scheduler: bool = True
) -> FastAPI:
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting FreshTrack...")
        await database.open()

        app.state.database = database
        app.state.product_repository = SqlProductRepository(ProductDao(database))
        app.state.category_repository = SqlCategoryRepository(CategoryDao(database))

        if enable_scheduler:
            start_scheduler(app.state.product_repository)

        yield

        logger.info("Stopping FreshTrack...")
        if enable_scheduler:
            stop_scheduler()
        await database.close()

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.include_router(api_router, prefix="/api/v1")
    app.add_exception_handler(FreshTrackError, freshtrack_exception_handler)

    @app.get("/")
    async def root():
        return {"message": settings.APP_NAME, "version": settings.VERSION, "docs": "/docs"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "scheduler": get_scheduler_status()}

    return app


configure_logging()
app = create_app()
