"""
Storyloom - FastAPI Backend
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI

from storyloom.config import settings
from storyloom.context import ServiceContext, build_context
from storyloom.database.db import init_db
from storyloom.logging import setup_logging, get_logger
from storyloom.routers import chapters, memory

logger = get_logger('main')


def create_app(context: ServiceContext | None = None) -> FastAPI:
    """
    Build the API.

    :param context: Prebuilt service context; the production context is built at startup when omitted
    :type context: ServiceContext | None
    :return: Configured application
    :rtype: FastAPI
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active_settings = context.settings if context else settings
        setup_logging(active_settings.DEBUG)
        logger.info("Starting Storyloom API")

        ctx = context or build_context(active_settings)
        await init_db(ctx.settings.DATABASE_PATH)
        logger.info("Database initialized")

        app.state.context = ctx
        logger.info("Services initialized")

        yield

        await ctx.runner.drain()
        logger.info("Shutting down application")

    app = FastAPI(
        title="Storyloom API",
        description="Layered narrative memory for long-form serialized fiction",
        version="1.0.0",
        lifespan=lifespan
    )

    app.include_router(memory.router, prefix="/api/memory", tags=["Memory"])
    app.include_router(chapters.router, prefix="/api/chapters", tags=["Chapters"])

    @app.get("/health")
    async def health_check():
        ctx = getattr(app.state, "context", None)
        return {
            "status": "healthy",
            "service": "storyloom",
            "novel": ctx.novel_config.basic_settings.title if ctx else None,
        }

    @app.get("/")
    async def root():
        return {
            "name": "Storyloom API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app
