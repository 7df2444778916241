import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from billtracker.config import get_settings
from billtracker.infrastructure.database import engine, initialize_database
from billtracker.infrastructure.notifications import SseConnectionRegistry
from billtracker.infrastructure.scheduler import ReminderScheduler
from billtracker.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database and the daily job, then release them on shutdown."""

    settings = get_settings()
    initialize_database()

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = ReminderScheduler(app.state.sse_registry, settings=settings)
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        scheduler.shutdown()
    app.state.sse_registry.close_all()
    engine.dispose()


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error while handling %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="BillTracker Notifications", lifespan=lifespan)
    app.state.sse_registry = SseConnectionRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    register_routes(app)
    return app


app = create_app()
