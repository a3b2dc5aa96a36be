import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from loguru import logger

from fitplan.api.errors import register_error_handlers
from fitplan.api.profile import router as profile_router
from fitplan.api.recommendations import router as recommendations_router
from fitplan.api.schedule import router as schedule_router
from fitplan.api.streak import router as streak_router
from fitplan.config.settings import settings
from fitplan.core.logger import setup_logger
from fitplan.db.models import Base
from fitplan.db.session import get_engine as get_db_engine

# Initialize logger
setup_logger(level=settings.log_level, log_file=settings.log_file, json_logs=settings.log_json)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Ensure database tables exist before serving requests.

    Note: FastAPI requires async for lifespan context manager,
    even if no await operations are used.
    """
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_db_engine())
    logger.info("Database tables verified")

    await asyncio.sleep(0)
    yield

    logger.info("FitPlan shutting down")


app = FastAPI(title="FitPlan", lifespan=lifespan)

register_error_handlers(app)
app.include_router(profile_router)
app.include_router(recommendations_router)
app.include_router(schedule_router)
app.include_router(streak_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
