from contextlib import asynccontextmanager

import sentry_sdk
import structlog
from fastapi import FastAPI

from signoff_checker.config import settings
from signoff_checker.dependencies import build_orchestrator, get_github_client
from signoff_checker.logger import setup_logging
from signoff_checker.middleware import LoggingMiddleware
from signoff_checker.routes import webhooks_router
from signoff_checker.services import SweepScheduler

logger = structlog.get_logger(__name__)

if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=0.1,
        profiles_sample_rate=0.1,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.debug)

    scheduler = None
    if settings.registration_enabled:
        orchestrator = build_orchestrator(
            get_github_client(), settings.registration()
        )
        scheduler = SweepScheduler(orchestrator, settings.register_interval)
        scheduler.start()
    else:
        logger.info("No organizations configured, automatic registration disabled")

    yield

    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(lifespan=lifespan)
app.add_middleware(LoggingMiddleware)


@app.get("/", tags=["health"])
async def read_root():
    return {"status": "ok"}


app.include_router(webhooks_router)
