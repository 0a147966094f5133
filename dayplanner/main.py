# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pytz import utc
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from dayplanner.context import PlannerContext, build_context
from dayplanner.models.database import create_tables
from dayplanner.routers import (
    analytics_router,
    billing_router,
    healthz_router,
    jobs_router,
    notifications_router,
    preferences_router,
    suggestion_router,
    task_router,
)
from dayplanner.utils.errors import PlannerError
from dayplanner.utils.rate_limit_utils import limiter
from dayplanner.utils.schedulers.cron.midnight_rollover_cron import midnight_rollover_cron
from dayplanner.utils.schedulers.cron.reminder_dispatch_cron import reminder_dispatch_cron
from dayplanner.utils.schedulers.cron.weekly_analytics_cron import weekly_analytics_cron

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def register_jobs(scheduler: BackgroundScheduler, context: PlannerContext) -> None:
    # 🕛 Every quarter hour (zones with :30 and :45 offsets); users are gated on local midnight
    scheduler.add_job(midnight_rollover_cron, "cron", minute="*/15", args=[context], timezone=utc,
                      id="midnight_rollover", replace_existing=True)

    # ⏰ Reminder scan every minute
    scheduler.add_job(reminder_dispatch_cron, "cron", minute="*", args=[context], timezone=utc,
                      id="reminder_dispatch", replace_existing=True)

    # 📊 Monday 09:00 UTC
    scheduler.add_job(weekly_analytics_cron, "cron", day_of_week="mon", hour=9, minute=0,
                      args=[context], timezone=utc, id="weekly_analytics", replace_existing=True)


def create_app(context: PlannerContext = None) -> FastAPI:
    context = context or build_context()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context.engine is not None:
            create_tables(context.engine)

        scheduler = None
        if context.settings.SCHEDULER_ENABLED:
            scheduler = BackgroundScheduler(job_defaults={"misfire_grace_time": 60, "max_instances": 1})
            register_jobs(scheduler, context)
            scheduler.start()
            logger.info("⏱️ Scheduler started")
        yield
        if scheduler:
            scheduler.shutdown()

    app = FastAPI(
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        title="DayPlanner API",
        description="Two-day task planner with reminders, suggestions and premium billing",
        version="1.0",
    )

    app.state.context = context
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(task_router.router)
    app.include_router(preferences_router.router)
    app.include_router(suggestion_router.router)
    app.include_router(notifications_router.router)
    app.include_router(jobs_router.router)
    app.include_router(analytics_router.router)
    app.include_router(billing_router.router)
    app.include_router(healthz_router.router)

    # ---------------------- EXCEPTION HANDLERS ----------------------
    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please slow down."}
        )

    @app.exception_handler(PlannerError)
    async def planner_error_handler(request: Request, exc: PlannerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.get("/")
    def read_root():
        return {"message": "Welcome to DayPlanner backend Live"}

    @app.get("/health", tags=["Infra"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()
