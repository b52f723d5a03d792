from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from anyio import to_thread
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from petshelter import db
from petshelter.config import DEFAULT_JWT_SECRET, AppInfo, Settings, get_settings
from petshelter.core.logging import get_logger, setup_logging
from petshelter.core.runtime_state import set_scheduler_active
import petshelter.models  # registers the tables
from petshelter.routers import get_api_router
from petshelter.services.monitor_worker import ActivityMonitor
from petshelter.services.scheduler_lock import (
    refresh_scheduler_lock,
    release_scheduler_lock,
    try_acquire_scheduler_lock,
)
from petshelter.utils.errors import error_response

logger = get_logger(__name__)
scheduler: AsyncIOScheduler | None = None
monitor: ActivityMonitor | None = None
DEV_ENVS = {"dev", "local", "test"}
HEARTBEAT_JOB_ID = "scheduler-lock-heartbeat"
HEARTBEAT_INTERVAL_SECONDS = 60
MONITOR_DRAIN_TIMEOUT_SECONDS = 30


def _configure_middlewares(fastapi_app: FastAPI) -> None:
    """Configure middleware using a fresh snapshot of the settings."""

    runtime_settings = get_settings()
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=runtime_settings.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    if runtime_settings.PROMETHEUS_ENABLED:
        from starlette_exporter import PrometheusMiddleware, handle_metrics

        fastapi_app.add_middleware(PrometheusMiddleware)
        fastapi_app.add_route("/metrics", handle_metrics)

    if runtime_settings.SENTRY_DSN:
        import sentry_sdk

        sentry_sdk.init(dsn=runtime_settings.SENTRY_DSN, traces_sample_rate=0.2)


def _assert_jwt_secret(settings: Settings) -> None:
    """Fail fast when the default JWT secret would sign tokens outside dev."""

    if settings.JWT_SECRET != DEFAULT_JWT_SECRET:
        return
    if settings.app_env.lower() not in DEV_ENVS:
        logger.error("JWT_SECRET is unset; configure it before startup.", extra={"env": settings.app_env})
        raise RuntimeError("Missing JWT_SECRET in non-dev environment.")
    logger.warning("Using the default JWT secret; allowed in dev only.", extra={"env": settings.app_env})


def _start_monitor(settings: Settings) -> bool:
    """Start the scheduler and the activity monitor when this runner holds the lock."""

    global scheduler, monitor
    if not try_acquire_scheduler_lock():
        logger.warning(
            "Activity monitor disabled because the scheduler lock is held by another instance.",
            extra={"env": settings.app_env},
        )
        return False

    scheduler = AsyncIOScheduler()
    scheduler.start()
    monitor = ActivityMonitor.from_settings(settings)
    monitor.start(scheduler)
    scheduler.add_job(
        _heartbeat,
        "interval",
        seconds=HEARTBEAT_INTERVAL_SECONDS,
        id=HEARTBEAT_JOB_ID,
        replace_existing=True,
    )
    set_scheduler_active(True)
    return True


def _heartbeat() -> None:
    """Extend the lease; stand the monitor down if another replica took it over."""

    if refresh_scheduler_lock():
        return
    logger.warning("Scheduler lock lost to another instance; stopping the activity monitor.")
    if monitor:
        monitor.stop()
    if scheduler and scheduler.get_job(HEARTBEAT_JOB_ID) is not None:
        scheduler.remove_job(HEARTBEAT_JOB_ID)
    set_scheduler_active(False)


async def _stop_monitor(lock_acquired: bool) -> None:
    """Remove the jobs, wait for a running cycle, then give the lease back."""

    global scheduler, monitor
    if monitor:
        monitor.stop()
        # The executor cancels its futures on shutdown without joining the worker thread.
        drained = await to_thread.run_sync(monitor.drain, MONITOR_DRAIN_TIMEOUT_SECONDS)
        if not drained:
            logger.warning(
                "Activity monitor cycle still running after %ss; shutting down anyway.",
                MONITOR_DRAIN_TIMEOUT_SECONDS,
            )
        monitor = None
    if scheduler:
        scheduler.shutdown()
        scheduler = None
    if lock_acquired:
        release_scheduler_lock()
    set_scheduler_active(False)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    settings = get_settings()
    logger.info("Application startup", extra={"env": settings.app_env})
    _assert_jwt_secret(settings)

    db.init_engine()
    if settings.ALLOW_DB_CREATE_ALL and settings.app_env.lower() in DEV_ENVS:
        logger.warning(
            "Running Base.metadata.create_all() because APP_ENV=%s and ALLOW_DB_CREATE_ALL=True",
            settings.app_env,
        )
        db.create_all()
    else:
        logger.info(
            "Skipping create_all(); use Alembic migrations. APP_ENV=%s, ALLOW_DB_CREATE_ALL=%s",
            settings.app_env,
            settings.ALLOW_DB_CREATE_ALL,
        )

    # Only one replica runs the monitor; the DB lease elects it.
    set_scheduler_active(False)
    lock_acquired = _start_monitor(settings) if settings.MONITOR_ENABLED else False
    try:
        yield
    finally:
        await _stop_monitor(lock_acquired)
        db.close_engine()
        logger.info("Application shutdown", extra={"env": settings.app_env})


app_info = AppInfo()

app = FastAPI(title=app_info.name, version=app_info.version, lifespan=lifespan)

_configure_middlewares(app)
app.include_router(get_api_router())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", exc_info=exc)
    payload = error_response("INTERNAL_SERVER_ERROR", "An unexpected error occurred.")
    return JSONResponse(status_code=500, content=payload)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        content: dict[str, Any] = detail
    else:
        content = error_response("HTTP_ERROR", str(detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


__all__ = ["app"]
