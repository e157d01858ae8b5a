# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
import os
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pytz import timezone
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException

from lahap.models import database
from lahap.models import *  # registers all models

from lahap.routers import (
    account_router,
    article_router,
    children_router,
    forum_router,
    healthz_router,
    meal_log_router,
    recipe_router,
    report_router,
    search_router,
)
from lahap.utils.errors import LahapError
from lahap.utils.rate_limit_utils import limiter
from lahap.utils.schedulers.run_all_cleanups import run_all_cleanups

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Jakarta")
SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "true").lower() != "false"


# Create DB tables in one go
database.Base.metadata.create_all(bind=database.engine)

# Scheduler setup
scheduler = BackgroundScheduler(job_defaults={"misfire_grace_time": 60})


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not SCHEDULER_ENABLED:
        logger.info("⏸️ Scheduler disabled, cleanup jobs will not run")
        yield
        return

    # 🕛 Clean every day at 2 AM
    scheduler.add_job(run_all_cleanups, "cron", hour=2, minute=0, timezone=timezone(APP_TIMEZONE))

    scheduler.start()
    yield
    scheduler.shutdown()


# Create FastAPI app with lifespan
app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="Lahap Child Feeding Tracker API",
    description="Children, meal logs, feeding reports, forum and content library",
    version="1.0"
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Include routers
app.include_router(children_router.router)
app.include_router(meal_log_router.router)
app.include_router(report_router.router)
app.include_router(forum_router.router)
app.include_router(recipe_router.router)
app.include_router(article_router.router)
app.include_router(search_router.router)
app.include_router(account_router.router)
app.include_router(healthz_router.router)


# ---------------------- ADDING EXCEPTION HANDLER ----------------------
@app.exception_handler(LahapError)
async def lahap_error_handler(request, exc: LahapError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request, exc):
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests. Please slow down."}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc: Exception):
    logger.error(f"🛑 Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def read_root():
    return {"message": "Welcome to Lahap - child feeding tracker backend Live"}


@app.get("/health", tags=["Infra"])
def health_check():
    return {"status": "ok"}
