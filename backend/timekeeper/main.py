# main.py
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timekeeper.api.endpoints import health
from timekeeper.api.endpoints.user import account
from timekeeper.api.endpoints.web import projects, sessions, tasks
from timekeeper.core.config import settings
from timekeeper.core.exceptions import TimekeeperError
from timekeeper.core.logging import configure_logging
from timekeeper.db.mongo import close_mongo_connection, connect_to_mongo

configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON or settings.is_production)
logger = structlog.get_logger()


# [lifespan] DB connect / disconnect
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("starting", environment=settings.ENVIRONMENT, store=settings.STORE_BACKEND)
    if settings.STORE_BACKEND == "mongo":
        await connect_to_mongo()
    yield
    if settings.STORE_BACKEND == "mongo":
        await close_mongo_connection()
    logger.info("stopped")


app = FastAPI(title="Timekeeper Backend", lifespan=lifespan)

# --- middleware ---

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
    response = await call_next(request)
    logger.info(
        "request_completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


# --- error mapping: one HTTP status per error kind ---

@app.exception_handler(TimekeeperError)
async def timekeeper_error_handler(request: Request, exc: TimekeeperError):
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_rejected", error=type(exc).__name__, detail=exc.message, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # malformed bodies (unknown enum literal, bad date, blank required field) are client errors
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    logger.info("request_invalid", errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": errors})


@app.get("/")
async def read_root():
    return {"message": "Backend is running!"}


app.include_router(health.router)
app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(sessions.router)
app.include_router(account.router)
