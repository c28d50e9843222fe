# careconnect/main.py

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .database import SessionLocal, init_db
from .errors import ServiceError, error_response
from .routers import appointments, assistants, auth, doctors, feed, requests, users
from .services.dispatch import reconcile_assistant_status

# ────────────────────────────── LOGGING ──────────────────────────────

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ────────────────────────────── LIFESPAN ──────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("CareConnect API starting up")
    init_db()
    db = SessionLocal()
    try:
        fixed = reconcile_assistant_status(db)
    finally:
        db.close()
    if fixed:
        logger.warning("Reconciled status of %d assistant(s) on startup", fixed)
    yield
    logger.info("CareConnect API shutting down")


app = FastAPI(
    title="CareConnect API",
    description="Users, field assistants and doctors: request dispatch, appointments and a small social feed",
    version="1.0.0",
    lifespan=lifespan,
)

# ────────────────────────────── CORS ──────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

# ────────────────────────────── REQUEST LOG ──────────────────────────────


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# ────────────────────────────── ERRORS ──────────────────────────────


@app.exception_handler(ServiceError)
async def handle_service_error(_: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=error_response("VALIDATION_ERROR", "VALIDATION_ERROR", problems or "Invalid request"),
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        content = error_response("NOT_FOUND", "ROUTE_NOT_FOUND", "Route not found")
    elif exc.status_code == 401:
        content = error_response("INVALID_CREDENTIALS", "NOT_AUTHENTICATED", str(exc.detail))
    else:
        content = error_response("HTTP_ERROR", "HTTP_ERROR", str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_response("INTERNAL_ERROR", "INTERNAL_ERROR", "Internal server error"),
    )


# ────────────────────────────── ROUTES ──────────────────────────────


@app.get("/")
def root():
    return {"message": "Welcome to the CareConnect API", "version": app.version, "documentation": "/docs"}


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(assistants.router)
app.include_router(doctors.router)
app.include_router(appointments.router)
app.include_router(requests.router)
app.include_router(feed.router)
