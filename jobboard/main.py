# jobboard/main.py
import logging
import time

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy import text
from sqlalchemy.orm import Session

from jobboard.config import ENV, AUTO_MIGRATE, ALLOWED_ORIGINS, LOG_LEVEL
from jobboard.services.errors import (
    JobBoardError, InvalidFilter, JobValidationError, Unauthenticated, NotFound, RemoteFailure,
)

# -----------
# Logging
# -----------
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("jobboard")

# ----------------------------------------
# DB metadata (DEV ONLY: auto-create tables)
# ----------------------------------------
from jobboard.database import Base, engine, get_db  # noqa: E402
from jobboard import models  # noqa: F401,E402

if ENV == "dev" or AUTO_MIGRATE:
    Base.metadata.create_all(bind=engine)

# -----------
# Routers
# -----------
from jobboard.routes import jobs  # noqa: E402
from jobboard.routes import admin_jobs  # noqa: E402

app = FastAPI(
    title="Job Board API",
    version="1.0.0",
    description="Public job search and authenticated job administration",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,          # must be explicit when credentials=True
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],                    # includes Authorization, Content-Type, etc.
    expose_headers=["Content-Type", "Authorization"],
    max_age=600,
)

# ------------------------------------------------
# Error taxonomy -> HTTP
# ------------------------------------------------
STATUS_BY_ERROR = {
    InvalidFilter: 400,
    Unauthenticated: 401,
    NotFound: 404,
    JobValidationError: 422,
    RemoteFailure: 502,
}

@app.exception_handler(JobBoardError)
async def job_board_error_handler(request: Request, exc: JobBoardError):
    status = next((code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500)
    if status >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": exc.message}, status_code=status)

# ------------------------------------------------
# Request log: method, path, status, latency, bearer present?
# ------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    log.info(
        "REQ %s %s -> %d (%.1f ms) auth=%s",
        request.method, request.url.path, response.status_code,
        (time.perf_counter() - started) * 1000, bool(request.headers.get("authorization")),
    )
    return response

# ------------------------------------------------
# Mount routers (avoid double /api/v1 prefixes)
# ------------------------------------------------
app.include_router(jobs.router,       prefix="/api/v1")
app.include_router(admin_jobs.router, prefix="/api/v1")

# -----------
# Health & root
# -----------
@app.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        log.warning("health: database check failed: %s", e)
        database = "unavailable"
    return {"status": "ok", "env": ENV, "database": database}

@app.get("/")
def root():
    return {"name": "Job Board API", "version": "1.0.0"}

@app.on_event("startup")
async def list_routes():
    for r in app.routes:
        if isinstance(r, APIRoute):
            methods = ",".join(sorted(r.methods))
            mod = getattr(r.endpoint, "__module__", "?")
            fn = getattr(r.endpoint, "__name__", "?")
            log.debug("%-10s %-35s -> %s.%s", methods, r.path, mod, fn)
