from fastapi.middleware.cors import CORSMiddleware
from app.routers.teams import router as team_router
from app.routers.members import router as member_router

from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from .services.errors import ErrorKind, TeamServiceError, OrphanedTeamError
from .services.reconcile import sweep_orphaned_teams
from .database import init_db
from .config import (CORS_ORIGINS, AUTO_CREATE_TABLES, ENABLE_SCHEDULER,
                     ORPHAN_SWEEP_MINUTES, LOG_LEVEL)
from contextlib import asynccontextmanager

# Logger
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("uvicorn.error")

# APScheduler instance
scheduler = BackgroundScheduler()

# One place to turn an error kind into a status code
ERROR_STATUS = {
    ErrorKind.validation: 400,
    ErrorKind.unauthenticated: 401,
    ErrorKind.permission_denied: 403,
    ErrorKind.not_found: 404,
    ErrorKind.conflict: 400,
    ErrorKind.internal: 500,
}


@asynccontextmanager
async def scheduler_lifespan(app: FastAPI):
    """Start/stop the orphaned team sweep."""
    if not ENABLE_SCHEDULER:
        yield
        return

    scheduler.add_job(sweep_orphaned_teams, "interval", minutes=ORPHAN_SWEEP_MINUTES,
                      id="orphan_sweep", replace_existing=True)
    scheduler.start()
    logger.info("Scheduler started")

    yield

    scheduler.shutdown()
    logger.info("Scheduler stopped")


@asynccontextmanager
async def schema_lifespan(app: FastAPI):
    """Create missing tables if enabled via env var."""
    if AUTO_CREATE_TABLES:
        init_db()
        logger.info("Database tables ensured")

    yield


# Combine lifespans into one
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with schema_lifespan(app):
        async with scheduler_lifespan(app):
            yield


# App instance
app = FastAPI(lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TeamServiceError)
async def team_service_error_handler(request: Request, exc: TeamServiceError):
    status_code = ERROR_STATUS.get(exc.kind, 500)
    if isinstance(exc, OrphanedTeamError):
        logger.critical(f"Orphaned team {exc.team_id} after {request.method} {request.url}")
    elif status_code >= 500:
        logger.error(f"{exc.kind.value} error on {request.method} {request.url}: {exc.message}")
    else:
        logger.info(f"{exc.kind.value} on {request.method} {request.url}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"error": exc.message})


# Custom HTTP exception handler
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.error(f"HTTPException on {request.url}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid field '{field}': {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health", tags=["System"])
async def health():
    return {"status": "ok"}


# API routers
prefix = "/api"

app.include_router(team_router, prefix=prefix)
app.include_router(member_router, prefix=prefix)
