from pathlib import Path
from contextlib import asynccontextmanager

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rankings.api.routes import health_router, ingest_router, rankings_router, runs_router
from rankings.core.config import settings
from rankings.core.errors import RankingsError
from rankings.core.logging import get_logger


log = get_logger("app")


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"Starting application in {settings.ENV.upper()} mode")
    if settings.is_production:
        log.info("Production mode: Debug disabled, docs disabled, stricter logging")
    else:
        log.info("Development mode: Debug enabled, docs available")

    try:
        run_migrations()
    except Exception:
        log.exception("Failed to apply migrations on startup")
        raise

    yield

    log.info("Application shutdown complete")


app = FastAPI(
    title="Recruiting Rankings Ingest",
    description="Pulls athlete recruiting rankings from public sources into one canonical store",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    debug=settings.debug_enabled,
)


@app.exception_handler(RankingsError)
async def rankings_error_handler(request: Request, exc: RankingsError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        log.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def describe_validation_errors(exc: RequestValidationError) -> str:
    """One line per invalid field, e.g. ``body.year: Input should be greater than or equal to 1900``."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg', 'invalid value')}" if location else err.get("msg", "invalid value"))
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_errors(exc)
    log.warning(f"{request.method} {request.url.path} rejected (422): {message}")
    return JSONResponse(status_code=422, content={"error": message})


app.include_router(ingest_router)
app.include_router(rankings_router)
app.include_router(runs_router)
app.include_router(health_router)
