import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from jobguide.config import settings
from jobguide.core.rate_limiter import rate_limiter
from jobguide.database import init_db, engine
from jobguide.errors import ConflictError, JobGuideError
from jobguide.logging_config import setup_logging
from jobguide.routers import (
    advertisements,
    applications,
    cron,
    feedback,
    mentoring,
    messages,
    profile,
    schedule,
)

setup_logging()
logger = logging.getLogger(__name__)

PLACEHOLDER_JWT_SECRET = "replace-with-the-identity-provider-jwt-secret"

app = FastAPI(
    title="Job Guidance API",
    description="Applications, interview scheduling, mentoring and job ads for students.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(applications.router)
app.include_router(schedule.router)
app.include_router(mentoring.router)
app.include_router(profile.router)
app.include_router(messages.router)
app.include_router(advertisements.router)
app.include_router(feedback.router)
app.include_router(cron.router)


@app.exception_handler(JobGuideError)
async def domain_error_handler(request, exc: JobGuideError):
    if exc.status_code >= 500:
        logger.error("Backend failure on %s %s: %s", request.method, request.url.path, exc.message)
    content = {"detail": exc.message}
    if isinstance(exc, ConflictError) and exc.conflicts:
        content["conflicts"] = [getattr(c, "id", None) for c in exc.conflicts]
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    path = request.url.path
    if request.method != "POST":
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    limit = None
    window = 60
    if path == "/feedback":
        limit = settings.rate_limit_feedback_per_min

    if limit is not None and limit > 0:
        key = f"{client_ip}:{path}"
        allowed, retry_after = rate_limiter.allow(key, limit=limit, window_seconds=window)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please retry shortly."},
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


def check_deployment_settings() -> None:
    """Refuse placeholder secrets in production, warn about them elsewhere."""
    env = (settings.app_env or "development").lower()
    problems = []
    if settings.jwt_secret == PLACEHOLDER_JWT_SECRET:
        problems.append("JWT_SECRET is using the placeholder default")
    if "postgres:postgres@" in settings.database_url:
        problems.append("DATABASE_URL uses the default postgres credentials")
    if env in {"production", "prod"}:
        if problems:
            raise RuntimeError("; ".join(problems) + " (not allowed in production)")
    else:
        for problem in problems:
            logger.warning("%s. Set it in .env for secure deployments.", problem)


@app.on_event("startup")
def on_startup():
    logger.info("Starting Job Guidance API")
    check_deployment_settings()
    init_db()


@app.get("/")
def root():
    return {"message": "Job Guidance API. See /docs for the available endpoints."}
