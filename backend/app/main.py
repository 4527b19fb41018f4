"""Token Directory — FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.config import settings
from app.database import Base, SessionLocal, engine
from app.errors import DirectoryError, InvalidInput, RateLimited, StorageError
from app.middleware.rate_limit import limiter
from app.routers import admin, auth, catalog, projects, validation

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)

# ── CORS origins from env (supports dev localhost + production domain) ──────
_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="Token Directory",
    description="Directory of tokenized-asset projects with admin moderation.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter


# ── Error handlers ───────────────────────────────────────────────────────────

@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError):
    if isinstance(exc, StorageError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    error = InvalidInput(f"Malformed request: {problems}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.info("Rate limit hit on %s %s: %s", request.method, request.url.path, exc.detail)
    error = RateLimited(f"Rate limit exceeded: {exc.detail}")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled storage error on %s %s", request.method, request.url.path, exc_info=exc)
    error = StorageError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(admin.router)
app.include_router(validation.router)
app.include_router(catalog.asset_types_router)
app.include_router(catalog.networks_router)


@app.on_event("startup")
def on_startup():
    """Seed the bootstrap admin account when one is configured."""
    db = SessionLocal()
    try:
        admin_user = auth.ensure_admin_account(db)
    finally:
        db.close()
    if admin_user is None:
        logger.info("No ADMIN_EMAIL/ADMIN_PASSWORD configured; skipping admin seed")


@app.get("/")
def root():
    return {
        "name": "Token Directory API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok"}
