"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from rbac_admin.core.config import settings
from rbac_admin.core.envelope import failure
from rbac_admin.core.exceptions import RBACAdminError
from rbac_admin.core.middleware import request_id_of, setup_middleware

from rbac_admin.api.roles import router as roles_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("rbac_admin")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s", settings.APP_NAME)
    if settings.DB_AUTO_CREATE:
        from rbac_admin.db.session import create_tables
        create_tables()
        logger.info("Database tables ready")

    yield

    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(
    title="RBAC Admin API",
    description="Role and permission administration",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


# Every error, expected or not, is rendered as a failure envelope
@app.exception_handler(RBACAdminError)
async def rbac_admin_exception_handler(request: Request, exc: RBACAdminError):
    logger.info(
        "[%s] %s %s rejected: %s %s (%s)",
        request_id_of(request), request.method, request.url.path,
        exc.kind.value, exc.code, exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=failure(exc))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(
        "[%s] Database error on %s %s",
        request_id_of(request), request.method, request.url.path,
    )
    error = RBACAdminError()
    return JSONResponse(status_code=error.status_code, content=failure(error))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "[%s] Unhandled error on %s %s",
        request_id_of(request), request.method, request.url.path,
    )
    error = RBACAdminError()
    return JSONResponse(status_code=error.status_code, content=failure(error))


# Register routers
app.include_router(roles_router)


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
