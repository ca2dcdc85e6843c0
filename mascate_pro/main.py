from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func
from mascate_pro import __version__
from mascate_pro.core.config import settings
from mascate_pro.core.database import Database
from mascate_pro.core.exceptions import MascateError
from mascate_pro.core.logging_config import setup_logging, get_logger
from mascate_pro.core.middleware import RequestIDMiddleware
from mascate_pro.core.security import is_valid_bcrypt_hash
from mascate_pro.api.v1 import api_router
from mascate_pro.models.user import User

logger = get_logger(__name__)


async def handle_domain_error(request: Request, exc: MascateError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    # missing or malformed fields are a client error like any other ValidationError
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around one Database.

    Tests pass their own in-memory database; otherwise it is built from settings
    and its pool is closed on shutdown.
    """
    setup_logging()
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Mascate Pro API {__version__} starting")
        _check_password_hashes(database)
        yield
        database.dispose()

    app = FastAPI(
        title="Mascate Pro",
        description="Inventory stock ledger for bars and small shops",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    # Request ID middleware (add first for request tracking)
    if settings.LOG_REQUEST_ID:
        app.add_middleware(RequestIDMiddleware)

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # browsers refuse credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_exception_handler(MascateError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "Mascate Pro API", "version": __version__}

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "healthy"}

    @app.get("/health/detailed")
    def health_detailed(request: Request):
        """Detailed health check with database and password hash status"""
        db_client: Database = request.app.state.database
        health_info = {
            "status": "healthy",
            "service": "Mascate Pro API",
            "version": __version__,
        }

        try:
            db_client.ping()
            health_info["database"] = "connected"
        except Exception as e:
            logger.warning(f"Database health check failed: {type(e).__name__}")
            health_info["database"] = "unavailable"
            health_info["status"] = "degraded"
            return health_info

        try:
            with db_client.session() as db:
                total, malformed = _count_malformed_hashes(db)
            health_info["password_hashes"] = {
                "total_users": total,
                "malformed_count": malformed,
                "status": "healthy" if malformed == 0 else "warning",
            }
            if malformed > 0:
                health_info["status"] = "degraded"
        except Exception as e:
            logger.warning(f"Password hash check failed: {type(e).__name__}")
            health_info["password_hashes"] = "check_failed"

        return health_info

    return app


def _count_malformed_hashes(db):
    total = db.query(func.count(User.id)).scalar()
    malformed = sum(
        1 for (hashed,) in db.query(User.password_hash).limit(1000)
        if not is_valid_bcrypt_hash(hashed)
    )
    return total, malformed


def _check_password_hashes(database: Database) -> None:
    """Non-blocking startup check: log how many stored hashes are unusable."""
    try:
        with database.session() as db:
            total, malformed = _count_malformed_hashes(db)
    except Exception as e:
        # tables may not exist yet before scripts/init_db.py has run
        logger.warning(f"Startup hash check skipped: could not query users table - {type(e).__name__}")
        return
    if malformed:
        logger.warning(f"Detected {malformed} of {total} users with malformed bcrypt hashes")
    else:
        logger.info("Password hash validation check passed - all hashes are valid")


app = create_app()
