# backoffice/main.py
"""
FastAPI application entry point.
Includes session + CORS middleware, error mapping, and the routers of the
configured deployment (cars or students).

Run with: uvicorn backoffice.main:app
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from backoffice.routers import auth, cars, health, stats, students
from backoffice.config import Settings, settings
from backoffice.database import Store
from backoffice.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from backoffice.utils.logger import get_logger
import time

logger = get_logger(__name__)

DEPLOYMENTS = {
    "cars": {"title": "Car Inventory Manager", "router": cars.router},
    "students": {"title": "Student Records Manager", "router": students.router},
}


def _register_error_handlers(app: FastAPI):
    @app.exception_handler(UnauthenticatedError)
    async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc) or "Not authenticated"})

    @app.exception_handler(ValidationFailedError)
    async def validation_handler(request: Request, exc: ValidationFailedError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "fields": exc.fields},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = [str(err["loc"][-1]) for err in exc.errors() if err.get("loc")]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request", "fields": fields, "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "fields": [exc.field]},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    # ── Global Exception Handler ─────────────────────────────────────────
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    if app_settings.DEPLOYMENT not in DEPLOYMENTS:
        raise ValueError(f"Unknown DEPLOYMENT '{app_settings.DEPLOYMENT}', expected one of {sorted(DEPLOYMENTS)}")
    deployment = DEPLOYMENTS[app_settings.DEPLOYMENT]

    app = FastAPI(
        title=deployment["title"],
        description="Authenticated CRUD administration over a single SQLite store.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = app_settings
    app.state.store = Store(app_settings)

    # ── CORS + sessions ──────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.SECRET_KEY,
        max_age=app_settings.SESSION_MAX_AGE,
        same_site="lax",
    )

    # ── Request Timing Middleware ────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    _register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────
    app.include_router(auth.router, prefix="/api", tags=["Auth"])
    app.include_router(deployment["router"], prefix="/api", tags=[deployment["title"]])
    app.include_router(stats.router, prefix="/api", tags=["Dashboard"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    # ── Startup ──────────────────────────────────────────────────────────
    @app.on_event("startup")
    def startup():
        logger.info(f"{deployment['title']} starting up...")
        store = app.state.store.acquire()
        mode = "durable" if store.durable else "memory-only"
        logger.info(f"Store ready ({mode}), tables: {store.table_names()}")

    @app.on_event("shutdown")
    def shutdown():
        logger.info(f"{deployment['title']} shutting down...")
        app.state.store.dispose()

    return app


app = create_app()
