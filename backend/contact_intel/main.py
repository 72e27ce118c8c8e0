"""FastAPI application factory with middleware, routers, and lifespan."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api import api_router
from .config import Settings, settings, setup_logging
from .contacts.scoring import get_scorer
from .contacts.service import ContactValidationError
from .rate_limit import limiter

logger = logging.getLogger(__name__)

APP_TITLE = "Smart Contact Intelligence API"
APP_VERSION = "1.0.0"


def _run_migrations(app_settings: Settings) -> None:
    """Run Alembic migrations (upgrade head) on startup."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(Path(__file__).parent.parent / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", app_settings.effective_database_url)
    command.upgrade(alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    app_settings: Settings = app.state.settings
    setup_logging(app_settings)

    if app_settings.run_migrations:
        _run_migrations(app_settings)
        logger.info("Database migrations applied")

    logger.info("%s started (score rubric: %s)", APP_TITLE, app_settings.score_rubric)
    yield
    logger.info("%s stopped", APP_TITLE)


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    retry_after = "60"
    return JSONResponse(
        {"message": "Too many requests", "detail": str(exc.detail), "retry_after": int(retry_after)},
        status_code=429,
        headers={"Retry-After": retry_after},
    )


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings
    # Unknown rubric names raise KeyError here
    get_scorer(app_settings.score_rubric)

    app = FastAPI(title=APP_TITLE, version=APP_VERSION, lifespan=lifespan)
    app.state.settings = app_settings

    # --- Exception handlers ---
    @app.exception_handler(ContactValidationError)
    async def contact_validation_handler(request: Request, exc: ContactValidationError):
        return JSONResponse({"message": "Validation failed", "errors": exc.errors}, status_code=422)

    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse({"message": "Route not found", "path": request.url.path}, status_code=404)
        return JSONResponse({"message": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse({"message": "Internal server error"}, status_code=500)

    # --- Middleware stack (LIFO: last added = outermost) ---

    # The limiter is process-wide: enabled and limits come from the environment at import
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    if app_settings.trusted_hosts_list != ["*"]:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=app_settings.trusted_hosts_list,
        )

    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response

    app.include_router(api_router)

    @app.get("/")
    def root():
        return {"message": APP_TITLE, "version": APP_VERSION}

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("contact_intel.main:app", host="0.0.0.0", port=5000)


app = create_app()
