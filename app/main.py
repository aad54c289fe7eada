"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from app.api import router as api_router
from app.core.config import Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.limiter import limiter
from app.core.logging_config import configure_logging, log_requests
from app.services.zoho import ZohoClient


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; process-wide services are created once here."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Launchpad API",
        version="1.0.0",
        docs_url=None if settings.APP_ENV == "prod" else "/docs",
        redoc_url=None,
    )

    # Same-origin by default; a single trusted origin when CORS_ORIGIN is set.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN] if settings.CORS_ORIGIN else [],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type"],
    )
    # SlowAPI looks for app.state.limiter by convention.
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(log_requests)

    app.state.zoho_client = ZohoClient.from_settings(settings)

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
