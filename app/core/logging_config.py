"""Process-wide logging setup and the HTTP access-log middleware."""

import logging
import time

from fastapi import Request

from app.core.config import Settings

logger = logging.getLogger("app.access")


def configure_logging(settings: Settings) -> None:
    """Configure root logging once at start-up."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    # Timestamps carry a Z suffix, so render them in UTC.
    logging.Formatter.converter = time.gmtime
    # SQL echo is controlled by DEBUG on the engine, keep the logger quiet otherwise.
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def log_requests(request: Request, call_next):
    """Log method, path, status and latency; 4xx at warning, 5xx at error."""
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    if response.status_code >= 500:
        level = logging.ERROR
    elif response.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        "%s %s %d %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        extra={"client": request.client.host if request.client else "unknown"},
    )
    return response
