"""Health check: database and Zoho service probes combined into ok / degraded / down."""

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.zoho import get_zoho_client
from app.core.config import Settings, get_settings
from app.core.database import SessionLocal, check_db_connected
from app.schemas.health import HealthChecks, HealthResponse, ProbeResult
from app.services.zoho import ZohoClient

logger = logging.getLogger(__name__)
router = APIRouter()


def _ping_database() -> bool:
    # Own session: on timeout the worker thread may outlive the request.
    db = SessionLocal()
    try:
        return check_db_connected(db)
    finally:
        db.close()


async def _probe_database(timeout: float) -> ProbeResult:
    start = time.perf_counter()
    try:
        ok = await asyncio.wait_for(asyncio.to_thread(_ping_database), timeout)
    except TimeoutError:
        ok = False
    if not ok:
        logger.error("Database health check failed")
        return ProbeResult(status="down")
    return ProbeResult(status="ok", latency=int((time.perf_counter() - start) * 1000))


async def _probe_zoho(zoho: ZohoClient, timeout: float) -> ProbeResult:
    try:
        ok, latency = await asyncio.wait_for(zoho.ping(timeout), timeout)
    except TimeoutError:
        ok, latency = False, None
    return ProbeResult(status="ok" if ok else "down", latency=latency)


def composite_status(database: ProbeResult, zoho: ProbeResult) -> str:
    """down if the database is down, degraded if only Zoho is, ok otherwise."""
    if database.status == "down":
        return "down"
    if zoho.status == "down":
        return "degraded"
    return "ok"


@router.get("/health", response_model=HealthResponse)
async def get_health(
    zoho: Annotated[ZohoClient, Depends(get_zoho_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """
    Run both probes concurrently, each bounded by HEALTH_PROBE_TIMEOUT_SEC.
    503 only when the database is unreachable; a Zoho outage is degraded (200).
    Used by load balancers and monitoring.
    """
    timeout = settings.HEALTH_PROBE_TIMEOUT_SEC
    database, zoho_result = await asyncio.gather(
        _probe_database(timeout),
        _probe_zoho(zoho, timeout),
    )
    overall = composite_status(database, zoho_result)
    body = HealthResponse(
        status=overall,
        timestamp=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        checks=HealthChecks(database=database, zoho=zoho_result),
    )
    return JSONResponse(
        status_code=503 if overall == "down" else 200,
        content=body.model_dump(exclude_none=True),
    )
