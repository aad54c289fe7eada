"""Pydantic schemas for health check and version metadata responses."""

from typing import Literal

from pydantic import BaseModel, Field


class ProbeResult(BaseModel):
    """Outcome of one dependency probe."""

    status: Literal["ok", "down"]
    latency: int | None = Field(default=None, description="Round-trip time in milliseconds")


class HealthChecks(BaseModel):
    database: ProbeResult
    zoho: ProbeResult


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok", "degraded", "down"] = Field(description="Composite service status")
    timestamp: str = Field(description="ISO-8601 UTC time of the check")
    checks: HealthChecks


class VersionResponse(BaseModel):
    """Response body for /meta/version; build and commit omitted when unset."""

    version: str
    build: str | None = None
    commit: str | None = None
