"""Build/version metadata endpoint."""

from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.core.config import DEFAULT_APP_VERSION, Settings, get_settings
from app.schemas.health import VersionResponse

router = APIRouter()

DISTRIBUTION_NAME = "launchpad-platform"
VERSION_CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=300"


def _package_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return DEFAULT_APP_VERSION


@router.get(
    "/meta/version",
    response_model=VersionResponse,
    response_model_exclude_none=True,
)
def get_version(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> VersionResponse:
    """APP_VERSION (or the installed package version), plus build and commit when set."""
    response.headers["Cache-Control"] = VERSION_CACHE_CONTROL
    return VersionResponse(
        version=settings.APP_VERSION or _package_version(),
        build=settings.APP_BUILD,
        commit=settings.APP_COMMIT,
    )
