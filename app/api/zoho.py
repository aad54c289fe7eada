"""Authenticated proxy endpoints for the Zoho integration service."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status

from app.api.auth import get_current_user
from app.core.config import Settings, get_settings
from app.core.errors import UpstreamError, ValidationFailed
from app.schemas.auth import CurrentUser
from app.services.zoho import ZohoClient, ZohoServiceError

router = APIRouter()


def get_zoho_client(request: Request) -> ZohoClient:
    """Dependency: the process-wide client created at start-up."""
    return request.app.state.zoho_client


def _upstream(e: ZohoServiceError) -> UpstreamError:
    return UpstreamError("Zoho service unavailable", code=e.code)


@router.get("/leads")
async def get_leads(
    request: Request,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    zoho: Annotated[ZohoClient, Depends(get_zoho_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    try:
        data = await zoho.get_leads(request.cookies.get(settings.COOKIE_NAME))
    except ZohoServiceError as e:
        raise _upstream(e) from e
    return {"data": data}


@router.get("/accounts")
async def get_accounts(
    request: Request,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    zoho: Annotated[ZohoClient, Depends(get_zoho_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    try:
        data = await zoho.get_accounts(request.cookies.get(settings.COOKIE_NAME))
    except ZohoServiceError as e:
        raise _upstream(e) from e
    return {"data": data}


@router.post("/create-lead", status_code=status.HTTP_201_CREATED)
async def create_lead(
    request: Request,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    zoho: Annotated[ZohoClient, Depends(get_zoho_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    lead: Annotated[dict[str, Any] | None, Body()] = None,
) -> dict[str, Any]:
    if not lead:
        raise ValidationFailed("Lead data is required")
    try:
        data = await zoho.create_lead(lead, request.cookies.get(settings.COOKIE_NAME))
    except ZohoServiceError as e:
        raise _upstream(e) from e
    return {"data": data}
