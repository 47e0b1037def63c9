# app/routers/reference.py
"""Lookup data passthrough. Upstream failures return empty lists, never errors."""

from fastapi import APIRouter, Depends

from app.schemas.reference import Issuer, MainCategory, PassTypeItem, Session
from app.services.pass_api_client import PassApiClient, get_pass_api_client
from app.services.portal_loader import safe_fetch

router = APIRouter()


@router.get("/reference/categories", response_model=list[MainCategory])
async def list_categories(client: PassApiClient = Depends(get_pass_api_client)):
    return await safe_fetch("categories", client.get_main_categories(), [])


@router.get("/reference/categories/{category_id}/pass-types", response_model=list[str])
async def list_category_pass_types(category_id: str, client: PassApiClient = Depends(get_pass_api_client)):
    return await safe_fetch("category pass types", client.get_category_pass_types(category_id), [])


@router.get("/reference/pass-types", response_model=list[PassTypeItem])
async def list_pass_types(client: PassApiClient = Depends(get_pass_api_client)):
    return await safe_fetch("pass types", client.get_all_pass_types(), [])


@router.get("/reference/sessions", response_model=list[Session])
async def list_sessions(client: PassApiClient = Depends(get_pass_api_client)):
    return await safe_fetch("sessions", client.get_sessions(), [])


@router.get("/reference/issuers", response_model=list[Issuer])
async def list_issuers(client: PassApiClient = Depends(get_pass_api_client)):
    return await safe_fetch("issuers", client.get_issuers(), [])
