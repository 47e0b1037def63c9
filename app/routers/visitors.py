# app/routers/visitors.py
"""Visitor list, request list and summary counts for approver clients."""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.config import settings
from app.schemas.visitor_row import (
    ASSIGNED_TO_ME,
    FilterSpec,
    RequestListOut,
    Stats,
    VisitorListOut,
    VisitorStatus,
)
from app.services.filter_engine import filter_requests, filter_rows, next_display_count, paginate
from app.services.pass_api_client import PassApiClient, get_pass_api_client
from app.services.portal_loader import load_portal_view
from app.services.stats_service import compute_stats

router = APIRouter()

_STATUS_VALUES = {s.value for s in VisitorStatus} | {ASSIGNED_TO_ME}


def filter_params(
    pass_type_id: Optional[str] = None,
    status: Optional[str] = Query(None, description="Resolved status, or 'assigned_to_me'"),
    category_id: Optional[str] = None,
    date: Optional[dt.date] = Query(None, description="Matches the request's valid-from or valid-to day"),
    search: Optional[str] = None,
    current_user_id: Optional[str] = None,
) -> FilterSpec:
    if status and status not in _STATUS_VALUES:
        raise HTTPException(status_code=422, detail=f"Unknown status '{status}'")
    if status == ASSIGNED_TO_ME and not current_user_id:
        raise HTTPException(status_code=422, detail="current_user_id is required for assigned_to_me")
    return FilterSpec(pass_type_id=pass_type_id, status_value=status, category_id=category_id,
                      date=date, search_text=search, current_user_id=current_user_id)


@router.get("/visitors", response_model=VisitorListOut, summary="Filtered visitor rows + summary counts")
async def list_visitors(
    filters: FilterSpec = Depends(filter_params),
    displayed: int = Query(settings.LIST_PAGE_SIZE, ge=0, description="How many rows are loaded so far"),
    client: PassApiClient = Depends(get_pass_api_client),
):
    """
    Rows are sliced to `displayed`. To load more, call again with
    `displayed=next_displayed`; reset to the page size whenever filters change.
    Stats always cover every visible row, not just the filtered ones.
    """
    view = await load_portal_view(client)
    rows = filter_rows(view.rows, filters, view.user_names)
    page = paginate(rows, displayed)
    return VisitorListOut(
        rows=page.items,
        displayed=page.displayed,
        total=page.total,
        has_more=page.has_more,
        next_displayed=next_display_count(page.displayed, page.total),
        stats=compute_stats(view.rows),
    )


@router.get("/visitors/stats", response_model=Stats, summary="Visitor counts per status")
async def visitor_stats(client: PassApiClient = Depends(get_pass_api_client)):
    view = await load_portal_view(client)
    return compute_stats(view.rows)


@router.get("/requests", response_model=RequestListOut, summary="Filtered visitor rows grouped by request")
async def list_requests(
    filters: FilterSpec = Depends(filter_params),
    displayed: int = Query(settings.LIST_PAGE_SIZE, ge=0),
    client: PassApiClient = Depends(get_pass_api_client),
):
    view = await load_portal_view(client)
    groups = filter_requests(view.rows, filters, view.user_names)
    page = paginate(groups, displayed)
    return RequestListOut(
        requests=page.items,
        displayed=page.displayed,
        total=page.total,
        has_more=page.has_more,
        next_displayed=next_display_count(page.displayed, page.total),
    )
