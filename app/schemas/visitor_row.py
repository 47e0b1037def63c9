# app/schemas/visitor_row.py
"""
Flattened visitor rows, filter criteria and aggregate counts.
Rows are frozen snapshots; they never track later changes to the
request/visitor they were built from.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.schemas.pass_request import PassRequest, Visitor


class VisitorStatus(str, Enum):
    SUSPENDED = "suspended"
    APPROVED = "approved"
    ROUTED_FOR_APPROVAL = "routed_for_approval"
    REJECTED = "rejected"
    PENDING = "pending"


ASSIGNED_TO_ME = "assigned_to_me"


class VisitorRow(BaseModel):
    row_id: str                 # "<request.id>:<visitor.id>"
    request: PassRequest
    visitor: Visitor

    status: VisitorStatus
    status_label: str
    actions: tuple[str, ...] = ()

    request_id: str
    visitor_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    identification_number: Optional[str] = None
    requested_by: Optional[str] = None
    purpose: Optional[str] = None
    category_name: str
    sub_category_name: str
    pass_type_name: str
    valid_from: Optional[dt.datetime] = None
    valid_to: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
    pass_number: Optional[str] = None
    pass_generated_at: Optional[dt.datetime] = None

    class Config:
        frozen = True


class RequestGroup(BaseModel):
    request: PassRequest
    rows: list[VisitorRow]


class FilterSpec(BaseModel):
    """All criteria optional; set criteria are ANDed together."""
    pass_type_id: Optional[str] = None
    status_value: Optional[str] = None      # a VisitorStatus value or "assigned_to_me"
    category_id: Optional[str] = None
    date: Optional[dt.date] = None
    search_text: Optional[str] = None
    current_user_id: Optional[str] = None   # needed for "assigned_to_me"

    class Config:
        frozen = True


class Stats(BaseModel):
    total: int = 0
    pending: int = 0
    routed: int = 0
    approved: int = 0
    rejected: int = 0
    suspended: int = 0


class VisitorListOut(BaseModel):
    rows: list[VisitorRow]
    displayed: int
    total: int
    has_more: bool
    next_displayed: int
    stats: Stats


class RequestListOut(BaseModel):
    requests: list[RequestGroup]
    displayed: int
    total: int
    has_more: bool
    next_displayed: int
