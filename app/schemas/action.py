# app/schemas/action.py
"""Bodies for workflow actions forwarded to the upstream API, and the audit log output."""

from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional


class VisitorDecision(BaseModel):
    status: Literal["approved", "rejected"]
    acting_user_id: str
    comment: Optional[str] = None       # rejection reason when status == "rejected"


class BulkDecision(BaseModel):
    acting_user_id: str
    comment: Optional[str] = None


class RequestStatusPayload(BaseModel):
    """Request-level transition, e.g. a HOD forwarding a request to the legislature."""
    status: Literal["pending", "routed_for_approval", "approved", "rejected"]
    current_user_id: str
    comments: Optional[str] = None
    routed_by: Optional[str] = None
    pass_category_id: Optional[str] = None
    pass_sub_category_id: Optional[str] = None
    pass_type_id: Optional[str] = None
    season: Optional[str] = None


class GeneratePassPayload(BaseModel):
    visitor_id: str
    current_user_id: str
    pass_category_id: Optional[str] = None
    pass_sub_category_id: Optional[str] = None
    pass_type_id: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    pass_type_color: Optional[str] = None
    season: Optional[str] = None


class RoutePayload(BaseModel):
    visitor_id: str
    routed_to: str
    routed_by: str
    current_user_id: str
    comments: Optional[str] = None


class SuspendPayload(BaseModel):
    suspended_by: str
    reason: str


class ActivatePayload(BaseModel):
    activated_by: str


class ActionLogOut(BaseModel):
    id: int
    action: str
    request_id: Optional[str]
    visitor_id: Optional[str]
    acting_user_id: Optional[str]
    comment: Optional[str]
    outcome: str
    detail: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
