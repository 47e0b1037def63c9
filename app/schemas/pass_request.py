# app/schemas/pass_request.py
"""
Pass requests and their visitors, as returned by the upstream pass-request API.
Field names follow the upstream JSON so payloads validate directly.

The upstream sends null for fields it never filled in (names on older
weblink submissions, is_suspended before the first suspend, car_passes when
none were requested). Those nulls are read as the field's empty value so one
sparse visitor can't make its whole request fail validation.
"""

from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional


class CarPass(BaseModel):
    car_make: str = ""
    car_model: str = ""
    car_color: str = ""
    car_number: str = ""
    car_tag: Optional[str] = None

    @field_validator("car_make", "car_model", "car_color", "car_number", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value

    class Config:
        extra = "ignore"


class Visitor(BaseModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None

    # Per-visitor workflow, independent of the request status
    visitor_status: Optional[str] = None           # pending | approved | rejected
    visitor_routed_to: Optional[str] = None
    is_suspended: bool = False
    suspended_at: Optional[datetime] = None
    suspension_reason: Optional[str] = None
    visitor_rejection_reason: Optional[str] = None
    pass_generated_at: Optional[datetime] = None

    # Populated once a pass is generated
    pass_number: Optional[str] = None
    pass_qr_string: Optional[str] = None
    pass_category_id: Optional[str] = None
    pass_sub_category_id: Optional[str] = None
    pass_type_id: Optional[str] = None

    car_passes: list[CarPass] = []

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _null_name(cls, value):
        return "" if value is None else value

    @field_validator("is_suspended", mode="before")
    @classmethod
    def _null_not_suspended(cls, value):
        return False if value is None else value

    @field_validator("car_passes", mode="before")
    @classmethod
    def _null_car_passes(cls, value):
        return [] if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    class Config:
        extra = "ignore"


class PassRequest(BaseModel):
    id: str
    request_id: str
    main_category_id: Optional[str] = None
    sub_category_id: Optional[str] = None

    status: str = "pending"     # pending | routed_for_approval | approved | rejected
    routed_to: Optional[str] = None
    routed_by: Optional[str] = None     # None when routed automatically via weblink
    routed_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None

    purpose: Optional[str] = None
    requested_by: Optional[str] = None   # user id, or free text on older requests
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    created_at: Optional[datetime] = None
    season: Optional[str] = None

    visitors: list[Visitor] = []

    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, value):
        return "pending" if value is None else value

    @field_validator("visitors", mode="before")
    @classmethod
    def _null_visitors(cls, value):
        return [] if value is None else value

    class Config:
        extra = "ignore"
