# app/services/form_validator.py
"""
Client-side validation of a pass request before submission.

Never raises: problems come back as per-field messages attached to the
draft's structure, so a client can render them next to each input.
Naive datetimes are treated as UTC.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from app.schemas.pass_form import CarPassDraft, PassRequestDraft, PassRequestErrors, VisitorDraft, VisitorErrors

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PREFIX = "+91"
MIN_PHONE_DIGITS = 10
MAX_CAR_PASSES = 1

_CAR_FIELDS = (
    ("car_make", "Car make is required"),
    ("car_model", "Car model is required"),
    ("car_color", "Car color is required"),
    ("car_number", "Car number is required"),
)


def _utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _validate_car_pass(car: CarPassDraft) -> dict[str, str]:
    return {name: message for name, message in _CAR_FIELDS if _blank(getattr(car, name))}


def _validate_visitor(visitor: VisitorDraft, now: datetime) -> VisitorErrors:
    errors: dict[str, str] = {}

    if _blank(visitor.first_name):
        errors["first_name"] = "First name is required"
    if _blank(visitor.last_name):
        errors["last_name"] = "Last name is required"

    # Email is optional, but must look like one when given
    if not _blank(visitor.email) and not EMAIL_RE.match(visitor.email.strip()):
        errors["email"] = "Please enter a valid email"

    phone = visitor.phone.strip()
    if not phone or phone == PHONE_PREFIX:
        errors["phone"] = "Phone number is required"
    elif len(re.sub(r"[^0-9]", "", phone)) < MIN_PHONE_DIGITS:
        errors["phone"] = "Please enter a valid phone number"

    if not visitor.identification_type:
        errors["identification_type"] = "ID type is required"
    if _blank(visitor.identification_number):
        errors["identification_number"] = "ID number is required"
    if not visitor.has_identification_document:
        errors["identification_document"] = "Identification document is required"
    if not visitor.pass_type_id:
        errors["pass_type_id"] = "Pass type is required"
    if _blank(visitor.purpose):
        errors["purpose"] = "Purpose is required"

    if visitor.valid_from is None:
        errors["valid_from"] = "Valid from date/time is required"
    elif _utc(visitor.valid_from) <= now:
        errors["valid_from"] = "Valid from date/time must be in the future"

    if visitor.valid_to is not None:
        if _utc(visitor.valid_to) <= now:
            errors["valid_to"] = "Valid to date/time must be in the future"
        elif visitor.valid_from is not None and _utc(visitor.valid_to) <= _utc(visitor.valid_from):
            errors["valid_to"] = "Valid to date/time must be after valid from date/time"

    if len(visitor.car_passes) > MAX_CAR_PASSES:
        errors["car_passes"] = "Only one car pass is allowed per visitor"

    return VisitorErrors(
        fields=errors,
        car_passes=[_validate_car_pass(car) for car in visitor.car_passes],
    )


def validate_pass_request(draft: PassRequestDraft, now: Optional[datetime] = None) -> PassRequestErrors:
    now = _utc(now or datetime.now(timezone.utc))
    result = PassRequestErrors()

    if not draft.main_category_id or not draft.sub_category_id:
        result.pass_category = "Pass category is required"
    if not draft.visitors:
        result.form = "At least one visitor is required"

    result.visitors = [_validate_visitor(v, now) for v in draft.visitors]
    return result
