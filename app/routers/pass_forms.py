# app/routers/pass_forms.py
"""Pass request form validation. Always 200: errors are data, not failures."""

from fastapi import APIRouter

from app.schemas.pass_form import PassRequestDraft
from app.services.form_validator import validate_pass_request

router = APIRouter()


@router.post("/pass-requests/validate", summary="Validate a pass request draft")
def validate_draft(draft: PassRequestDraft):
    errors = validate_pass_request(draft)
    return {
        "valid": errors.is_valid,
        "first_invalid_visitor": errors.first_invalid_visitor,
        "errors": errors.model_dump(),
    }
