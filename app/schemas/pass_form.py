# app/schemas/pass_form.py
"""In-progress pass request form, and the per-field errors reported back for it."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CarPassDraft(BaseModel):
    car_make: str = ""
    car_model: str = ""
    car_color: str = ""
    car_number: str = ""
    car_tag: Optional[str] = None


class VisitorDraft(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    identification_type: Optional[str] = None
    identification_number: str = ""
    has_identification_document: bool = False
    pass_type_id: Optional[str] = None
    purpose: str = ""
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    car_passes: list[CarPassDraft] = []


class PassRequestDraft(BaseModel):
    main_category_id: Optional[str] = None
    sub_category_id: Optional[str] = None
    season: Optional[str] = None
    visitors: list[VisitorDraft] = []


class VisitorErrors(BaseModel):
    fields: dict[str, str] = {}
    car_passes: list[dict[str, str]] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.fields) or any(self.car_passes)


class PassRequestErrors(BaseModel):
    pass_category: Optional[str] = None
    form: Optional[str] = None
    visitors: list[VisitorErrors] = []

    @property
    def is_valid(self) -> bool:
        return not (self.pass_category or self.form or any(v.has_errors for v in self.visitors))

    @property
    def first_invalid_visitor(self) -> Optional[int]:
        """Index of the first visitor with errors, so a client can expand it."""
        for index, visitor in enumerate(self.visitors):
            if visitor.has_errors:
                return index
        return None
