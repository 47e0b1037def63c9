# app/schemas/reference.py
"""Read-only lookup entities fetched from the upstream API, keyed by id."""

from pydantic import BaseModel
from typing import Optional


class SubCategory(BaseModel):
    id: str
    name: str
    main_category_id: str
    pass_type_id: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True

    class Config:
        extra = "ignore"


class MainCategory(BaseModel):
    id: str
    name: str
    type: Optional[str] = None          # department | peshi | insta ...
    pass_type_id: Optional[str] = None
    is_active: bool = True
    sub_categories: list[SubCategory] = []

    class Config:
        extra = "ignore"


class PassTypeItem(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True

    class Config:
        extra = "ignore"


class Session(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True

    class Config:
        extra = "ignore"


class Issuer(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    weblink: Optional[str] = None
    is_active: bool = True

    class Config:
        extra = "ignore"


class User(BaseModel):
    id: str
    username: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    hod_approver: bool = False
    legislative_approver: bool = False
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    class Config:
        extra = "ignore"
