"""
Organization settings and registration link schemas
"""

import re
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .common import reject_null

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

class OrganizationSettingsUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    mission: Optional[str] = None
    vision: Optional[str] = None
    about: Optional[str] = None
    aims: Optional[List[str]] = None
    objectives: Optional[List[str]] = None
    sdg_info: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None

    check_required = field_validator("name", mode="before")(reject_null)

    @field_validator("aims", "objectives")
    @classmethod
    def drop_blank_items(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        return [item.strip() for item in value if item and item.strip()]

class OrganizationSettingsResponse(BaseModel):
    id: str
    name: str
    mission: Optional[str] = None
    vision: Optional[str] = None
    about: Optional[str] = None
    aims: List[str] = []
    objectives: List[str] = []
    sdg_info: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("aims", "objectives", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return value or []

class RegistrationLinkCreate(BaseModel):
    slug: str = Field(min_length=2, max_length=100)

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, value: str) -> str:
        value = value.strip().lower()
        if not SLUG_PATTERN.match(value):
            raise ValueError("Slug may only contain lowercase letters, numbers and hyphens")
        return value

class RegistrationLinkToggle(BaseModel):
    is_active: bool

class RegistrationLinkResponse(BaseModel):
    id: str
    slug: str
    is_active: bool
    created_at: datetime
    url: Optional[str] = None

    class Config:
        from_attributes = True

class FoundingMemberCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    role: str = Field(min_length=2, max_length=100)
    bio: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    display_order: Optional[int] = None

    @field_validator("name", "role")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

class FoundingMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    role: Optional[str] = Field(default=None, min_length=2, max_length=100)
    bio: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    display_order: Optional[int] = None

    check_required = field_validator("name", "role", mode="before")(reject_null)

    @field_validator("name", "role")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

class FoundingMemberResponse(BaseModel):
    id: str
    name: str
    role: str
    bio: Optional[str] = None
    image_url: Optional[str] = None
    display_order: Optional[int] = None

    class Config:
        from_attributes = True
