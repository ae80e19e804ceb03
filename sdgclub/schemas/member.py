"""
Member and alumni Pydantic schemas
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .common import reject_null

MATRIC_PATTERN = re.compile(r"^[A-Za-z0-9/]+$")
WHATSAPP_PATTERN = re.compile(r"^\+?[1-9]\d{10,14}$")
LEVELS_OF_STUDY = ("100L", "200L", "300L", "400L", "500L", "600L")


def _check_whatsapp(value: str) -> str:
    value = value.strip()
    if not WHATSAPP_PATTERN.match(value):
        raise ValueError("Enter a valid WhatsApp number with country code (e.g., +234...)")
    return value


def _check_level(value: Optional[str]) -> Optional[str]:
    if value and value not in LEVELS_OF_STUDY:
        raise ValueError(f"Level of study must be one of {', '.join(LEVELS_OF_STUDY)}")
    return value or None


class MemberCreate(BaseModel):
    """Public self-registration form"""
    full_name: str = Field(min_length=3, max_length=100)
    matric_number: str
    faculty_id: Optional[str] = None
    department_id: Optional[str] = None
    department: str = Field(min_length=2, max_length=100)
    level_of_study: Optional[str] = None
    whatsapp_number: str
    expected_graduation_year: Optional[int] = Field(default=None, ge=1950, le=2100)

    @field_validator("full_name", "department")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("matric_number")
    @classmethod
    def check_matric(cls, value: str) -> str:
        value = value.strip()
        if not MATRIC_PATTERN.match(value):
            raise ValueError("Invalid matric number format")
        return value.upper()

    @field_validator("whatsapp_number")
    @classmethod
    def check_whatsapp(cls, value: str) -> str:
        return _check_whatsapp(value)

    @field_validator("level_of_study")
    @classmethod
    def check_level(cls, value: Optional[str]) -> Optional[str]:
        return _check_level(value)


class MemberUpdate(BaseModel):
    """Admin edit dialog"""
    full_name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    matric_number: Optional[str] = None
    faculty_id: Optional[str] = None
    department_id: Optional[str] = None
    department: Optional[str] = Field(default=None, min_length=2, max_length=100)
    level_of_study: Optional[str] = None
    whatsapp_number: Optional[str] = None
    expected_graduation_year: Optional[int] = Field(default=None, ge=1950, le=2100)

    check_required = field_validator(
        "full_name", "matric_number", "department", "whatsapp_number", mode="before"
    )(reject_null)

    @field_validator("full_name", "department")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("matric_number")
    @classmethod
    def check_matric(cls, value: str) -> str:
        value = value.strip()
        if not MATRIC_PATTERN.match(value):
            raise ValueError("Invalid matric number format")
        return value.upper()

    @field_validator("whatsapp_number")
    @classmethod
    def check_whatsapp(cls, value: str) -> str:
        return _check_whatsapp(value)

    @field_validator("level_of_study")
    @classmethod
    def check_level(cls, value: Optional[str]) -> Optional[str]:
        return _check_level(value)


class MemberSelfUpdate(BaseModel):
    """Fields a member may change on their own profile"""
    whatsapp_number: Optional[str] = None
    department: Optional[str] = Field(default=None, min_length=2, max_length=100)

    check_required = field_validator("whatsapp_number", "department", mode="before")(reject_null)

    @field_validator("department")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("whatsapp_number")
    @classmethod
    def check_whatsapp(cls, value: str) -> str:
        return _check_whatsapp(value)


class AlumniResponse(BaseModel):
    id: str
    full_name: str
    matric_number: str
    faculty_id: Optional[str] = None
    department_id: Optional[str] = None
    department: str
    whatsapp_number: Optional[str] = None
    graduation_year: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
