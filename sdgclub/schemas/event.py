"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from .common import reject_null

class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str = Field(min_length=2, max_length=255)
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    max_attendees: Optional[int] = Field(default=None, ge=1)
    is_published: bool = False
    registration_required: bool = False
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    max_attendees: Optional[int] = Field(default=None, ge=1)
    is_published: Optional[bool] = None
    registration_required: Optional[bool] = None
    image_url: Optional[str] = None

    check_required = field_validator(
        "title", "start_date", "is_published", "registration_required", mode="before"
    )(reject_null)

class RegistrationCreate(BaseModel):
    """Visitor registration for an event"""
    name: str = Field(max_length=100)
    email: Optional[EmailStr] = None
    whatsapp_number: Optional[str] = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please enter your name")
        return value

    @field_validator("email", "whatsapp_number", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

class ScanRequest(BaseModel):
    """Decoded QR text from the admin scanner"""
    payload: str

class ManualCheckInRequest(BaseModel):
    member_id: Optional[str] = None
    registration_id: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one(self):
        if bool(self.member_id) == bool(self.registration_id):
            raise ValueError("Provide either member_id or registration_id")
        return self
