"""
Feedback and contact form schemas
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

FeedbackType = Literal["feedback", "testimonial", "recommendation"]

class FeedbackCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    type: FeedbackType = "feedback"
    message: str = Field(min_length=10, max_length=1000)

class FeedbackResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    message: str
    type: str
    is_approved: bool
    created_at: datetime

    class Config:
        from_attributes = True

class PublicFeedbackResponse(BaseModel):
    """Public view of an approved entry, without the email"""
    id: str
    name: str
    message: str
    type: str
    created_at: datetime

    class Config:
        from_attributes = True

class ApprovalUpdate(BaseModel):
    is_approved: bool

class ContactMessage(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    subject: str = Field(min_length=2, max_length=200)
    message: str = Field(min_length=10, max_length=2000)
