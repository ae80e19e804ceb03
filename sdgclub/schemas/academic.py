"""
Academic hierarchy Pydantic schemas
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .common import reject_null

class CollegeCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    display_order: Optional[int] = None

class CollegeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    display_order: Optional[int] = None

    check_required = field_validator("name", mode="before")(reject_null)

class FacultyCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    college_id: Optional[str] = None
    display_order: Optional[int] = None

class FacultyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    display_order: Optional[int] = None

    check_required = field_validator("name", mode="before")(reject_null)

class FacultyReparent(BaseModel):
    """college_id of None makes the faculty standalone"""
    college_id: Optional[str] = None

class DepartmentCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    faculty_id: str
    display_order: Optional[int] = None

class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    faculty_id: Optional[str] = None
    display_order: Optional[int] = None

    check_required = field_validator("name", "faculty_id", mode="before")(reject_null)

class DepartmentResponse(BaseModel):
    id: str
    name: str
    faculty_id: str
    display_order: Optional[int] = None

    class Config:
        from_attributes = True

class FacultyResponse(BaseModel):
    id: str
    name: str
    college_id: Optional[str] = None
    display_order: Optional[int] = None

    class Config:
        from_attributes = True

class CollegeResponse(BaseModel):
    id: str
    name: str
    display_order: Optional[int] = None

    class Config:
        from_attributes = True
