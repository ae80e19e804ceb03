"""
Authentication schemas
"""

from typing import Literal
from pydantic import BaseModel, EmailStr, Field, model_validator

class SignUpRequest(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

class RoleChange(BaseModel):
    role: Literal["admin", "user"]
