"""
Inquiry (contact form) schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class InquiryIn(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email_address: EmailStr
    phone_number: str | None = Field(default=None, max_length=40)
    desired_country: str = Field(..., min_length=1, max_length=100)
    current_education_level: str | None = Field(default=None, max_length=100)
    message: str | None = None
