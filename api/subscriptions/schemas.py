"""
Email subscription schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, field_validator


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class SubscribeRequest(BaseModel):
    email_address: EmailStr

    @field_validator("email_address")
    @classmethod
    def _lower_case(cls, value: str) -> str:
        return normalize_email(value)
