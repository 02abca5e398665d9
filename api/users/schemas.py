"""
User API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    roles: str = Field(default="user", max_length=200)
    geo_level_code: str | None = Field(
        default=None,
        max_length=6,
        validation_alias=AliasChoices("geo_level_code", "geoLevel_Code"),
    )
    is_mobile_user: bool = Field(default=False, validation_alias=AliasChoices("is_mobile_user", "isMobileUser"))
    created_by: int | None = Field(default=None, validation_alias=AliasChoices("created_by", "user_Id"))


class UpdateRequest(RegisterRequest):
    is_active: bool = Field(default=True, validation_alias=AliasChoices("is_active", "isActive"))


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    id: int
    username: str
    roles: str | None = None
    geo_level_code: str | None = None
    is_mobile_user: bool = False
    is_active: bool = True
    created_by: int | None = None
    created_at: datetime | None = None


class UserListItem(UserResponse):
    region: str | None = None
    number_of_artisans: int = 0


class RegisterResponse(BaseModel):
    id: int
    username: str
    # Shown once; only the bcrypt hash is stored.
    password: str
    message: str = "User registered successfully"
