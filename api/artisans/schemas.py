"""
Artisan API schemas (request models).
"""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

YesNo = Literal["Yes", "No"]

YES_NO_FIELDS = (
    "loan_status",
    "has_machinery",
    "has_training",
    "inherited_skills",
    "financial_assistance",
    "technical_assistance",
)


def to_yes_no(value: Any) -> str | None:
    """
    Normalize booleans and yes/no-ish strings to the stored 'Yes'/'No' text.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return "Yes" if value else "No"
    text = str(value).strip().lower()
    if text in {"yes", "y", "true", "1"}:
        return "Yes"
    if text in {"no", "n", "false", "0"}:
        return "No"
    raise ValueError("must be Yes/No or a boolean")


class ArtisanIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    father_name: str = Field(..., min_length=1, max_length=200)
    cnic: str = Field(..., pattern=r"^\d{13}$")
    gender: Literal["Male", "Female", "Transgender", "Other"]
    date_of_birth: dt.date
    contact_no: str = Field(..., pattern=r"^\d{11}$")
    email: EmailStr | None = None
    address: str | None = None
    tehsil_id: int | None = None
    education_level_id: int | None = None
    dependents_count: int | None = Field(default=None, ge=0)
    profile_picture: str | None = None
    ntn: str | None = None
    skill_id: int | None = None
    major_product: str | None = None
    experience: int | None = Field(default=None, ge=0)
    avg_monthly_income: float | None = Field(default=None, ge=0)
    employment_type_id: int | None = None
    raw_material: str | None = None
    crafting_method: str | None = None
    loan_status: YesNo | None = None
    has_machinery: YesNo | None = None
    has_training: YesNo | None = None
    inherited_skills: YesNo | None = None
    financial_assistance: YesNo | None = None
    technical_assistance: YesNo | None = None
    comments: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    user_id: int | None = Field(default=None, validation_alias=AliasChoices("user_id", "user_Id"))

    @field_validator(*YES_NO_FIELDS, mode="before")
    @classmethod
    def _normalize_yes_no(cls, value: Any) -> str | None:
        return to_yes_no(value)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value: Any) -> Any:
        # Forms send "" for an empty email input.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TrainingIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    duration: str | None = None
    organization: str | None = None


class LoanIn(BaseModel):
    amount: float | None = Field(default=None, ge=0)
    date: dt.date | None = None
    loan_type: str | None = None
    # Lender name.
    name: str | None = None


class MachineIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    size: str | None = None
    number_of_machines: int | None = Field(default=None, ge=0)


class ArtisanCreate(BaseModel):
    artisan: ArtisanIn
    trainings: list[TrainingIn] = Field(default_factory=list)
    loans: list[LoanIn] = Field(default_factory=list)
    machines: list[MachineIn] = Field(default_factory=list)


class ArtisanUpdate(BaseModel):
    # Absent sections are left untouched; present child lists replace the old ones.
    artisan: ArtisanIn | None = None
    trainings: list[TrainingIn] | None = None
    loans: list[LoanIn] | None = None
    machines: list[MachineIn] | None = None


def _json_field(raw: str | None, default: Any) -> Any:
    if raw is None or not raw.strip():
        return default
    return json.loads(raw)


def parse_create_form(
    *,
    artisan: str,
    trainings: str | None = None,
    loans: str | None = None,
    machines: str | None = None,
) -> ArtisanCreate:
    """
    Build an `ArtisanCreate` from multipart fields that carry JSON text.

    Raises `json.JSONDecodeError` or `pydantic.ValidationError`.
    """
    return ArtisanCreate.model_validate(
        {
            "artisan": _json_field(artisan, None),
            "trainings": _json_field(trainings, []),
            "loans": _json_field(loans, []),
            "machines": _json_field(machines, []),
        }
    )
