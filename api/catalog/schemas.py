"""
Reference table schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CraftIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    is_active: bool = True


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    craft_id: int
    is_active: bool = True


class TechniqueIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category_id: int
    # Hex color used by the dashboard legend.
    color: str | None = Field(default=None, max_length=32)
    is_active: bool = True


class EducationLevelIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    is_active: bool = True


class EmploymentTypeIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    is_active: bool = True


class GeoLevelIn(BaseModel):
    # 2 chars = division, 4 = district, 6 = tehsil.
    code: str = Field(..., min_length=2, max_length=6)
    name: str = Field(..., min_length=1, max_length=200)
