"""
Request filters accepted by artisan listings and every chart.

Columns refer to `artisans_view` aliased as `a`.
"""

from __future__ import annotations

from core.filters import FilterKind, FilterSpec

_CAT = FilterKind.CATEGORICAL
_NUM = FilterKind.NUMERICAL

ARTISAN_FILTERS: dict[str, FilterSpec] = {
    "user_id": FilterSpec("a.user_id::text", _CAT),
    # Older dashboard builds send the camel-cased key.
    "user_Id": FilterSpec("a.user_id::text", _CAT),
    "division": FilterSpec("a.division_name", _CAT),
    "district": FilterSpec("a.district_name", _CAT),
    "tehsil": FilterSpec("a.tehsil_name", _CAT),
    "gender": FilterSpec("a.gender", _CAT),
    "craft": FilterSpec("a.craft_name", _CAT),
    "category": FilterSpec("a.category_name", _CAT),
    "skill": FilterSpec("a.skill_name", _CAT),
    "education": FilterSpec("a.education_name", _CAT),
    "raw_material": FilterSpec("a.raw_material", _CAT),
    "employment_type": FilterSpec("a.employment_type", _CAT),
    "crafting_method": FilterSpec("a.crafting_method", _CAT),
    "inherited_skills": FilterSpec("a.inherited_skills", _CAT),
    "has_machinery": FilterSpec("a.has_machinery", _CAT),
    "has_training": FilterSpec("a.has_training", _CAT),
    "loan_status": FilterSpec("a.loan_status", _CAT),
    "financial_assistance": FilterSpec("a.financial_assistance", _CAT),
    "technical_assistance": FilterSpec("a.technical_assistance", _CAT),
    "avg_monthly_income": FilterSpec("a.avg_monthly_income", _NUM),
    "dependents_count": FilterSpec("a.dependents_count", _NUM),
    "experience": FilterSpec("a.experience", _NUM),
}
