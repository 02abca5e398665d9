"""
Chart registry: the one place where dashboard reports are declared.

Every chart reads `artisans_view a` restricted to active artisans, accepts the
artisan filters, then groups/orders by output column position. Ordinals keep
the `name` alias from resolving to the artisan's own `name` column.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import formatters

DYNAMIC_GROUP_BY = {
    "skill": "a.skill_name",
    "craft": "a.craft_name",
    "category": "a.category_name",
}

YES_NO_FIELDS = (
    "loan_status",
    "has_machinery",
    "has_training",
    "inherited_skills",
    "financial_assistance",
    "technical_assistance",
)

AGE_BINS = ("0-12", "13-18", "19-24", "25-30", "31-40", "41-50", "51-60", "60+")
INCOME_BINS = ("0-10000", "10001-20000", "20001-30000", "30001-50000", "50000+")
EXPERIENCE_BINS = ("0-2", "3-5", "6-10", "11-20", "20+")
DEPENDENTS_BINS = ("0-2", "3-5", "6+")

_AGE = "date_part('year', age(current_date, a.date_of_birth))"


@dataclass(frozen=True)
class ChartDefinition:
    title: str
    # For dynamic charts `select` holds a `{group}` slot for the grouping column.
    select: str
    formatter: formatters.Formatter
    group_by: str | None = None
    order_by: str | None = None
    limit: int | None = None
    where: str = ""
    dynamic: bool = False


def _simple(title: str, column: str) -> ChartDefinition:
    return ChartDefinition(
        title=title,
        select=f"{column} AS name, COUNT(*) AS value",
        group_by="1",
        order_by="2 DESC, 1",
        formatter=formatters.simple_distribution,
    )


def _stacked(title: str, primary: str, stack: str) -> ChartDefinition:
    return ChartDefinition(
        title=title,
        select=f"{primary} AS name, {stack} AS stack_value, COUNT(*) AS value",
        group_by="1, 2",
        order_by="1, 2",
        formatter=formatters.stacked("name", "stack_value"),
    )


def _binned(title: str, case_sql: str, labels: tuple[str, ...]) -> ChartDefinition:
    return ChartDefinition(
        title=title,
        select=f"{case_sql} AS name, COUNT(*) AS value",
        group_by="1",
        formatter=formatters.binned_distribution(labels),
    )


_AGE_CASE = f"""CASE
    WHEN a.date_of_birth IS NULL THEN 'Unknown'
    WHEN {_AGE} <= 12 THEN '0-12'
    WHEN {_AGE} <= 18 THEN '13-18'
    WHEN {_AGE} <= 24 THEN '19-24'
    WHEN {_AGE} <= 30 THEN '25-30'
    WHEN {_AGE} <= 40 THEN '31-40'
    WHEN {_AGE} <= 50 THEN '41-50'
    WHEN {_AGE} <= 60 THEN '51-60'
    ELSE '60+' END"""

_INCOME_CASE = """CASE
    WHEN a.avg_monthly_income IS NULL THEN 'Unknown'
    WHEN a.avg_monthly_income <= 10000 THEN '0-10000'
    WHEN a.avg_monthly_income <= 20000 THEN '10001-20000'
    WHEN a.avg_monthly_income <= 30000 THEN '20001-30000'
    WHEN a.avg_monthly_income <= 50000 THEN '30001-50000'
    ELSE '50000+' END"""

_EXPERIENCE_CASE = """CASE
    WHEN a.experience IS NULL THEN 'Unknown'
    WHEN a.experience <= 2 THEN '0-2'
    WHEN a.experience <= 5 THEN '3-5'
    WHEN a.experience <= 10 THEN '6-10'
    WHEN a.experience <= 20 THEN '11-20'
    ELSE '20+' END"""

_DEPENDENTS_CASE = """CASE
    WHEN a.dependents_count IS NULL THEN 'Unknown'
    WHEN a.dependents_count <= 2 THEN '0-2'
    WHEN a.dependents_count <= 5 THEN '3-5'
    ELSE '6+' END"""

_MONTHLY_SELECT = "to_char(a.created_at, 'YYYY-MM') AS month, COUNT(*) AS count"

CHARTS: dict[str, ChartDefinition] = {
    "gender": _simple("Gender Distribution", "a.gender"),
    "education": _simple("Education Distribution", "a.education_name"),
    "employment-type": _simple("Employment Type Distribution", "a.employment_type"),
    "raw-material": _simple("Raw Material Distribution", "a.raw_material"),
    "division": _simple("Division Distribution", "a.division_name"),
    "district": _simple("District Distribution", "a.district_name"),
    "tehsil": _simple("Tehsil Distribution", "a.tehsil_name"),
    "distribution": ChartDefinition(
        title="Dynamic Distribution",
        select="{group} AS name, COUNT(*) AS value",
        group_by="1",
        order_by="2 DESC, 1",
        formatter=formatters.simple_distribution,
        dynamic=True,
    ),
    "top-distribution": ChartDefinition(
        title="Top 5 Dynamic Distribution",
        select="{group} AS name, COUNT(*) AS value",
        group_by="1",
        order_by="2 DESC, 1",
        limit=5,
        formatter=formatters.simple_distribution,
        dynamic=True,
    ),
    "average-income-by": ChartDefinition(
        title="Average Income By Group",
        select="{group} AS name, ROUND(AVG(a.avg_monthly_income)::numeric, 2) AS value",
        group_by="1",
        order_by="2 DESC NULLS LAST, 1",
        formatter=formatters.average_income,
        dynamic=True,
    ),
    "distribution-by-employment": ChartDefinition(
        title="Dynamic Distribution by Employment",
        select="{group} AS name, a.employment_type AS stack_value, COUNT(*) AS value",
        group_by="1, 2",
        order_by="1, 2",
        formatter=formatters.stacked("name", "stack_value"),
        dynamic=True,
    ),
    "gender-by-tehsil": _stacked("Gender by Tehsil", "a.tehsil_name", "a.gender"),
    "gender-by-district": _stacked("Gender by District", "a.district_name", "a.gender"),
    "age": _binned("Age Distribution", _AGE_CASE, AGE_BINS),
    "income": _binned("Income Distribution", _INCOME_CASE, INCOME_BINS),
    "experience": _binned("Experience Distribution", _EXPERIENCE_CASE, EXPERIENCE_BINS),
    "dependents": _binned("Dependents Distribution", _DEPENDENTS_CASE, DEPENDENTS_BINS),
    "registrations-time": ChartDefinition(
        title="Registrations Over Time",
        select=_MONTHLY_SELECT,
        group_by="1",
        order_by="1",
        formatter=formatters.time_series,
    ),
    "cumulative-registrations": ChartDefinition(
        title="Cumulative Registrations",
        select=_MONTHLY_SELECT,
        group_by="1",
        order_by="1",
        formatter=formatters.cumulative,
    ),
    "experience-vs-income": ChartDefinition(
        title="Experience vs Income",
        select="a.experience AS experience, a.avg_monthly_income AS income",
        order_by="1, 2",
        formatter=formatters.scatter,
    ),
    "geographical": ChartDefinition(
        title="Geographical Distribution",
        select="a.latitude AS latitude, a.longitude AS longitude, a.name AS name, a.father_name AS father_name",
        where=" AND a.latitude IS NOT NULL AND a.longitude IS NOT NULL",
        order_by="3, 4",
        formatter=formatters.geographical,
    ),
}


def yes_no_chart(field: str) -> ChartDefinition:
    """
    Distribution of one yes/no column. `field` must already be whitelisted.
    """
    return _simple(f"{field} Distribution", f"a.{field}")


# Key in the combined report -> (chart name, groupBy) or ("yes-no", field).
ALL_CHARTS: dict[str, tuple[str, str | None]] = {
    "genderDistribution": ("gender", None),
    "educationDistribution": ("education", None),
    "skillDistribution": ("distribution", "skill"),
    "employmentTypeDistribution": ("employment-type", None),
    "tehsilDistribution": ("tehsil", None),
    "loanStatusDistribution": ("yes-no", "loan_status"),
    "hasMachineryDistribution": ("yes-no", "has_machinery"),
    "hasTrainingDistribution": ("yes-no", "has_training"),
    "averageIncomeBySkill": ("average-income-by", "skill"),
    "ageDistribution": ("age", None),
    "experienceDistribution": ("experience", None),
    "incomeDistribution": ("income", None),
    "dependentsDistribution": ("dependents", None),
    "genderByTehsil": ("gender-by-tehsil", None),
    "skillByEmploymentType": ("distribution-by-employment", "skill"),
    "registrationsOverTime": ("registrations-time", None),
    "cumulativeRegistrations": ("cumulative-registrations", None),
    "experienceVsIncome": ("experience-vs-income", None),
    "geographicalDistribution": ("geographical", None),
}
