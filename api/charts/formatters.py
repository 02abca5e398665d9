"""
Reshape flat aggregation rows into the structures the dashboard charts use.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any

UNKNOWN = "Unknown"

Formatter = Callable[[list[dict]], list[dict]]


def number(value: Any) -> int | float:
    if value is None:
        return 0
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def title_label(value: Any) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        return UNKNOWN
    return text[:1].upper() + text[1:].lower()


def _label(value: Any) -> str:
    text = "" if value is None else str(value).strip()
    return text or UNKNOWN


def simple_distribution(rows: list[dict]) -> list[dict]:
    return [{"name": title_label(row.get("name")), "value": number(row.get("value"))} for row in rows]


def binned_distribution(labels: Sequence[str]) -> Formatter:
    """
    Order bucket rows by the declared bucket order, with `Unknown` last.
    """
    order = {label: index for index, label in enumerate([*labels, UNKNOWN])}

    def format_rows(rows: list[dict]) -> list[dict]:
        buckets = [
            {"name": _label(row.get("name")), "value": number(row.get("value"))}
            for row in rows
            if number(row.get("value"))
        ]
        return sorted(buckets, key=lambda item: order.get(item["name"], len(order)))

    return format_rows


def stacked(primary_key: str = "name", stack_key: str = "stack_value") -> Formatter:
    """
    Pivot (primary, stack, value) rows into one object per primary value.

    Each object gets a field for every stack value seen in the rows; missing
    combinations are 0. Rows whose primary value is empty are dropped.
    """

    def format_rows(rows: list[dict]) -> list[dict]:
        stack_values: list[str] = []
        for row in rows:
            stack_value = row.get(stack_key)
            if stack_value not in (None, "") and stack_value not in stack_values:
                stack_values.append(stack_value)

        pivot: dict[Any, dict[str, Any]] = {}
        for row in rows:
            key = row.get(primary_key)
            if key in (None, ""):
                continue
            if key not in pivot:
                entry: dict[str, Any] = {primary_key: key}
                entry.update({value: 0 for value in stack_values})
                pivot[key] = entry
            stack_value = row.get(stack_key)
            if stack_value not in (None, ""):
                pivot[key][stack_value] = number(row.get("value"))
        return list(pivot.values())

    return format_rows


def average_income(rows: list[dict]) -> list[dict]:
    return [{"name": _label(row.get("name")), "avgIncome": number(row.get("value"))} for row in rows]


def time_series(rows: list[dict]) -> list[dict]:
    return [{"month": row.get("month"), "count": number(row.get("count"))} for row in rows]


def cumulative(rows: list[dict]) -> list[dict]:
    total = 0
    series = []
    for row in rows:
        total += number(row.get("count"))
        series.append({"month": row.get("month"), "count": total})
    return series


def scatter(rows: list[dict]) -> list[dict]:
    return [
        {"experience": number(row.get("experience")), "income": number(row.get("income"))}
        for row in rows
    ]


def geographical(rows: list[dict]) -> list[dict]:
    return [
        {
            "latitude": number(row.get("latitude")),
            "longitude": number(row.get("longitude")),
            "name": _label(row.get("name")),
            "father_name": _label(row.get("father_name")),
        }
        for row in rows
    ]
