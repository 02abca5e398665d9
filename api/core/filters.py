"""
Whitelisted request filters turned into bound SQL predicates.

Each feature declares an ordered mapping of request key -> `FilterSpec`.
`apply_filters` walks that mapping and appends `AND ...` fragments to a query
that already has a WHERE clause. Values are always bound through numbered
asyncpg placeholders ($1, $2, ...); only whitelisted column names are ever
interpolated into SQL.

Categorical values are comma-separated lists:
    gender=Male,Female      -> AND a.gender IN ($1, $2)

Numerical values accept a small expression language:
    10-20  -> BETWEEN     10-  -> >=     -20 -> <=
    >10    -> >           <10  -> <      10  -> =
A dash is checked first, so negative numbers cannot be expressed.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Placeholder option shown by the dropdowns in the dashboard UI.
SELECT_SENTINEL = "select"


class FilterKind(str, Enum):
    CATEGORICAL = "categorical"
    NUMERICAL = "numerical"


@dataclass(frozen=True)
class FilterSpec:
    column: str
    kind: FilterKind


def _is_sentinel(value: str) -> bool:
    return value.strip().lower() == SELECT_SENTINEL


def _parse_number(token: str) -> int | float | None:
    token = (token or "").strip()
    if not token:
        return None
    try:
        number = float(token)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer() and "." not in token and "e" not in token.lower():
        return int(token)
    return number


def _categorical_tokens(raw_value: Any) -> list[str]:
    tokens = [part.strip() for part in str(raw_value).split(",")]
    return [t for t in tokens if t and not _is_sentinel(t)]


def _numerical_predicate(column: str, raw_value: Any, start: int) -> tuple[str, list[Any]]:
    value = str(raw_value).strip()
    if not value or _is_sentinel(value):
        return "", []

    # A dash always means a range, so ">-5" reads as "up to 5".
    if "-" in value:
        low_raw, high_raw = value.split("-", 1)
        low = _parse_number(low_raw)
        high = _parse_number(high_raw)
        if low is not None and high is not None:
            return (
                f" AND {column} BETWEEN ${start}::numeric AND ${start + 1}::numeric",
                [low, high],
            )
        if low is not None:
            return f" AND {column} >= ${start}::numeric", [low]
        if high is not None:
            return f" AND {column} <= ${start}::numeric", [high]
        return "", []

    if value.startswith(">"):
        number = _parse_number(value[1:])
        if number is None:
            return "", []
        return f" AND {column} > ${start}::numeric", [number]

    if value.startswith("<"):
        number = _parse_number(value[1:])
        if number is None:
            return "", []
        return f" AND {column} < ${start}::numeric", [number]

    number = _parse_number(value)
    if number is None:
        return "", []
    return f" AND {column} = ${start}::numeric", [number]


def apply_filter(
    query: str,
    params: list[Any],
    column: str,
    raw_value: Any,
    kind: FilterKind,
) -> tuple[str, list[Any]]:
    """
    Append one predicate for `column` and return the new (query, params).

    Unparseable or empty values leave the query unchanged. `params` is never
    mutated; a new list is returned.
    """
    if raw_value is None:
        return query, list(params)

    col = column.lower()
    start = len(params) + 1

    if kind is FilterKind.CATEGORICAL:
        tokens = _categorical_tokens(raw_value)
        if not tokens:
            return query, list(params)
        if len(tokens) == 1:
            return f"{query} AND {col} = ${start}", [*params, tokens[0]]
        placeholders = ", ".join(f"${start + i}" for i in range(len(tokens)))
        return f"{query} AND {col} IN ({placeholders})", [*params, *tokens]

    fragment, values = _numerical_predicate(col, raw_value, start)
    if not fragment:
        return query, list(params)
    return f"{query}{fragment}", [*params, *values]


def apply_filters(
    query: str,
    params: list[Any],
    filters: Mapping[str, Any],
    config: Mapping[str, FilterSpec],
) -> tuple[str, list[Any]]:
    """
    Apply every whitelisted filter present in `filters`, in `config` order.
    """
    for key, spec in config.items():
        raw_value = filters.get(key)
        if raw_value is None or raw_value == "":
            continue
        query, params = apply_filter(query, params, spec.column, raw_value, spec.kind)
    return query, list(params)
