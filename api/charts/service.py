"""
Chart data: run a registered chart against the filtered artisan view.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException

from artisans.filters import ARTISAN_FILTERS
from core.db import Database
from core.filters import apply_filters

from .definitions import ALL_CHARTS, CHARTS, DYNAMIC_GROUP_BY, YES_NO_FIELDS, ChartDefinition, yes_no_chart

logger = logging.getLogger(__name__)

BASE_WHERE = "a.is_active = true"


def resolve_chart(chart_name: str, group_by: str | None = None) -> tuple[ChartDefinition, str | None]:
    """
    Look up a chart and its grouping column, raising 404/400 for bad names.
    """
    definition = CHARTS.get(chart_name)
    if definition is None or (group_by is not None and not definition.dynamic):
        label = chart_name if group_by is None else f"{chart_name}/{group_by}"
        raise HTTPException(status_code=404, detail=f"Chart '{label}' not found.")

    if not definition.dynamic:
        return definition, None

    column = DYNAMIC_GROUP_BY.get(group_by or "")
    if column is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid groupBy parameter '{group_by}'. Allowed: {sorted(DYNAMIC_GROUP_BY)}",
        )
    return definition, column


def build_chart_query(
    definition: ChartDefinition,
    filters: Mapping[str, Any],
    *,
    group_column: str | None = None,
) -> tuple[str, list[Any]]:
    select = definition.select.format(group=group_column) if definition.dynamic else definition.select
    query, params = apply_filters(
        f"SELECT {select} FROM artisans_view a WHERE {BASE_WHERE}{definition.where}",
        [],
        filters,
        ARTISAN_FILTERS,
    )

    parts = [query]
    if definition.group_by:
        parts.append(f"GROUP BY {definition.group_by}")
    if definition.order_by:
        parts.append(f"ORDER BY {definition.order_by}")
    if definition.limit:
        parts.append(f"LIMIT {int(definition.limit)}")
    return " ".join(parts), params


async def _run(
    db: Database,
    definition: ChartDefinition,
    filters: Mapping[str, Any],
    group_column: str | None = None,
) -> list[dict]:
    sql, params = build_chart_query(definition, filters, group_column=group_column)
    logger.debug("Chart %r", definition.title)
    rows = await db.fetch_all(sql, *params)
    return definition.formatter(rows)


async def get_chart(
    db: Database,
    chart_name: str,
    filters: Mapping[str, Any],
    *,
    group_by: str | None = None,
) -> list[dict]:
    definition, group_column = resolve_chart(chart_name, group_by)
    return await _run(db, definition, filters, group_column)


async def get_yes_no_distribution(db: Database, field: str, filters: Mapping[str, Any]) -> list[dict]:
    if field not in YES_NO_FIELDS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid field name '{field}'. Allowed: {list(YES_NO_FIELDS)}",
        )
    return await _run(db, yes_no_chart(field), filters)


def build_dashboard_query(filters: Mapping[str, Any]) -> tuple[str, list[Any]]:
    # The three subqueries share one filter fragment and one parameter list.
    fragment, params = apply_filters("", [], filters, ARTISAN_FILTERS)
    source = f"FROM artisans_view a WHERE {BASE_WHERE}{fragment}"
    sql = f"""
        SELECT
            (SELECT COUNT(*) {source}) AS total_active_artisans,
            (SELECT COUNT(DISTINCT a.tehsil_id) {source}) AS regions_covered,
            (SELECT COUNT(*) {source}
                AND a.created_at >= date_trunc('month', now())) AS new_registrations_this_month
    """
    return sql, params


async def get_dashboard(db: Database, filters: Mapping[str, Any]) -> dict:
    sql, params = build_dashboard_query(filters)
    row = await db.fetch_one(sql, *params) or {}
    return {
        "total_active_artisans": int(row.get("total_active_artisans") or 0),
        "regions_covered": int(row.get("regions_covered") or 0),
        "new_registrations_this_month": int(row.get("new_registrations_this_month") or 0),
    }


async def get_all_charts(db: Database, filters: Mapping[str, Any]) -> dict[str, list[dict]]:
    """
    Every chart of the dashboard in one response.

    Charts run concurrently and every one is awaited to completion; if any
    failed, the first failure in report order is raised.
    """
    tasks = []
    for chart_name, group_by in ALL_CHARTS.values():
        if chart_name == "yes-no":
            tasks.append(get_yes_no_distribution(db, group_by or "", filters))
        else:
            tasks.append(get_chart(db, chart_name, filters, group_by=group_by))

    results = await asyncio.gather(*tasks, return_exceptions=True)
    for key, result in zip(ALL_CHARTS.keys(), results):
        if isinstance(result, BaseException):
            logger.error("Chart %s failed: %s", key, result)
            raise result
    return dict(zip(ALL_CHARTS.keys(), results))
