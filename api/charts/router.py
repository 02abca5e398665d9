"""
Chart API endpoints.

All routes accept the artisan filters as query parameters, for example
`/charts/gender?division=Lahore&avg_monthly_income=10000-20000`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from core.db import Database, get_db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/charts")


@router.get("/dashboard")
async def get_dashboard(request: Request, db: Database = Depends(get_db)) -> dict:
    logger.info("Received dashboard request filters=%s", dict(request.query_params))
    return await service.get_dashboard(db, dict(request.query_params))


@router.get("/all")
async def get_all_charts(request: Request, db: Database = Depends(get_db)) -> dict:
    logger.info("Received all charts request filters=%s", dict(request.query_params))
    return await service.get_all_charts(db, dict(request.query_params))


@router.get("/yes-no/{field}")
async def get_yes_no_distribution(field: str, request: Request, db: Database = Depends(get_db)) -> list[dict]:
    logger.info("Received yes/no chart request field=%s", field)
    return await service.get_yes_no_distribution(db, field, dict(request.query_params))


@router.get("/{chart_name}")
async def get_chart(chart_name: str, request: Request, db: Database = Depends(get_db)) -> list[dict]:
    logger.info("Received chart request chart=%s", chart_name)
    return await service.get_chart(db, chart_name, dict(request.query_params))


@router.get("/{chart_name}/{group_by}")
async def get_grouped_chart(
    chart_name: str,
    group_by: str,
    request: Request,
    db: Database = Depends(get_db),
) -> list[dict]:
    logger.info("Received chart request chart=%s groupBy=%s", chart_name, group_by)
    return await service.get_chart(db, chart_name, dict(request.query_params), group_by=group_by)
