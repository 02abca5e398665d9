"""
Reference table business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException
from pydantic import BaseModel

from core.db import Database

from . import repository

logger = logging.getLogger(__name__)

_LABELS = {
    repository.CRAFTS.name: "Craft",
    repository.CATEGORIES.name: "Category",
    repository.TECHNIQUES.name: "Technique",
    repository.EDUCATION_LEVELS.name: "Education level",
    repository.EMPLOYMENT_TYPES.name: "Employment type",
    repository.GEO_LEVELS.name: "Geo level",
}


def _not_found(table: repository.Table, row_id: int) -> HTTPException:
    label = _LABELS.get(table.name, table.name)
    logger.warning("%s %s not found.", label, row_id)
    return HTTPException(status_code=404, detail=f"{label} not found")


async def create(db: Database, table: repository.Table, payload: BaseModel) -> dict:
    row_id = await repository.insert(db, table, payload.model_dump())
    logger.info("Created %s id=%s", table.name, row_id)
    return {"id": row_id}


async def update(db: Database, table: repository.Table, row_id: int, payload: BaseModel) -> dict:
    affected = await repository.update(db, table, row_id, payload.model_dump())
    if affected == 0:
        raise _not_found(table, row_id)
    return {"id": row_id}


async def delete(db: Database, table: repository.Table, row_id: int) -> dict:
    affected = await repository.delete(db, table, row_id)
    if affected == 0:
        raise _not_found(table, row_id)
    return {"id": row_id, "deleted": True}
