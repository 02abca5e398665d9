"""
Reference table endpoints: crafts, categories, techniques, education levels,
employment types and geo levels.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from core.db import Database, get_db

from . import repository, schemas, service

router = APIRouter()


# Crafts


@router.get("/crafts")
async def list_crafts(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_crafts(db)


@router.post("/crafts", status_code=201)
async def create_craft(payload: schemas.CraftIn, db: Database = Depends(get_db)) -> dict:
    return await service.create(db, repository.CRAFTS, payload)


@router.put("/crafts/{craft_id}")
async def update_craft(craft_id: int, payload: schemas.CraftIn, db: Database = Depends(get_db)) -> dict:
    return await service.update(db, repository.CRAFTS, craft_id, payload)


@router.delete("/crafts/{craft_id}")
async def delete_craft(craft_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, repository.CRAFTS, craft_id)


# Categories


@router.get("/categories")
async def list_categories(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_categories(db)


@router.post("/categories", status_code=201)
async def create_category(payload: schemas.CategoryIn, db: Database = Depends(get_db)) -> dict:
    return await service.create(db, repository.CATEGORIES, payload)


@router.put("/categories/{category_id}")
async def update_category(category_id: int, payload: schemas.CategoryIn, db: Database = Depends(get_db)) -> dict:
    return await service.update(db, repository.CATEGORIES, category_id, payload)


@router.delete("/categories/{category_id}")
async def delete_category(category_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, repository.CATEGORIES, category_id)


# Techniques (skills)


@router.get("/techniques")
async def list_techniques(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_techniques(db)


@router.post("/techniques", status_code=201)
async def create_technique(payload: schemas.TechniqueIn, db: Database = Depends(get_db)) -> dict:
    return await service.create(db, repository.TECHNIQUES, payload)


@router.put("/techniques/{technique_id}")
async def update_technique(technique_id: int, payload: schemas.TechniqueIn, db: Database = Depends(get_db)) -> dict:
    return await service.update(db, repository.TECHNIQUES, technique_id, payload)


@router.delete("/techniques/{technique_id}")
async def delete_technique(technique_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, repository.TECHNIQUES, technique_id)


# Education levels


@router.get("/education")
async def list_education_levels(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_education_levels(db)


@router.post("/education", status_code=201)
async def create_education_level(payload: schemas.EducationLevelIn, db: Database = Depends(get_db)) -> dict:
    return await service.create(db, repository.EDUCATION_LEVELS, payload)


@router.put("/education/{education_id}")
async def update_education_level(
    education_id: int,
    payload: schemas.EducationLevelIn,
    db: Database = Depends(get_db),
) -> dict:
    return await service.update(db, repository.EDUCATION_LEVELS, education_id, payload)


@router.delete("/education/{education_id}")
async def delete_education_level(education_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, repository.EDUCATION_LEVELS, education_id)


# Employment types


@router.get("/employment-types")
async def list_employment_types(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_employment_types(db)


@router.post("/employment-types", status_code=201)
async def create_employment_type(payload: schemas.EmploymentTypeIn, db: Database = Depends(get_db)) -> dict:
    return await service.create(db, repository.EMPLOYMENT_TYPES, payload)


@router.put("/employment-types/{employment_type_id}")
async def update_employment_type(
    employment_type_id: int,
    payload: schemas.EmploymentTypeIn,
    db: Database = Depends(get_db),
) -> dict:
    return await service.update(db, repository.EMPLOYMENT_TYPES, employment_type_id, payload)


@router.delete("/employment-types/{employment_type_id}")
async def delete_employment_type(employment_type_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, repository.EMPLOYMENT_TYPES, employment_type_id)


# Geo levels (hard delete)


@router.get("/geo-levels")
async def list_geo_levels(
    code_length: int | None = Query(default=None, ge=1, le=12),
    db: Database = Depends(get_db),
) -> list[dict]:
    return await repository.list_geo_levels(db, code_length=code_length)


@router.post("/geo-levels", status_code=201)
async def create_geo_level(payload: schemas.GeoLevelIn, db: Database = Depends(get_db)) -> dict:
    return await service.create(db, repository.GEO_LEVELS, payload)


@router.put("/geo-levels/{geo_level_id}")
async def update_geo_level(geo_level_id: int, payload: schemas.GeoLevelIn, db: Database = Depends(get_db)) -> dict:
    return await service.update(db, repository.GEO_LEVELS, geo_level_id, payload)


@router.delete("/geo-levels/{geo_level_id}")
async def delete_geo_level(geo_level_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, repository.GEO_LEVELS, geo_level_id)
