"""
Artisan business logic.

`create` and `update` are async generators of progress events (see
`core/streaming.py`); the router turns them into an SSE response.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any

from fastapi import HTTPException

from core import db as db_helpers
from core import uploads
from core.db import Database
from core.streaming import complete, progress

from . import repository, schemas

logger = logging.getLogger(__name__)

_CHILD_PREFIXES = {prefix: section for section, (_alias, prefix, _cols) in repository.CHILD_TABLES.items()}


def _split_child_key(key: str) -> tuple[str, str] | None:
    prefix, sep, column = key.partition("__")
    if not sep or prefix not in _CHILD_PREFIXES:
        return None
    return _CHILD_PREFIXES[prefix], column


def collapse_artisan_rows(rows: list[dict]) -> dict | None:
    """
    Fold the LEFT JOIN rows of one artisan into a single nested object.

    Child records are de-duplicated by id in first-seen order; sections with
    no records are left out of the result.
    """
    if not rows:
        return None

    artisan: dict[str, Any] = {}
    children: dict[str, dict[Any, dict]] = {section: {} for section in repository.CHILD_TABLES}

    for index, row in enumerate(rows):
        per_section: dict[str, dict[str, Any]] = {}
        for key, value in row.items():
            split = _split_child_key(key)
            if split is None:
                if index == 0:
                    artisan[key] = value
                continue
            section, column = split
            per_section.setdefault(section, {})[column] = value

        for section, record in per_section.items():
            child_id = record.get("id")
            if child_id is None or child_id in children[section]:
                continue
            children[section][child_id] = record

    for section, records in children.items():
        if records:
            artisan[section] = list(records.values())
    return artisan


async def list_artisans(db: Database, filters: Mapping[str, Any]) -> list[dict]:
    return await repository.list_artisans(db, filters)


async def get_artisan(db: Database, artisan_id: int, *, include_inactive: bool = False) -> dict:
    rows = await repository.get_artisan_rows(db, artisan_id, include_inactive=include_inactive)
    artisan = collapse_artisan_rows(rows)
    if artisan is None:
        logger.warning("Artisan %s not found.", artisan_id)
        raise HTTPException(status_code=404, detail="Artisan not found")
    return artisan


async def create_artisan(
    db: Database,
    payload: schemas.ArtisanCreate,
    *,
    profile_picture: uploads.StagedFile | None = None,
    product_images: list[uploads.StagedFile] | None = None,
    shop_images: list[uploads.StagedFile] | None = None,
) -> AsyncIterator[dict]:
    """
    Insert the artisan row, then each child batch in turn.

    Batches are not wrapped in a transaction: a failure after the artisan row
    leaves the rows written so far in place.
    """
    product_images = product_images or []
    shop_images = shop_images or []
    try:
        yield progress("Creating artisan...")
        artisan_id = await repository.insert_artisan(db, payload.artisan, profile_picture=payload.artisan.profile_picture)
        logger.info("Artisan %s created.", artisan_id)
        if profile_picture is not None:
            # Only stored once the row exists, so a failed insert leaves no orphan file.
            profile_path = uploads.move_into_place(profile_picture, uploads.PROFILE_PICTURES, prefix="profile_picture")
            await repository.set_profile_picture(db, artisan_id, profile_path)

        yield progress("Creating trainings...")
        await repository.insert_trainings(db, artisan_id, payload.trainings)

        yield progress("Creating loans...")
        await repository.insert_loans(db, artisan_id, payload.loans)

        yield progress("Creating machines...")
        await repository.insert_machines(db, artisan_id, payload.machines)

        yield progress("Creating product images...")
        product_paths = [
            uploads.move_into_place(staged, uploads.PRODUCT_IMAGES, prefix="product_image")
            for staged in product_images
        ]
        await repository.insert_product_images(db, artisan_id, product_paths)

        yield progress("Creating shop images...")
        shop_paths = [
            uploads.move_into_place(staged, uploads.SHOP_IMAGES, prefix="shop_image")
            for staged in shop_images
        ]
        await repository.insert_shop_images(db, artisan_id, shop_paths)

        yield complete(
            status_code=201,
            id=artisan_id,
            message="Artisan and related data created successfully",
            imagePaths=product_paths,
            shopImagePaths=shop_paths,
        )
    finally:
        # Files already moved are gone from staging; this only drops leftovers.
        uploads.discard_all([profile_picture, *product_images, *shop_images])


def _write_artisan_op(artisan_id: int, artisan: schemas.ArtisanIn | None) -> Callable[[Database], Awaitable[int]]:
    async def op(tx: Database) -> int:
        if artisan is not None:
            affected = await repository.update_artisan(tx, artisan_id, artisan)
        else:
            affected = await repository.touch_artisan(tx, artisan_id)
        if affected == 0:
            raise HTTPException(status_code=404, detail="Artisan not found")
        return affected

    return op


def _replace_op(
    delete: Callable[[Database, int], Awaitable[int]],
    insert: Callable[[Database, int, list], Awaitable[int]],
    artisan_id: int,
    records: list,
) -> Callable[[Database], Awaitable[int]]:
    async def op(tx: Database) -> int:
        await delete(tx, artisan_id)
        return await insert(tx, artisan_id, records)

    return op


async def update_artisan(db: Database, artisan_id: int, payload: schemas.ArtisanUpdate) -> AsyncIterator[dict]:
    """
    Apply every section of `payload` in one transaction.

    The artisan row is written first so a missing or soft-deleted artisan
    aborts the whole update before any child table is touched.
    """
    yield progress("Updating artisan...")
    operations = [_write_artisan_op(artisan_id, payload.artisan)]

    if payload.trainings is not None:
        yield progress("Updating trainings...")
        operations.append(
            _replace_op(repository.delete_trainings, repository.insert_trainings, artisan_id, payload.trainings)
        )

    if payload.loans is not None:
        yield progress("Updating loans...")
        operations.append(_replace_op(repository.delete_loans, repository.insert_loans, artisan_id, payload.loans))

    if payload.machines is not None:
        yield progress("Updating machines...")
        operations.append(
            _replace_op(repository.delete_machines, repository.insert_machines, artisan_id, payload.machines)
        )

    await db_helpers.with_transaction(db, operations)
    logger.info("Artisan %s updated.", artisan_id)

    yield complete(
        status_code=200,
        id=artisan_id,
        message="Artisan and related data updated successfully",
    )


async def soft_delete_artisan(db: Database, artisan_id: int) -> dict:
    affected = await repository.soft_delete_artisan(db, artisan_id)
    if affected == 0:
        logger.warning("Artisan %s not found for delete.", artisan_id)
        raise HTTPException(status_code=404, detail="Artisan not found")
    return {"message": "Artisan deleted successfully", "id": artisan_id}
