"""
Artisan API endpoints.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from core import streaming, uploads
from core.db import Database, get_db

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()


def _validation_errors(exc: ValidationError) -> list[dict]:
    return exc.errors(include_url=False, include_context=False)


@router.get("/artisans")
async def list_artisans(request: Request, db: Database = Depends(get_db)) -> list[dict]:
    """
    List active artisans. Accepts every artisan filter as a query parameter.
    """
    logger.info("Received list artisans request filters=%s", dict(request.query_params))
    return await service.list_artisans(db, dict(request.query_params))


@router.get("/artisans/{artisan_id}")
async def get_artisan(
    artisan_id: int,
    include_inactive: bool = Query(default=False),
    db: Database = Depends(get_db),
) -> dict:
    logger.info("Received get artisan request id=%s", artisan_id)
    return await service.get_artisan(db, artisan_id, include_inactive=include_inactive)


@router.post("/artisans")
async def create_artisan(
    request: Request,
    artisan: str = Form(...),
    trainings: str | None = Form(default=None),
    loans: str | None = Form(default=None),
    machines: str | None = Form(default=None),
    profile_picture: UploadFile | None = File(default=None),
    product_images: list[UploadFile] | None = File(default=None),
    shop_images: list[UploadFile] | None = File(default=None),
    db: Database = Depends(get_db),
) -> Response:
    """
    Create an artisan with its child records, streaming progress as SSE.

    `artisan`, `trainings`, `loans` and `machines` are JSON text fields.
    """
    logger.info("Received create artisan request")
    try:
        payload = schemas.parse_create_form(
            artisan=artisan,
            trainings=trainings,
            loans=loans,
            machines=machines,
        )
    except json.JSONDecodeError as exc:
        return streaming.rejected(request, message=f"Invalid JSON in form field: {exc.msg}")
    except ValidationError as exc:
        return streaming.rejected(request, message="Validation failed", errors=_validation_errors(exc))

    staged: list[uploads.StagedFile] = []
    try:
        staged_profile = None
        if profile_picture is not None and profile_picture.filename:
            staged_profile = await uploads.stage_upload(profile_picture)
            staged.append(staged_profile)
        staged_products = await uploads.stage_uploads(product_images)
        staged.extend(staged_products)
        staged_shop = await uploads.stage_uploads(shop_images)
        staged.extend(staged_shop)
    except HTTPException as exc:
        uploads.discard_all(staged)
        return streaming.rejected(request, message=str(exc.detail))

    events = service.create_artisan(
        db,
        payload,
        profile_picture=staged_profile,
        product_images=staged_products,
        shop_images=staged_shop,
    )
    return streaming.event_stream(events, name="artisans.create")


@router.put("/artisans/{artisan_id}")
async def update_artisan(
    artisan_id: int,
    request: Request,
    db: Database = Depends(get_db),
) -> Response:
    """
    Update an artisan and replace the child sections present in the body.
    """
    logger.info("Received update artisan request id=%s", artisan_id)
    try:
        body = await request.json()
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError for bodies that are not UTF-8
        return streaming.rejected(request, message=f"Invalid JSON body: {exc}")

    try:
        payload = schemas.ArtisanUpdate.model_validate(body)
    except ValidationError as exc:
        return streaming.rejected(request, message="Validation failed", errors=_validation_errors(exc))

    return streaming.event_stream(service.update_artisan(db, artisan_id, payload), name="artisans.update")


@router.delete("/artisans/{artisan_id}")
async def delete_artisan(artisan_id: int, db: Database = Depends(get_db)) -> dict:
    logger.info("Received delete artisan request id=%s", artisan_id)
    return await service.soft_delete_artisan(db, artisan_id)
