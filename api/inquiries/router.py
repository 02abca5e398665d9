"""
Inquiry endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from core import mailer
from core.db import Database, get_db

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/inquiries")
async def list_inquiries(db: Database = Depends(get_db)) -> list[dict]:
    logger.info("Received list inquiries request")
    return await repository.list_inquiries(db)


@router.get("/inquiries/{inquiry_id}")
async def get_inquiry(inquiry_id: int, db: Database = Depends(get_db)) -> dict:
    row = await repository.get_inquiry(db, inquiry_id)
    if row is None:
        logger.warning("Inquiry %s not found.", inquiry_id)
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return row


@router.post("/inquiries", status_code=201)
async def create_inquiry(
    payload: schemas.InquiryIn,
    background_tasks: BackgroundTasks,
    db: Database = Depends(get_db),
) -> dict:
    """
    Store an inquiry and email a confirmation after the response is sent.
    """
    logger.info("Received create inquiry request email=%s", payload.email_address)
    inquiry_id = await repository.create_inquiry(db, payload)
    background_tasks.add_task(
        mailer.send_inquiry_confirmation,
        to=payload.email_address,
        full_name=payload.full_name,
    )
    return {"id": inquiry_id, "message": "Inquiry created successfully"}


@router.put("/inquiries/{inquiry_id}")
async def update_inquiry(inquiry_id: int, payload: schemas.InquiryIn, db: Database = Depends(get_db)) -> dict:
    affected = await repository.update_inquiry(db, inquiry_id, payload)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return {"id": inquiry_id, "message": "Inquiry updated successfully"}


@router.delete("/inquiries/{inquiry_id}")
async def delete_inquiry(inquiry_id: int, db: Database = Depends(get_db)) -> dict:
    affected = await repository.delete_inquiry(db, inquiry_id)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return {"id": inquiry_id, "message": "Inquiry deleted successfully"}
