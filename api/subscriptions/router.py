"""
Email subscription endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response

from core import mailer
from core.db import Database, get_db

from . import repository, schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/subscriptions")
async def list_subscriptions(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_subscriptions(db)


@router.get("/subscriptions/active")
async def list_active_subscriptions(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_subscriptions(db, active_only=True)


@router.post("/subscriptions", status_code=201)
async def subscribe(
    payload: schemas.SubscribeRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    db: Database = Depends(get_db),
) -> dict:
    logger.info("Received subscription request email=%s", payload.email_address)
    body, created = await service.subscribe(db, payload.email_address)
    if created:
        background_tasks.add_task(mailer.send_subscription_welcome, to=payload.email_address)
    else:
        response.status_code = 200
    return body


@router.get("/subscriptions/unsubscribe")
async def unsubscribe_by_query(
    email: str | None = Query(default=None),
    db: Database = Depends(get_db),
) -> dict:
    logger.info("Received unsubscribe request email=%s", email)
    return await service.unsubscribe(db, email)


@router.get("/subscriptions/unsubscribe/{email}")
async def unsubscribe(email: str, db: Database = Depends(get_db)) -> dict:
    logger.info("Received unsubscribe request email=%s", email)
    return await service.unsubscribe(db, email)


@router.delete("/subscriptions/{subscription_id}")
async def delete_subscription(subscription_id: int, db: Database = Depends(get_db)) -> dict:
    return await service.delete(db, subscription_id)
