"""
Email subscription business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas

logger = logging.getLogger(__name__)


async def subscribe(db: Database, email_address: str) -> tuple[dict, bool]:
    """
    Subscribe `email_address`; returns the response body and whether a new
    subscription row was created.
    """
    existing = await repository.get_by_email(db, email_address)
    if existing is not None:
        if not bool(existing.get("is_active")):
            await repository.set_active(db, email_address, True)
            logger.info("Reactivated subscription for %s", email_address)
            return {"status": "success", "message": "Your subscription has been reactivated"}, False
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This email is already subscribed",
        )

    subscription_id = await repository.create_subscription(db, email_address)
    logger.info("New subscription id=%s for %s", subscription_id, email_address)
    body = {
        "status": "success",
        "message": "You have been successfully subscribed to email alerts",
        "id": subscription_id,
    }
    return body, True


async def unsubscribe(db: Database, email_address: str | None) -> dict:
    email = schemas.normalize_email(email_address or "")
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email address is required")

    affected = await repository.set_active(db, email, False)
    if affected == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email address not found in our subscription list",
        )
    return {"status": "success", "message": "You have been unsubscribed from email alerts"}


async def delete(db: Database, subscription_id: int) -> dict:
    affected = await repository.delete_subscription(db, subscription_id)
    if affected == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")
    return {"id": subscription_id, "message": "Subscription deleted successfully"}
