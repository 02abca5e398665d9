"""
Email subscription persistence (raw SQL).
"""

from __future__ import annotations

from core.db import Database


async def list_subscriptions(db: Database, *, active_only: bool = False) -> list[dict]:
    if active_only:
        return await db.fetch_all(
            "SELECT * FROM email_subscriptions WHERE is_active = true ORDER BY subscription_date DESC, id DESC"
        )
    return await db.fetch_all("SELECT * FROM email_subscriptions ORDER BY subscription_date DESC, id DESC")


async def get_by_email(db: Database, email_address: str) -> dict | None:
    return await db.fetch_one(
        "SELECT * FROM email_subscriptions WHERE lower(email_address) = lower($1)",
        email_address,
    )


async def create_subscription(db: Database, email_address: str) -> int:
    row = await db.fetch_one(
        "INSERT INTO email_subscriptions (email_address) VALUES ($1) RETURNING id",
        email_address,
    )
    if row is None:
        raise RuntimeError("Failed to create subscription.")
    return int(row["id"])


async def set_active(db: Database, email_address: str, is_active: bool) -> int:
    return await db.execute(
        """
        UPDATE email_subscriptions
        SET is_active = $2,
            unsubscribe_date = CASE WHEN $2 THEN NULL ELSE now() END
        WHERE lower(email_address) = lower($1)
        """,
        email_address,
        is_active,
    )


async def delete_subscription(db: Database, subscription_id: int) -> int:
    return await db.execute("DELETE FROM email_subscriptions WHERE id = $1", subscription_id)
