"""
Inquiry persistence (raw SQL).
"""

from __future__ import annotations

from core.db import Database

from . import schemas

_COLUMNS = (
    "full_name",
    "email_address",
    "phone_number",
    "desired_country",
    "current_education_level",
    "message",
)


def _values(inquiry: schemas.InquiryIn) -> list:
    data = inquiry.model_dump()
    return [data[column] for column in _COLUMNS]


async def list_inquiries(db: Database) -> list[dict]:
    return await db.fetch_all("SELECT * FROM inquiry_requests ORDER BY created_at DESC, id DESC")


async def get_inquiry(db: Database, inquiry_id: int) -> dict | None:
    return await db.fetch_one("SELECT * FROM inquiry_requests WHERE id = $1", inquiry_id)


async def create_inquiry(db: Database, inquiry: schemas.InquiryIn) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO inquiry_requests (
            full_name, email_address, phone_number,
            desired_country, current_education_level, message
        )
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING id
        """,
        *_values(inquiry),
    )
    if row is None:
        raise RuntimeError("Failed to create inquiry.")
    return int(row["id"])


async def update_inquiry(db: Database, inquiry_id: int, inquiry: schemas.InquiryIn) -> int:
    return await db.execute(
        """
        UPDATE inquiry_requests
        SET full_name = $1,
            email_address = $2,
            phone_number = $3,
            desired_country = $4,
            current_education_level = $5,
            message = $6
        WHERE id = $7
        """,
        *_values(inquiry),
        inquiry_id,
    )


async def delete_inquiry(db: Database, inquiry_id: int) -> int:
    return await db.execute("DELETE FROM inquiry_requests WHERE id = $1", inquiry_id)
