"""
User persistence helpers.
"""

from __future__ import annotations

from core.db import Database

_USER_COLUMNS = "id, username, roles, geo_level_code, is_mobile_user, is_active, created_by, created_at"


def normalize_username(username: str) -> str:
    return (username or "").strip()


async def list_users(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT u.id, u.username, u.roles, u.geo_level_code, u.is_mobile_user,
               u.is_active, u.created_by, u.created_at,
               g.name AS region,
               COUNT(DISTINCT a.id) AS number_of_artisans
        FROM users u
        LEFT JOIN artisans a ON a.user_id = u.id
        LEFT JOIN geo_level g ON g.code = u.geo_level_code
        GROUP BY u.id, g.name
        ORDER BY u.id
        """
    )


async def create_user(
    db: Database,
    *,
    username: str,
    password_hash: str,
    roles: str,
    geo_level_code: str | None,
    is_mobile_user: bool,
    created_by: int | None,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (username, password_hash, roles, geo_level_code, is_mobile_user, created_by)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING {_USER_COLUMNS}
        """,
        normalize_username(username),
        password_hash,
        roles,
        geo_level_code,
        is_mobile_user,
        created_by,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def update_user(
    db: Database,
    user_id: int,
    *,
    username: str,
    roles: str,
    geo_level_code: str | None,
    is_mobile_user: bool,
    is_active: bool,
    created_by: int | None,
) -> int:
    return await db.execute(
        """
        UPDATE users
        SET username = $1,
            roles = $2,
            geo_level_code = $3,
            is_mobile_user = $4,
            is_active = $5,
            created_by = $6
        WHERE id = $7
        """,
        normalize_username(username),
        roles,
        geo_level_code,
        is_mobile_user,
        is_active,
        created_by,
        user_id,
    )


async def delete_user(db: Database, user_id: int) -> int:
    return await db.execute("DELETE FROM users WHERE id = $1", user_id)


async def get_user_by_username(db: Database, username: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}, password_hash
        FROM users
        WHERE username = $1
        """,
        normalize_username(username),
    )
