"""
User business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        roles=user_row.get("roles"),
        geo_level_code=user_row.get("geo_level_code"),
        is_mobile_user=bool(user_row.get("is_mobile_user", False)),
        is_active=bool(user_row.get("is_active", True)),
        created_by=user_row.get("created_by"),
        created_at=user_row.get("created_at"),
    )


async def list_users(db: Database) -> list[schemas.UserListItem]:
    rows = await repository.list_users(db)
    return [
        schemas.UserListItem(
            **_to_user_response(row).model_dump(),
            region=row.get("region"),
            number_of_artisans=int(row.get("number_of_artisans") or 0),
        )
        for row in rows
    ]


async def register(db: Database, payload: schemas.RegisterRequest) -> schemas.RegisterResponse:
    existing = await repository.get_user_by_username(db, payload.username)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username is already registered.",
        )

    password = security.generate_password()
    user_row = await repository.create_user(
        db,
        username=payload.username,
        password_hash=security.hash_password(password),
        roles=payload.roles,
        geo_level_code=payload.geo_level_code,
        is_mobile_user=payload.is_mobile_user,
        created_by=payload.created_by,
    )
    logger.info("Registered user %s id=%s", user_row["username"], user_row["id"])
    return schemas.RegisterResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        password=password,
    )


async def update(db: Database, user_id: int, payload: schemas.UpdateRequest) -> dict:
    affected = await repository.update_user(
        db,
        user_id,
        username=payload.username,
        roles=payload.roles,
        geo_level_code=payload.geo_level_code,
        is_mobile_user=payload.is_mobile_user,
        is_active=payload.is_active,
        created_by=payload.created_by,
    )
    if affected == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"id": user_id}


async def delete(db: Database, user_id: int) -> dict:
    affected = await repository.delete_user(db, user_id)
    if affected == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"id": user_id, "deleted": True}


async def login(db: Database, payload: schemas.LoginRequest) -> schemas.UserResponse:
    user_row = await repository.get_user_by_username(db, payload.username)
    if user_row is None:
        logger.warning("Login for unknown user %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        logger.warning("Incorrect password for user %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )

    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive.",
        )

    return _to_user_response(user_row)
