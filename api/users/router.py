"""
User endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users", response_model=list[schemas.UserListItem])
async def list_users(db: Database = Depends(get_db)) -> list[schemas.UserListItem]:
    logger.info("Received list users request")
    return await service.list_users(db)


@router.post("/user/register", response_model=schemas.RegisterResponse, status_code=201)
async def register(payload: schemas.RegisterRequest, db: Database = Depends(get_db)) -> schemas.RegisterResponse:
    logger.info("Received register user request username=%s", payload.username)
    return await service.register(db, payload)


@router.post("/user/login", response_model=schemas.UserResponse)
async def login(payload: schemas.LoginRequest, db: Database = Depends(get_db)) -> schemas.UserResponse:
    logger.info("Received login request username=%s", payload.username)
    return await service.login(db, payload)


@router.put("/user/{user_id}")
async def update_user(user_id: int, payload: schemas.UpdateRequest, db: Database = Depends(get_db)) -> dict:
    logger.info("Received update user request id=%s", user_id)
    return await service.update(db, user_id, payload)


@router.delete("/user/{user_id}")
async def delete_user(user_id: int, db: Database = Depends(get_db)) -> dict:
    logger.info("Received delete user request id=%s", user_id)
    return await service.delete(db, user_id)
