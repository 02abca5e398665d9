"""
Chatbot conversation and session endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from core.db import Database, get_db

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/conversations")
async def list_conversations(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_conversations(db)


@router.get("/conversations/{session_id}")
async def list_session_conversations(session_id: str, db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_conversations_by_session(db, session_id)


@router.post("/conversations", status_code=201)
async def create_conversation(payload: schemas.ConversationIn, db: Database = Depends(get_db)) -> dict:
    logger.info("Received create conversation request session=%s", payload.session_id)
    conversation_id = await repository.create_conversation(db, payload)
    return {"id": conversation_id, "message": "Conversation created successfully"}


@router.put("/conversations/{conversation_id}")
async def update_conversation(
    conversation_id: int,
    payload: schemas.ConversationIn,
    db: Database = Depends(get_db),
) -> dict:
    affected = await repository.update_conversation(db, conversation_id, payload)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return {"id": conversation_id, "message": "Conversation updated successfully"}


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(conversation_id: int, db: Database = Depends(get_db)) -> dict:
    affected = await repository.delete_conversation(db, conversation_id)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return {"id": conversation_id, "message": "Conversation deleted successfully"}


@router.get("/sessions")
async def list_sessions(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_sessions(db)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, db: Database = Depends(get_db)) -> dict:
    row = await repository.get_session(db, session_id)
    if row is None:
        logger.warning("Session %s not found.", session_id)
        raise HTTPException(status_code=404, detail="Session not found")
    return row


@router.post("/sessions", status_code=201)
async def create_session(payload: schemas.SessionIn, db: Database = Depends(get_db)) -> dict:
    logger.info("Received create session request session=%s", payload.session_id)
    row_id = await repository.create_session(db, payload)
    return {"id": row_id, "session_id": payload.session_id, "message": "Session created successfully"}


@router.put("/sessions/{session_id}")
async def update_session(session_id: str, payload: schemas.SessionFields, db: Database = Depends(get_db)) -> dict:
    affected = await repository.update_session(db, session_id, payload)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"session_id": session_id, "message": "Session updated successfully"}


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, db: Database = Depends(get_db)) -> dict:
    affected = await repository.delete_session(db, session_id)
    if affected == 0:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"session_id": session_id, "message": "Session deleted successfully"}
