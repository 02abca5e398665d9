"""
Chatbot conversation and session schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ConversationIn(BaseModel):
    user_id: int | None = None
    message_text: str = Field(..., min_length=1)
    is_bot: bool = False
    session_id: str | None = Field(default=None, max_length=200)


class SessionFields(BaseModel):
    chat_title: str | None = Field(default=None, max_length=300)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    user_ip: str | None = Field(default=None, max_length=64)
    user_agent: str | None = None
    status: str | None = Field(default=None, max_length=50)
    tags: str | None = None
    notes: str | None = None


class SessionIn(SessionFields):
    session_id: str = Field(..., min_length=1, max_length=200)
