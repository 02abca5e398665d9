"""
Chatbot persistence (raw SQL).
"""

from __future__ import annotations

from core.db import Database

from . import schemas

SESSION_FIELDS = (
    "chat_title",
    "description",
    "start_time",
    "end_time",
    "user_ip",
    "user_agent",
    "status",
    "tags",
    "notes",
)


async def list_conversations(db: Database) -> list[dict]:
    return await db.fetch_all("SELECT * FROM chatbot_conversations ORDER BY timestamp, id")


async def list_conversations_by_session(db: Database, session_id: str) -> list[dict]:
    return await db.fetch_all(
        "SELECT * FROM chatbot_conversations WHERE session_id = $1 ORDER BY timestamp, id",
        session_id,
    )


async def create_conversation(db: Database, conversation: schemas.ConversationIn) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO chatbot_conversations (user_id, message_text, is_bot, session_id)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        conversation.user_id,
        conversation.message_text,
        conversation.is_bot,
        conversation.session_id,
    )
    if row is None:
        raise RuntimeError("Failed to create conversation.")
    return int(row["id"])


async def update_conversation(db: Database, conversation_id: int, conversation: schemas.ConversationIn) -> int:
    return await db.execute(
        """
        UPDATE chatbot_conversations
        SET user_id = $1,
            message_text = $2,
            is_bot = $3,
            session_id = $4,
            timestamp = now()
        WHERE id = $5
        """,
        conversation.user_id,
        conversation.message_text,
        conversation.is_bot,
        conversation.session_id,
        conversation_id,
    )


async def delete_conversation(db: Database, conversation_id: int) -> int:
    return await db.execute("DELETE FROM chatbot_conversations WHERE id = $1", conversation_id)


async def list_sessions(db: Database) -> list[dict]:
    return await db.fetch_all("SELECT * FROM chat_sessions ORDER BY created_at DESC, id DESC")


async def get_session(db: Database, session_id: str) -> dict | None:
    return await db.fetch_one("SELECT * FROM chat_sessions WHERE session_id = $1", session_id)


async def create_session(db: Database, session: schemas.SessionIn) -> int:
    data = session.model_dump()
    columns = ("session_id", *SESSION_FIELDS)
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO chat_sessions ({", ".join(columns)})
        VALUES ({placeholders})
        RETURNING id
        """,
        *[data[column] for column in columns],
    )
    if row is None:
        raise RuntimeError("Failed to create session.")
    return int(row["id"])


async def update_session(db: Database, session_id: str, session: schemas.SessionFields) -> int:
    data = session.model_dump()
    assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(SESSION_FIELDS, start=1))
    return await db.execute(
        f"""
        UPDATE chat_sessions
        SET {assignments},
            updated_at = now()
        WHERE session_id = ${len(SESSION_FIELDS) + 1}
        """,
        *[data[column] for column in SESSION_FIELDS],
        session_id,
    )


async def delete_session(db: Database, session_id: str) -> int:
    return await db.execute("DELETE FROM chat_sessions WHERE session_id = $1", session_id)
