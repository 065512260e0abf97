"""Conversation store: raw SQL over SQLAlchemy AsyncSession.

Every operation opens its own session and commits once, so each write is
atomic on its own and nothing spans a whole turn. Two backends share the SQL;
they differ in how timestamps travel through the driver and in who owns the
schema (Alembic for PostgreSQL, the store itself for SQLite).
"""
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import structlog
import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from api.features.chat.exceptions import ConversationStoreError
from api.features.chat.models import Message, Sender
from infra.resources import DatabaseResource

logger = structlog.get_logger("support_chat.chat.store")


class ConversationStore(ABC):
    """Durable mapping from conversation id to its ordered messages."""

    async def initialize(self) -> None:
        """Prepare the backend before the first request."""

    @abstractmethod
    async def create_conversation(self, conversation_id: Optional[str] = None) -> str:
        ...

    @abstractmethod
    async def conversation_exists(self, conversation_id: str) -> bool:
        ...

    @abstractmethod
    async def append_message(self, conversation_id: str, sender: Sender, text: str) -> str:
        ...

    @abstractmethod
    async def list_messages(self, conversation_id: str) -> List[Message]:
        ...

    @abstractmethod
    async def touch_conversation(self, conversation_id: str) -> None:
        ...


class SqlConversationStore(ConversationStore):
    """Shared SQL for the `conversations` / `messages` table pair."""

    def __init__(self, database: DatabaseResource):
        self.database = database
        self._last_timestamp: Optional[datetime] = None

    def _next_timestamp(self) -> datetime:
        # Strictly increasing so a reply never sorts before its user turn
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _encode_timestamp(self, value: datetime) -> Any:
        return value

    def _decode_timestamp(self, value: Any) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    async def _execute(
        self,
        operation: str,
        sql: str,
        params: Dict[str, Any],
        *,
        fetch: bool = False,
    ) -> List[Dict[str, Any]]:
        try:
            async with self.database.get_session() as session:
                res = await session.execute(sa.text(sql), params)
                rows = [dict(r) for r in res.mappings().all()] if fetch else []
                await session.commit()
                return rows
        except (SQLAlchemyError, OSError) as e:
            logger.error("store_operation_failed", operation=operation, error=str(e))
            raise ConversationStoreError(operation, str(e)) from e

    async def create_conversation(self, conversation_id: Optional[str] = None) -> str:
        conv_id = conversation_id or str(uuid.uuid4())
        now = self._encode_timestamp(self._next_timestamp())
        await self._execute(
            "create_conversation",
            """
            INSERT INTO conversations (id, created_at, updated_at)
            VALUES (:id, :created_at, :updated_at)
            """,
            {"id": conv_id, "created_at": now, "updated_at": now},
        )
        logger.info("conversation_created", conversation_id=conv_id, adopted=conversation_id is not None)
        return conv_id

    async def conversation_exists(self, conversation_id: str) -> bool:
        rows = await self._execute(
            "conversation_exists",
            "SELECT id FROM conversations WHERE id = :id",
            {"id": conversation_id},
            fetch=True,
        )
        return bool(rows)

    async def append_message(self, conversation_id: str, sender: Sender, text: str) -> str:
        msg_id = str(uuid.uuid4())
        await self._execute(
            "append_message",
            """
            INSERT INTO messages (id, conversation_id, sender, text, timestamp)
            VALUES (:id, :conversation_id, :sender, :text, :timestamp)
            """,
            {
                "id": msg_id,
                "conversation_id": conversation_id,
                "sender": Sender(sender).value,
                "text": text,
                "timestamp": self._encode_timestamp(self._next_timestamp()),
            },
        )
        return msg_id

    async def list_messages(self, conversation_id: str) -> List[Message]:
        rows = await self._execute(
            "list_messages",
            """
            SELECT id, conversation_id, sender, text, timestamp
            FROM messages
            WHERE conversation_id = :conversation_id
            ORDER BY timestamp ASC
            """,
            {"conversation_id": conversation_id},
            fetch=True,
        )
        return [
            Message(
                id=str(r["id"]),
                conversation_id=str(r["conversation_id"]),
                sender=Sender(r["sender"]),
                text=r["text"],
                timestamp=self._decode_timestamp(r["timestamp"]),
            )
            for r in rows
        ]

    async def touch_conversation(self, conversation_id: str) -> None:
        await self._execute(
            "touch_conversation",
            "UPDATE conversations SET updated_at = :updated_at WHERE id = :id",
            {"id": conversation_id, "updated_at": self._encode_timestamp(self._next_timestamp())},
        )


class PostgresConversationStore(SqlConversationStore):
    """PostgreSQL backend; tables come from the Alembic migration."""

    async def initialize(self) -> None:
        await self._execute("initialize", "SELECT 1", {})


class SqliteConversationStore(SqlConversationStore):
    """SQLite backend for local development; creates its own tables."""

    # Fixed-width ISO text keeps lexical order equal to chronological order
    TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"

    SCHEMA = (
        """
        CREATE TABLE IF NOT EXISTS conversations (
            id TEXT PRIMARY KEY,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS messages (
            id TEXT PRIMARY KEY,
            conversation_id TEXT NOT NULL,
            sender TEXT NOT NULL CHECK (sender IN ('user', 'ai')),
            text TEXT NOT NULL,
            timestamp TEXT NOT NULL,
            FOREIGN KEY (conversation_id) REFERENCES conversations(id)
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_messages_conversation_id
        ON messages(conversation_id)
        """,
    )

    async def initialize(self) -> None:
        for statement in self.SCHEMA:
            await self._execute("initialize", statement, {})
        logger.info("sqlite_schema_ready", database_url=self.database.database_url)

    def _encode_timestamp(self, value: datetime) -> Any:
        return value.astimezone(timezone.utc).strftime(self.TIMESTAMP_FORMAT)

    def _decode_timestamp(self, value: Any) -> datetime:
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        return super()._decode_timestamp(value)
