from __future__ import annotations

import json
from typing import Protocol, runtime_checkable

from loguru import logger

from chat_sessions.errors import SessionNotFoundError
from chat_sessions.models import MESSAGE_TYPE, SESSION_TYPE, Message, Session
from chat_sessions.storage.document_store import DocumentStore


@runtime_checkable
class ChatStore(Protocol):
    """Durable copy of sessions and messages, partitioned by session id."""

    async def list_sessions(self) -> list[Session]: ...

    async def list_messages(self, session_id: str) -> list[Message]: ...

    async def insert_session(self, session: Session) -> Session: ...

    async def update_session(self, session: Session) -> Session: ...

    async def insert_message(self, message: Message) -> Message: ...

    async def upsert_messages_batch(self, *messages: Message) -> None: ...

    async def delete_session_and_messages(self, session_id: str) -> None: ...


class SqliteChatStore:
    """ChatStore over a DocumentStore. The sqlite3 calls run inline and block the event loop."""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def list_sessions(self) -> list[Session]:
        rows = self._store.execute(
            "SELECT body_json FROM items WHERE type = ? ORDER BY rowid ASC",
            (SESSION_TYPE,),
        ).fetchall()
        return [Session.from_document(json.loads(row["body_json"])) for row in rows]

    async def list_messages(self, session_id: str) -> list[Message]:
        rows = self._store.execute(
            """
            SELECT body_json
            FROM items
            WHERE session_id = ? AND type = ?
            ORDER BY rowid ASC
            """,
            (session_id, MESSAGE_TYPE),
        ).fetchall()
        logger.debug(f"Loaded {len(rows)} message(s) for session {session_id}")
        return [Message.from_document(json.loads(row["body_json"])) for row in rows]

    async def insert_session(self, session: Session) -> Session:
        with self._store.transaction():
            self._insert(session.session_id, session.id, session.type, session.to_document())
        return session

    async def update_session(self, session: Session) -> Session:
        with self._store.transaction():
            cursor = self._store.execute(
                "UPDATE items SET body_json = ? WHERE session_id = ? AND id = ? AND type = ?",
                (_dumps(session.to_document()), session.session_id, session.id, SESSION_TYPE),
            )
            if cursor.rowcount == 0:
                raise SessionNotFoundError(session.session_id)
        return session

    async def insert_message(self, message: Message) -> Message:
        with self._store.transaction():
            self._insert(message.session_id, message.id, message.type, message.to_document())
        return message

    async def upsert_messages_batch(self, *messages: Message) -> None:
        partitions = {m.session_id for m in messages}
        if len(partitions) > 1:
            raise ValueError(f"Batch spans more than one session: {sorted(partitions)}")

        with self._store.transaction():
            self._store.executemany(
                """
                INSERT INTO items (id, session_id, type, body_json)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (session_id, id) DO UPDATE SET body_json = excluded.body_json
                """,
                [(m.id, m.session_id, m.type, _dumps(m.to_document())) for m in messages],
            )

    async def delete_session_and_messages(self, session_id: str) -> None:
        with self._store.transaction():
            cursor = self._store.execute(
                "DELETE FROM items WHERE session_id = ?",
                (session_id,),
            )
        logger.debug(f"Deleted {cursor.rowcount} item(s) in session {session_id}")

    def _insert(self, session_id: str, item_id: str, item_type: str, doc: dict) -> None:
        self._store.execute(
            "INSERT INTO items (id, session_id, type, body_json) VALUES (?, ?, ?, ?)",
            (item_id, session_id, item_type, _dumps(doc)),
        )


def _dumps(doc: dict) -> str:
    return json.dumps(doc, ensure_ascii=True)
