import asyncio
import shutil
import sqlite3
import unittest
from dataclasses import replace
from pathlib import Path
from uuid import uuid4

from chat_sessions.errors import SessionNotFoundError
from chat_sessions.models import Message, Participant, Session
from chat_sessions.storage import DocumentStore, SqliteChatStore


PROJECT_ROOT = Path(__file__).resolve().parents[2]


class SqliteChatStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._documents = DocumentStore(":memory:")
        self._store = SqliteChatStore(self._documents)

    def tearDown(self) -> None:
        self._documents.close()

    def _session_with_messages(self, *texts: str) -> tuple[Session, list[Message]]:
        session = Session()
        asyncio.run(self._store.insert_session(session))
        messages = []
        for i, text in enumerate(texts):
            sender = Participant.USER if i % 2 == 0 else Participant.ASSISTANT
            message = Message(session_id=session.id, sender=sender, text=text)
            asyncio.run(self._store.insert_message(message))
            messages.append(message)
        return session, messages

    def test_list_sessions_ignores_messages(self) -> None:
        first, _ = self._session_with_messages("hi", "hello")
        second, _ = self._session_with_messages()

        sessions = asyncio.run(self._store.list_sessions())

        self.assertEqual([first.id, second.id], [s.id for s in sessions])
        self.assertTrue(all(s.id == s.session_id for s in sessions))
        self.assertTrue(all(s.messages == [] for s in sessions))

    def test_list_messages_in_insertion_order(self) -> None:
        session, messages = self._session_with_messages("one", "two", "three")
        self._session_with_messages("other")

        loaded = asyncio.run(self._store.list_messages(session.id))

        self.assertEqual(messages, loaded)

    def test_insert_duplicate_session_conflicts(self) -> None:
        session = Session()
        asyncio.run(self._store.insert_session(session))
        with self.assertRaises(sqlite3.IntegrityError):
            asyncio.run(self._store.insert_session(session))
        self.assertEqual(1, len(asyncio.run(self._store.list_sessions())))

    def test_update_session_persists_name(self) -> None:
        session, _ = self._session_with_messages()
        session.name = "Renamed"
        asyncio.run(self._store.update_session(session))

        (loaded,) = asyncio.run(self._store.list_sessions())
        self.assertEqual("Renamed", loaded.name)

    def test_update_missing_session_raises(self) -> None:
        with self.assertRaises(SessionNotFoundError):
            asyncio.run(self._store.update_session(Session()))

    def test_upsert_batch_updates_and_inserts(self) -> None:
        session, (prompt,) = self._session_with_messages("Hello")
        reply = Message(session_id=session.id, sender=Participant.ASSISTANT, text="Hi", tokens=4)

        asyncio.run(self._store.upsert_messages_batch(replace(prompt, tokens=9), reply))

        loaded = asyncio.run(self._store.list_messages(session.id))
        self.assertEqual([prompt.id, reply.id], [m.id for m in loaded])
        self.assertEqual([9, 4], [m.tokens for m in loaded])

    def test_upsert_batch_rejects_mixed_sessions(self) -> None:
        a = Message(session_id="a", sender=Participant.USER, text="x")
        b = Message(session_id="b", sender=Participant.USER, text="y")
        with self.assertRaises(ValueError):
            asyncio.run(self._store.upsert_messages_batch(a, b))

    def test_delete_cascades_to_messages_only_in_partition(self) -> None:
        doomed, _ = self._session_with_messages("a", "b")
        kept, kept_messages = self._session_with_messages("c")

        asyncio.run(self._store.delete_session_and_messages(doomed.id))

        self.assertEqual([kept.id], [s.id for s in asyncio.run(self._store.list_sessions())])
        self.assertEqual([], asyncio.run(self._store.list_messages(doomed.id)))
        self.assertEqual(kept_messages, asyncio.run(self._store.list_messages(kept.id)))


class DocumentStoreFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp_dir = PROJECT_ROOT / ".test-artifacts" / f"{self.__class__.__name__.lower()}-{uuid4().hex}"

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp_dir, ignore_errors=True)

    def test_data_survives_reopen(self) -> None:
        db_path = str(self._tmp_dir / "nested" / "chat.db")
        documents = DocumentStore(db_path)
        session = Session(name="Persisted")
        asyncio.run(SqliteChatStore(documents).insert_session(session))
        documents.close()

        reopened = DocumentStore(db_path)
        try:
            (loaded,) = asyncio.run(SqliteChatStore(reopened).list_sessions())
        finally:
            reopened.close()
        self.assertEqual((session.id, "Persisted"), (loaded.id, loaded.name))

    def test_failed_transaction_rolls_back(self) -> None:
        documents = DocumentStore(str(self._tmp_dir / "chat.db"))
        try:
            with self.assertRaises(RuntimeError):
                with documents.transaction():
                    documents.execute(
                        "INSERT INTO items (id, session_id, type, body_json) VALUES ('x', 'x', 'Session', '{}')"
                    )
                    raise RuntimeError("boom")
            row = documents.execute("SELECT COUNT(*) AS c FROM items").fetchone()
            self.assertEqual(0, int(row["c"]))
        finally:
            documents.close()


if __name__ == "__main__":
    unittest.main()
