from __future__ import annotations

from dataclasses import replace

from loguru import logger

from chat_sessions.cache import SessionCache
from chat_sessions.completion import CompletionService
from chat_sessions.models import Message, Participant, Session
from chat_sessions.storage import ChatStore

CONVERSATION_SEPARATOR = "\n"


def _require_session_id(session_id: str | None) -> str:
    if not session_id:
        raise ValueError("session_id is required")
    return session_id


class ChatService:
    """Mediates between callers, the session cache, storage and the completion model.

    The cache is written before storage on every mutation. When a storage
    call fails the cache keeps the change and the two diverge until the next
    ``get_all_chat_sessions`` refresh. Storage and completion errors are not
    caught here.

    Not safe for concurrent mutation of the same session: callers must
    serialize requests per session (see ``SessionCache``).
    """

    def __init__(
        self,
        store: ChatStore,
        completion: CompletionService,
        cache: SessionCache | None = None,
    ):
        self._store = store
        self._completion = completion
        self._cache = cache if cache is not None else SessionCache()
        # Character count, not tokens.
        self._max_conversation_length = completion.max_tokens // 2

    @property
    def max_conversation_length(self) -> int:
        return self._max_conversation_length

    def cached_sessions(self) -> list[Session]:
        return self._cache.sessions()

    async def get_all_chat_sessions(self) -> list[Session]:
        sessions = await self._store.list_sessions()
        self._cache.replace_all(sessions)
        logger.debug(f"Session cache refreshed: {len(sessions)} session(s)")
        return self._cache.sessions()

    async def get_chat_session_messages(self, session_id: str | None) -> list[Message]:
        session_id = _require_session_id(session_id)

        session = self._cache.get(session_id)
        if session is None:
            return []

        if not session.messages:
            logger.debug(f"Message cache miss for session {session_id}")
            session.messages = await self._store.list_messages(session_id)

        return session.messages

    async def create_new_chat_session(self) -> Session:
        session = Session()
        self._cache.add(session)
        await self._store.insert_session(session)
        logger.info(f"Created session {session.session_id}")
        return session

    async def rename_chat_session(self, session_id: str | None, new_name: str) -> Session:
        session_id = _require_session_id(session_id)

        session = self._cache.require(session_id)
        session.name = new_name
        await self._store.update_session(session)
        logger.info(f"Renamed session {session_id} to {new_name!r}")
        return session

    async def delete_chat_session(self, session_id: str | None) -> None:
        session_id = _require_session_id(session_id)

        self._cache.remove(session_id)
        await self._store.delete_session_and_messages(session_id)
        logger.info(f"Deleted session {session_id}")

    async def ask(self, session_id: str | None, prompt: str) -> str:
        """Send a user prompt with the session's recent history and record the reply."""
        session_id = _require_session_id(session_id)

        prompt_message = await self._add_prompt_message(session_id, prompt)

        conversation = self.get_chat_session_conversation(session_id)

        response, prompt_tokens, response_tokens = await self._completion.ask(session_id, conversation)

        await self._add_prompt_completion_messages(
            session_id,
            prompt_tokens,
            response_tokens,
            prompt_message,
            response,
        )
        return response

    def get_chat_session_conversation(self, session_id: str) -> str:
        """Join the cached message texts and keep the most recent part that fits the budget."""
        session = self._cache.require(session_id)
        conversation = CONVERSATION_SEPARATOR.join(m.text for m in session.messages)

        limit = self._max_conversation_length
        if len(conversation) > limit:
            logger.debug(f"Truncating conversation for session {session_id}: {len(conversation)} -> {limit} chars")
            return conversation[len(conversation) - limit:]
        return conversation

    async def summarize_chat_session_name(self, session_id: str | None, prompt: str) -> str:
        session_id = _require_session_id(session_id)
        self._cache.require(session_id)

        summary = await self._completion.summarize(session_id, prompt)
        await self.rename_chat_session(session_id, summary)
        return summary

    async def _add_prompt_message(self, session_id: str, prompt_text: str) -> Message:
        session = self._cache.require(session_id)
        prompt_message = Message(session_id=session_id, sender=Participant.USER, text=prompt_text)
        session.add_message(prompt_message)
        return await self._store.insert_message(prompt_message)

    async def _add_prompt_completion_messages(
        self,
        session_id: str,
        prompt_tokens: int,
        completion_tokens: int,
        prompt_message: Message,
        completion_text: str,
    ) -> None:
        session = self._cache.require(session_id)

        completion_message = Message(
            session_id=session_id,
            sender=Participant.ASSISTANT,
            text=completion_text,
            tokens=completion_tokens,
        )
        session.add_message(completion_message)

        updated_prompt_message = replace(prompt_message, tokens=prompt_tokens)
        session.update_message(updated_prompt_message)

        await self._store.upsert_messages_batch(updated_prompt_message, completion_message)
