from __future__ import annotations

from loguru import logger

from chat_sessions.chat_service import ChatService
from chat_sessions.commands.router import CommandRouter
from chat_sessions.errors import SessionNotFoundError
from chat_sessions.models import DEFAULT_SESSION_NAME, Participant, Session

_SESSION_USAGE = (
    "Usage: /session | /session list | /session new | /session open <id> | "
    "/session name <name> | /session delete [id]"
)


def short_id(session_id: str) -> str:
    return session_id[:8]


class ChatConsole:
    """Line-oriented front end over ``ChatService`` with one active session."""

    _LINE_PREFIX = "chat> "

    def __init__(self, chat_service: ChatService):
        self._chat_service = chat_service
        self._active_session_id: str | None = None
        self._command_router = CommandRouter(
            on_help=self._on_help,
            on_session=self._handle_session_command,
            on_history=self._handle_history_command,
            on_unknown=self._on_unknown_command,
        )

    @property
    def active_session_id(self) -> str | None:
        return self._active_session_id

    async def start(self) -> None:
        """Load the session list and resume the first stored session, if any."""
        sessions = await self._chat_service.get_all_chat_sessions()
        if sessions:
            self._active_session_id = sessions[0].session_id
            logger.info(f"Resuming session {self._active_session_id}")

    async def handle_input(self, user_input: str) -> None:
        if await self._command_router.try_handle(user_input):
            return
        await self._send_prompt(user_input.strip())

    async def _send_prompt(self, prompt: str) -> None:
        if self._active_session_id is None:
            session = await self._chat_service.create_new_chat_session()
            self._active_session_id = session.session_id

        session_id = self._active_session_id
        # Loads stored history before the prompt is appended to the cache.
        history = await self._chat_service.get_chat_session_messages(session_id)
        first_exchange = not history

        response = await self._chat_service.ask(session_id, prompt)
        print(f"assistant> {response}")

        session = self._find_cached(session_id)
        if first_exchange and session is not None and session.name == DEFAULT_SESSION_NAME:
            name = await self._chat_service.summarize_chat_session_name(session_id, prompt)
            print(f"{self._LINE_PREFIX}Session named: {name}")

    async def _on_help(self) -> None:
        print(f"{self._LINE_PREFIX}Available commands:")
        print(f"{self._LINE_PREFIX}- /help")
        print(f"{self._LINE_PREFIX}- /history")
        print(f"{self._LINE_PREFIX}- /session")
        print(f"{self._LINE_PREFIX}- /session list")
        print(f"{self._LINE_PREFIX}- /session new")
        print(f"{self._LINE_PREFIX}- /session open <id>")
        print(f"{self._LINE_PREFIX}- /session name <name>")
        print(f"{self._LINE_PREFIX}- /session delete [id]")

    def _on_unknown_command(self, trimmed: str) -> None:
        print(f"{self._LINE_PREFIX}Unknown local command: {trimmed}")

    async def _handle_history_command(self) -> None:
        if self._active_session_id is None:
            print(f"{self._LINE_PREFIX}No active session")
            return
        messages = await self._chat_service.get_chat_session_messages(self._active_session_id)
        if not messages:
            print(f"{self._LINE_PREFIX}No messages yet.")
            return
        for m in messages:
            speaker = "you" if m.sender is Participant.USER else "assistant"
            print(f"{speaker}> {m.text} ({m.tokens} tokens)")

    async def _handle_session_command(self, command: str) -> None:
        parts = command.split()
        if len(parts) == 1:
            session = self._find_cached(self._active_session_id) if self._active_session_id else None
            if session is None:
                print(f"{self._LINE_PREFIX}Current session: none")
                return
            print(f"{self._LINE_PREFIX}Current session: {session.name} (id={session.session_id})")
            return

        action = parts[1]
        argument = command.partition(action)[2].strip()

        if action == "list" and not argument:
            sessions = await self._chat_service.get_all_chat_sessions()
            if not sessions:
                print(f"{self._LINE_PREFIX}No sessions found.")
                return
            print(f"{self._LINE_PREFIX}Sessions:")
            for s in sessions:
                marker = "*" if s.session_id == self._active_session_id else " "
                print(f"{marker} {short_id(s.session_id)}  {s.name}  (id={s.session_id})")
            return

        if action == "new" and not argument:
            session = await self._chat_service.create_new_chat_session()
            self._active_session_id = session.session_id
            print(f"{self._LINE_PREFIX}Started new session: {session.name} (id={session.session_id})")
            return

        if action == "open" and argument:
            session = self._resolve(argument)
            if session is None:
                print(f"{self._LINE_PREFIX}Session not found: {argument}")
                return
            self._active_session_id = session.session_id
            messages = await self._chat_service.get_chat_session_messages(session.session_id)
            print(f"{self._LINE_PREFIX}Opened session {session.name} (id={session.session_id}, {len(messages)} messages)")
            return

        if action == "name" and argument:
            if self._active_session_id is None:
                print(f"{self._LINE_PREFIX}No active session to name")
                return
            await self._chat_service.rename_chat_session(self._active_session_id, argument)
            print(f"{self._LINE_PREFIX}Session named: {argument}")
            return

        if action == "delete":
            target = self._resolve(argument) if argument else self._find_cached(self._active_session_id or "")
            if target is None:
                print(f"{self._LINE_PREFIX}Session not found: {argument or 'none active'}")
                return
            try:
                await self._chat_service.delete_chat_session(target.session_id)
            except SessionNotFoundError as ex:
                print(f"{self._LINE_PREFIX}{ex}")
                return
            if target.session_id == self._active_session_id:
                self._active_session_id = None
            print(f"{self._LINE_PREFIX}Deleted session {target.name} (id={target.session_id})")
            return

        print(f"{self._LINE_PREFIX}{_SESSION_USAGE}")

    def _find_cached(self, session_id: str) -> Session | None:
        for s in self._chat_service.cached_sessions():
            if s.session_id == session_id:
                return s
        return None

    def _resolve(self, identifier: str) -> Session | None:
        """Match a full id first, then a unique id prefix."""
        exact = self._find_cached(identifier)
        if exact is not None:
            return exact
        matches = [s for s in self._chat_service.cached_sessions() if s.session_id.startswith(identifier)]
        if len(matches) == 1:
            return matches[0]
        return None
