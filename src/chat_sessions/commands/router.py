from __future__ import annotations

from collections.abc import Awaitable, Callable


class CommandRouter:
    def __init__(
        self,
        *,
        on_help: Callable[[], Awaitable[None]],
        on_session: Callable[[str], Awaitable[None]],
        on_history: Callable[[], Awaitable[None]],
        on_unknown: Callable[[str], None],
    ) -> None:
        self._on_help = on_help
        self._on_session = on_session
        self._on_history = on_history
        self._on_unknown = on_unknown

    async def try_handle(self, user_input: str) -> bool:
        trimmed = user_input.strip()
        if not trimmed.startswith("/"):
            return False

        if trimmed == "/help":
            await self._on_help()
            return True
        if trimmed == "/history":
            await self._on_history()
            return True
        if trimmed == "/session" or trimmed.startswith("/session "):
            await self._on_session(trimmed)
            return True

        self._on_unknown(trimmed)
        return True
