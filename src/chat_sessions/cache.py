from __future__ import annotations

from collections.abc import Iterable

from chat_sessions.errors import SessionNotFoundError
from chat_sessions.models import Session


class SessionCache:
    """In-memory, insertion-ordered set of sessions keyed by session id.

    Single writer: there is no locking. The host must serialize calls that
    mutate the same session (one request per session at a time). Entries are
    never evicted and are only refreshed by ``replace_all``.
    """

    def __init__(self, sessions: Iterable[Session] = ()):
        self._sessions: dict[str, Session] = {}
        self.replace_all(sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def replace_all(self, sessions: Iterable[Session]) -> None:
        self._sessions = {s.session_id: s for s in sessions}

    def add(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def require(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def remove(self, session_id: str) -> Session:
        try:
            return self._sessions.pop(session_id)
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())
