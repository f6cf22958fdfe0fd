from chat_sessions.cache import SessionCache
from chat_sessions.chat_service import ChatService
from chat_sessions.errors import ChatSessionError, MessageNotFoundError, SessionNotFoundError
from chat_sessions.models import DEFAULT_SESSION_NAME, Message, Participant, Session

__all__ = [
    "DEFAULT_SESSION_NAME",
    "ChatService",
    "ChatSessionError",
    "Message",
    "MessageNotFoundError",
    "Participant",
    "Session",
    "SessionCache",
    "SessionNotFoundError",
]
