from chat_sessions.storage.chat_store import ChatStore, SqliteChatStore
from chat_sessions.storage.document_store import DocumentStore

__all__ = [
    "ChatStore",
    "DocumentStore",
    "SqliteChatStore",
]
