class ChatSessionError(Exception):
    """Base class for errors raised by the chat session layer."""


class SessionNotFoundError(ChatSessionError, LookupError):
    def __init__(self, session_id: str):
        super().__init__(f"Session does not exist: {session_id}")
        self.session_id = session_id


class MessageNotFoundError(ChatSessionError, LookupError):
    def __init__(self, message_id: str, matches: int = 0):
        if matches:
            detail = f"expected exactly one match, found {matches}"
        else:
            detail = "no match"
        super().__init__(f"Message {message_id}: {detail}")
        self.message_id = message_id
        self.matches = matches
