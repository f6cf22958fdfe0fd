from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from chat_sessions.errors import MessageNotFoundError

DEFAULT_SESSION_NAME = "New Chat"

SESSION_TYPE = "Session"
MESSAGE_TYPE = "Message"


def utc_now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def new_id() -> str:
    return str(uuid4())


class Participant(str, Enum):
    USER = "User"
    ASSISTANT = "Assistant"


@dataclass(frozen=True)
class Message:
    """One turn of a conversation.

    Frozen: token updates build a copy with ``dataclasses.replace`` and swap
    it into the owning session with ``Session.update_message``.
    """

    session_id: str
    sender: Participant
    text: str
    tokens: int = 0
    id: str = field(default_factory=new_id)
    timestamp: str = field(default_factory=utc_now)
    type: str = MESSAGE_TYPE

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "sessionId": self.session_id,
            "timeStamp": self.timestamp,
            "sender": self.sender.value,
            "tokens": self.tokens,
            "text": self.text,
        }

    @classmethod
    def from_document(cls, doc: dict) -> Message:
        return cls(
            id=doc["id"],
            type=doc.get("type", MESSAGE_TYPE),
            session_id=doc["sessionId"],
            timestamp=doc.get("timeStamp", ""),
            sender=Participant(doc["sender"]),
            tokens=int(doc.get("tokens") or 0),
            text=doc.get("text", ""),
        )


@dataclass(eq=False)
class Session:
    id: str = field(default_factory=new_id)
    name: str = DEFAULT_SESSION_NAME
    type: str = SESSION_TYPE
    session_id: str = ""
    messages: list[Message] = field(default_factory=list)

    def __post_init__(self) -> None:
        # The id doubles as the partition key.
        if not self.session_id:
            self.session_id = self.id
        elif self.session_id != self.id:
            raise ValueError(f"session_id {self.session_id!r} must equal id {self.id!r}")

    def add_message(self, message: Message) -> None:
        self.messages.append(message)

    def update_message(self, message: Message) -> None:
        positions = [i for i, m in enumerate(self.messages) if m.id == message.id]
        if len(positions) != 1:
            raise MessageNotFoundError(message.id, len(positions))
        self.messages[positions[0]] = message

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "sessionId": self.session_id,
            "name": self.name,
        }

    @classmethod
    def from_document(cls, doc: dict) -> Session:
        return cls(
            id=doc["id"],
            type=doc.get("type", SESSION_TYPE),
            session_id=doc.get("sessionId") or doc["id"],
            name=doc.get("name") or DEFAULT_SESSION_NAME,
        )
