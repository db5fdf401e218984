"""Domain objects for chats and their messages."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple


class Role(str, Enum):
    USER = "USER"
    ASSISTANT = "ASSISTANT"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id() -> str:
    return f"msg-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Message:
    """One turn of a conversation. Messages are immutable once built."""

    id: str
    role: Role
    text: Optional[str] = None
    image_urls: Tuple[str, ...] = ()
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def build(cls, role: Role, text: Optional[str], image_urls: Tuple[str, ...] = ()) -> "Message":
        """Create a message with a fresh id stamped with the current time."""
        return cls(id=new_message_id(), role=role, text=text, image_urls=tuple(image_urls))


@dataclass
class Chat:
    """A named conversation owning an ordered list of messages."""

    id: str
    name: str
    created_at: datetime = field(default_factory=utcnow)
    messages: List[Message] = field(default_factory=list)

    def snapshot(self) -> "Chat":
        """Return a copy whose message list is detached from this chat."""
        return replace(self, messages=list(self.messages))
