"""In-memory conversation store.

The store is the single shared mutable resource of the service.  A single
lock guards the chat index, the id counter and every append, and all reads
hand out snapshots taken under that lock so callers never observe a chat
in the middle of an append.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace
from typing import Dict, List

from .errors import InvalidArgument, NotFound
from .models import Chat, Message

logger = logging.getLogger(__name__)


class ConversationStore:
    """Process-lifetime mapping from chat id to :class:`Chat`."""

    def __init__(self) -> None:
        self._chats: Dict[str, Chat] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._chats)

    def list(self, offset: int, limit: int) -> List[Chat]:
        """Return chats in creation order, sliced to ``[offset, offset + limit)``."""
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            raise InvalidArgument("limit must be a non-negative integer")
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise InvalidArgument("offset must be an integer")
        if offset < 0:
            return []

        with self._lock:
            chats = list(self._chats.values())[offset : offset + limit]
            return [chat.snapshot() for chat in chats]

    def get(self, chat_id: str) -> Chat:
        with self._lock:
            return self._require(chat_id).snapshot()

    def create(self, name: str) -> Chat:
        """Store a new empty chat under a freshly allocated id."""
        with self._lock:
            chat_id = f"chat-{next(self._ids)}"
            # Ids are never reused, but fixtures may have inserted one by hand.
            while chat_id in self._chats:
                chat_id = f"chat-{next(self._ids)}"
            chat = Chat(id=chat_id, name=name)
            self._chats[chat_id] = chat
            logger.debug("Created chat %s (%s)", chat_id, name)
            return chat.snapshot()

    def append_message(self, chat_id: str, message: Message) -> Chat:
        """Append ``message`` to the chat and return the updated snapshot."""
        with self._lock:
            chat = self._require(chat_id)
            if chat.messages and message.created_at < chat.messages[-1].created_at:
                message = replace(message, created_at=chat.messages[-1].created_at)
            chat.messages.append(message)
            logger.debug("Appended %s message %s to chat %s", message.role.value, message.id, chat_id)
            return chat.snapshot()

    def delete(self, chat_id: str) -> Chat:
        with self._lock:
            chat = self._require(chat_id)
            del self._chats[chat_id]
            logger.debug("Deleted chat %s", chat_id)
            return chat.snapshot()

    def _require(self, chat_id: str) -> Chat:
        chat = self._chats.get(chat_id)
        if chat is None:
            raise NotFound(chat_id)
        return chat
