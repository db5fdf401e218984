"""High level orchestration for chat lifecycle and message exchange."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from .config import ChatConfig
from .errors import GenerationFailure, InvalidArgument, NotFound
from .llm_client import GenerationClient
from .models import Chat, Message, Role
from .store import ConversationStore

logger = logging.getLogger(__name__)

_SPEAKERS = {Role.USER: "User", Role.ASSISTANT: "Assistant"}


def render_prompt(messages: Iterable[Message]) -> str:
    """Render a transcript as alternating turns ending with an assistant cue."""
    lines = [f"{_SPEAKERS[message.role]}: {message.text or ''}" for message in messages]
    lines.append("Assistant:")
    return "\n".join(lines)


class ChatService:
    """Core chat engine used by the API gateway and direct Python consumers.

    A ``send_message`` exchange holds the chat's exchange lock from the user
    append until the assistant append, so concurrent sends to one chat never
    interleave.  Readers go straight to the store and are not blocked while
    a reply is being generated.
    """

    def __init__(
        self,
        config: Optional[ChatConfig] = None,
        *,
        store: Optional[ConversationStore] = None,
        client: Optional[GenerationClient] = None,
    ) -> None:
        self.config = config or ChatConfig()
        self.store = store or ConversationStore()
        self.client = client or GenerationClient(self.config.generation)
        self._exchange_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def list_chats(self, first: Optional[int] = None, offset: Optional[int] = None) -> List[Chat]:
        first = self.config.default_page_size if first is None else first
        offset = 0 if offset is None else offset
        return self.store.list(offset, first)

    def get_chat(self, chat_id: str) -> Chat:
        return self.store.get(chat_id)

    def create_chat(self, name: Optional[str] = None) -> Chat:
        if name is None or not name.strip():
            name = self.config.default_chat_name
        chat = self.store.create(name)
        logger.info("Created chat %s named %r", chat.id, chat.name)
        return chat

    def delete_chat(self, chat_id: str) -> Chat:
        self.store.get(chat_id)
        try:
            with self._exchange_lock(chat_id):
                chat = self.store.delete(chat_id)
        finally:
            self._forget_lock(chat_id)
        logger.info("Deleted chat %s", chat_id)
        return chat

    def send_message(self, chat_id: str, text: str) -> Message:
        """Append a user turn, generate a reply and append it.

        Generation failures never propagate: they are replaced by a fallback
        assistant message so the caller always receives a reply.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidArgument("text must not be empty")
        self.store.get(chat_id)

        try:
            chat = self._exchange(chat_id, text)
        except NotFound:
            # The chat vanished after the lookup; drop the lock registered for it.
            self._forget_lock(chat_id)
            raise

        reply = chat.messages[-1]
        logger.info("Chat %s now holds %d message(s)", chat_id, len(chat.messages))
        return reply

    def _exchange(self, chat_id: str, text: str) -> Chat:
        with self._exchange_lock(chat_id):
            chat = self.store.append_message(chat_id, Message.build(Role.USER, text))
            prompt = render_prompt(chat.messages)

            try:
                completion = self.client.complete(prompt)
                reply_text = completion.strip()
            except GenerationFailure as exc:
                logger.warning("Generation failed for chat %s, replying with fallback: %s", chat_id, exc)
                reply_text = self.config.fallback_text
            except Exception:
                logger.exception("Unexpected generation error for chat %s, replying with fallback", chat_id)
                reply_text = self.config.fallback_text

            chat = self.store.append_message(chat_id, Message.build(Role.ASSISTANT, reply_text))
        return chat

    def _forget_lock(self, chat_id: str) -> None:
        with self._registry_lock:
            self._exchange_locks.pop(chat_id, None)

    def _exchange_lock(self, chat_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._exchange_locks.get(chat_id)
            if lock is None:
                lock = self._exchange_locks[chat_id] = threading.Lock()
            return lock
