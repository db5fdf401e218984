"""Chat orchestration service fronting a text-generation backend.

Chats and their messages live in an in-memory
:class:`~twin_chat.store.ConversationStore`.  Sending a message appends the
user turn, renders the transcript into a prompt for an Ollama-style
generation endpoint and threads the reply back into the conversation.  The
primary entry points are ``twin_chat.api.create_app`` for running the
GraphQL HTTP service and ``twin_chat.service.ChatService`` for embedding the
chat engine directly into Python code.
"""

from .config import ChatConfig, GenerationConfig
from .service import ChatService

__all__ = ["ChatConfig", "GenerationConfig", "ChatService"]
