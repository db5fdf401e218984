"""Configuration objects for the chat service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class GenerationConfig:
    """Text-generation backend connection details."""

    endpoint: str = "http://localhost:11434/api/generate"
    model: str = "llama3"
    request_timeout: int = 60
    options: Dict[str, object] = field(default_factory=dict)


@dataclass
class ChatConfig:
    """Runtime controls for chat behaviour."""

    generation: GenerationConfig = field(default_factory=GenerationConfig)
    default_chat_name: str = "New Chat"
    default_page_size: int = 10
    fallback_text: str = "no response"
    mock_chats: int = 0
    document_cache_size: int = 256
