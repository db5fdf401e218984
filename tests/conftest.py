"""Shared fixtures: an in-memory service wired to a scripted generation client."""

from __future__ import annotations

import threading
from typing import List, Optional

import pytest

from twin_chat import ChatConfig, ChatService
from twin_chat.store import ConversationStore


class FakeGenerationClient:
    """Stands in for the HTTP client; answers ``echo: <latest user text>``."""

    def __init__(self, error: Optional[Exception] = None, reply: Optional[str] = None) -> None:
        self.error = error
        self.reply = reply
        self.prompts: List[str] = []
        self.release = threading.Event()
        self.release.set()
        self.entered = threading.Event()

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.entered.set()
        self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        if self.reply is not None:
            return self.reply
        latest = prompt.splitlines()[-2]
        return f"  echo: {latest[len('User: '):]}  "


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def service(store: ConversationStore, fake_client: FakeGenerationClient) -> ChatService:
    return ChatService(ChatConfig(), store=store, client=fake_client)
