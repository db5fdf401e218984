"""Error kinds raised by the chat service and its collaborators."""

from __future__ import annotations


class ChatError(Exception):
    """Base class for chat service errors."""


class InvalidArgument(ChatError, ValueError):
    """Malformed input such as empty message text or a negative page size."""


class NotFound(ChatError, LookupError):
    """No chat exists for the requested id."""

    def __init__(self, chat_id: str) -> None:
        super().__init__(f"No chat found for id '{chat_id}'")
        self.chat_id = chat_id


class GenerationFailure(ChatError):
    """The generation backend could not produce a completion."""


class BackendUnavailable(GenerationFailure):
    """The generation backend could not be reached or timed out."""


class BackendError(GenerationFailure):
    """The generation backend answered with an error or a malformed payload."""


class ContentDecodeError(ValueError):
    """A tagged message content payload could not be decoded."""
