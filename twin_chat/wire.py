"""Wire encoding for chats and messages.

Entities travel as camelCase JSON objects with ISO-8601 timestamps.  Each
message also carries its content as a list of tagged variants
(``{"type": "text" | "image", "value": ...}``), which is what clients that
render mixed text/image bubbles consume.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ContentDecodeError
from .models import Chat, Message, Role


@dataclass(frozen=True)
class TextContent:
    value: str


@dataclass(frozen=True)
class ImageContent:
    value: str


MessageContent = Union[TextContent, ImageContent]

_CONTENT_TYPES = {"text": TextContent, "image": ImageContent}


def encode_content(content: MessageContent) -> Dict[str, str]:
    if isinstance(content, TextContent):
        return {"type": "text", "value": content.value}
    if isinstance(content, ImageContent):
        return {"type": "image", "value": content.value}
    raise TypeError(f"Unsupported message content: {content!r}")


def decode_content(payload: Any) -> MessageContent:
    """Decode a ``{type, value}`` payload, rejecting unknown discriminators."""
    if not isinstance(payload, dict):
        raise ContentDecodeError("message content must be an object")
    kind = payload.get("type")
    content_cls = _CONTENT_TYPES.get(kind) if isinstance(kind, str) else None
    if content_cls is None:
        raise ContentDecodeError(f"Invalid message content type: {kind!r}")
    value = payload.get("value")
    if not isinstance(value, str):
        raise ContentDecodeError(f"message content '{kind}' requires a string value")
    return content_cls(value)


def message_contents(message: Message) -> List[MessageContent]:
    parts: List[MessageContent] = []
    if message.text is not None:
        parts.append(TextContent(message.text))
    parts.extend(ImageContent(url) for url in message.image_urls)
    return parts


class MessagePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: Optional[str] = None
    role: Role
    image_urls: List[str] = Field(default_factory=list, alias="imageUrls")
    content: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")


class ChatPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    created_at: datetime = Field(alias="createdAt")
    messages: List[MessagePayload] = Field(default_factory=list)


def _message_payload(message: Message) -> MessagePayload:
    return MessagePayload(
        id=message.id,
        text=message.text,
        role=message.role,
        image_urls=list(message.image_urls),
        content=[encode_content(part) for part in message_contents(message)],
        created_at=message.created_at,
    )


def encode_message(message: Message) -> Dict[str, Any]:
    return _message_payload(message).model_dump(mode="json", by_alias=True)


def encode_chat(chat: Chat) -> Dict[str, Any]:
    payload = ChatPayload(
        id=chat.id,
        name=chat.name,
        created_at=chat.created_at,
        messages=[_message_payload(message) for message in chat.messages],
    )
    return payload.model_dump(mode="json", by_alias=True)


def decode_message(data: Dict[str, Any]) -> Message:
    """Decode a wire message.

    When ``text``/``imageUrls`` are absent the message is rebuilt from its
    tagged ``content`` parts instead.
    """
    payload = MessagePayload.model_validate(data)
    parts = [decode_content(part) for part in payload.content]
    text = payload.text
    image_urls = list(payload.image_urls)
    if text is None and not image_urls:
        texts = [part.value for part in parts if isinstance(part, TextContent)]
        text = "\n".join(texts) if texts else None
        image_urls = [part.value for part in parts if isinstance(part, ImageContent)]
    return Message(
        id=payload.id,
        role=payload.role,
        text=text,
        image_urls=tuple(image_urls),
        created_at=payload.created_at,
    )


def decode_chat(data: Dict[str, Any]) -> Chat:
    payload = ChatPayload.model_validate(data)
    return Chat(
        id=payload.id,
        name=payload.name,
        created_at=payload.created_at,
        messages=[decode_message(message.model_dump(by_alias=True)) for message in payload.messages],
    )
