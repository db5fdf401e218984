"""Demo chats for local development against a fresh server."""

from __future__ import annotations

import logging
import random
from datetime import timedelta
from typing import List, Optional, Tuple

from .models import Message, Role, new_message_id, utcnow
from .store import ConversationStore

logger = logging.getLogger(__name__)

IMAGE_POOL = (
    "https://static.vecteezy.com/system/resources/thumbnails/036/324/708/small/ai-generated-picture-of-a-tiger-walking-in-the-forest-photo.jpg",
    "https://images.ctfassets.net/hrltx12pl8hq/28ECAQiPJZ78hxatLTa7Ts/2f695d869736ae3b0de3e56ceaca3958/free-nature-images.jpg?fit=fill&w=1200&h=630",
    "https://pbs.twimg.com/profile_images/632568635970576384/uTvv9oXs_400x400.jpg",
    "https://picsum.photos/id/237/256/256",
)


def random_image_urls(rng: random.Random) -> Tuple[str, ...]:
    """Pick zero to three distinct images from the pool."""
    return tuple(rng.sample(IMAGE_POOL, rng.randint(0, 3)))


def seed_mock_chats(
    store: ConversationStore,
    count: int = 30,
    messages_per_chat: int = 5,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Create ``count`` chats of alternating user/assistant turns.

    Returns the ids of the created chats in creation order.
    """
    rng = rng or random.Random()
    now = utcnow()
    chat_ids: List[str] = []

    for i in range(1, count + 1):
        chat = store.create(f"Mock Chat {i}")
        for j in range(1, messages_per_chat + 1):
            asked_at = now - timedelta(minutes=messages_per_chat - j)
            store.append_message(
                chat.id,
                Message(
                    id=new_message_id(),
                    role=Role.USER,
                    text=f"User message {j} in Chat {i}",
                    image_urls=random_image_urls(rng),
                    created_at=asked_at,
                ),
            )
            store.append_message(
                chat.id,
                Message(
                    id=new_message_id(),
                    role=Role.ASSISTANT,
                    text=f"Assistant reply {j} in Chat {i}",
                    image_urls=random_image_urls(rng),
                    created_at=asked_at + timedelta(seconds=30),
                ),
            )
        chat_ids.append(chat.id)

    logger.info("Seeded %d mock chat(s) with %d exchange(s) each", count, messages_per_chat)
    return chat_ids
