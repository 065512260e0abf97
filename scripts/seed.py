#!/usr/bin/env python3
"""Seed the conversation store with a sample FAQ conversation."""
import asyncio

import structlog

from api.features.chat.models import Sender
from api.features.chat.repository import (
    ConversationStore,
    PostgresConversationStore,
    SqliteConversationStore,
)
from core.logging_config import configure_logging
from core.settings import SETTINGS
from infra.db_utils import DatabaseManager

logger = structlog.get_logger("support_chat.seed")

FAQ_DATA = {
    "shipping": (
        "We offer free shipping on orders over $50. Standard shipping takes 3-5 business days, "
        "express shipping takes 1-2 business days. We ship to all US states and most "
        "international locations."
    ),
    "returns": (
        "We accept returns within 30 days of purchase. Items must be in original condition "
        "with tags attached. Return shipping is free for defective items, $5 for other returns."
    ),
    "support": (
        "Our customer support is available Monday-Friday 9AM-6PM EST. You can reach us via "
        "this chat, email at support@techstore.com, or phone at 1-800-TECHSTORE."
    ),
    "payment": (
        "We accept all major credit cards, PayPal, Apple Pay, and Google Pay. All transactions "
        "are secure and encrypted."
    ),
    "sizing": (
        "Please check the specifications on each product page. Free exchanges are available "
        "within 30 days."
    ),
}


async def seed(store: ConversationStore) -> str:
    """Create one sample conversation and return its id."""
    await store.initialize()
    conversation_id = await store.create_conversation()
    await store.append_message(conversation_id, Sender.USER, "What is your shipping policy?")
    await store.append_message(conversation_id, Sender.AI, FAQ_DATA["shipping"])
    await store.touch_conversation(conversation_id)
    return conversation_id


async def main() -> None:
    configure_logging(SETTINGS.APP)
    database = await DatabaseManager.get_resource()
    store_cls = (
        SqliteConversationStore
        if SETTINGS.DATABASE.STORE_BACKEND == "sqlite"
        else PostgresConversationStore
    )
    try:
        logger.info("seeding_database", backend=SETTINGS.DATABASE.STORE_BACKEND)
        conversation_id = await seed(store_cls(database))
        logger.info("database_seeded", conversation_id=conversation_id)
        print(f"Sample conversation ID: {conversation_id}")
    finally:
        await DatabaseManager.reset()


if __name__ == "__main__":
    asyncio.run(main())
