import uuid

import pytest

from api.features.chat.exceptions import ConversationStoreError
from api.features.chat.models import Sender
from api.features.chat.repository import SqliteConversationStore
from infra.resources import DatabaseResource


async def test_create_conversation_mints_uuid(store):
    conv_id = await store.create_conversation()
    assert str(uuid.UUID(conv_id)) == conv_id
    assert await store.conversation_exists(conv_id)


async def test_create_conversation_adopts_given_id(store):
    conv_id = await store.create_conversation("client-chosen-id")
    assert conv_id == "client-chosen-id"
    assert await store.conversation_exists("client-chosen-id")
    assert not await store.conversation_exists("someone-else")


async def test_list_messages_in_turn_order(store):
    conv_id = await store.create_conversation()
    for i in range(3):
        await store.append_message(conv_id, Sender.USER, f"question {i}")
        await store.append_message(conv_id, Sender.AI, f"answer {i}")

    messages = await store.list_messages(conv_id)

    assert [m.text for m in messages] == [
        "question 0", "answer 0", "question 1", "answer 1", "question 2", "answer 2",
    ]
    assert [m.sender for m in messages] == [Sender.USER, Sender.AI] * 3
    timestamps = [m.timestamp for m in messages]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == len(timestamps)
    assert all(m.conversation_id == conv_id for m in messages)
    assert all(m.timestamp.tzinfo is not None for m in messages)


async def test_list_messages_empty_for_new_conversation(store):
    conv_id = await store.create_conversation()
    assert await store.list_messages(conv_id) == []
    assert await store.list_messages("never-created") == []


async def test_messages_are_scoped_to_their_conversation(store):
    a = await store.create_conversation()
    b = await store.create_conversation()
    await store.append_message(a, Sender.USER, "hello from a")
    await store.append_message(b, Sender.USER, "hello from b")

    assert [m.text for m in await store.list_messages(a)] == ["hello from a"]
    assert [m.text for m in await store.list_messages(b)] == ["hello from b"]


async def test_touch_conversation_moves_updated_at(store, db_path):
    import sqlite3

    conv_id = await store.create_conversation()
    await store.touch_conversation(conv_id)

    with sqlite3.connect(db_path) as conn:
        created_at, updated_at = conn.execute(
            "SELECT created_at, updated_at FROM conversations WHERE id = ?", (conv_id,)
        ).fetchone()
    assert updated_at > created_at


async def test_append_to_unknown_conversation_raises_store_error(store):
    with pytest.raises(ConversationStoreError) as exc_info:
        await store.append_message("missing", Sender.USER, "orphan")
    assert exc_info.value.operation == "append_message"


async def test_unreachable_database_raises_store_error(tmp_path):
    database = DatabaseResource(f"sqlite+aiosqlite:///{tmp_path}/missing-dir/chat.db")
    await database.init()
    store = SqliteConversationStore(database)
    try:
        with pytest.raises(ConversationStoreError):
            await store.initialize()
    finally:
        await database.shutdown()
