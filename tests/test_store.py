import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from src.database.models.conversation import (
    Conversation,
    ConversationNotFound,
    Turn,
    build_turns,
)
from src.database.models.user_chats import (
    UserChats,
    UserChatsNotFound,
    make_title,
)


def test_build_turns_with_question():
    turns = build_turns("q", "a")

    assert [turn.to_dict() for turn in turns] == [
        {"role": "user", "parts": [{"text": "q"}]},
        {"role": "model", "parts": [{"text": "a"}]},
    ]


def test_build_turns_without_question():
    for question in (None, ""):
        turns = build_turns(question, "a", img={"filePath": "/ignored.png"})

        assert [turn.to_dict() for turn in turns] == [
            {"role": "model", "parts": [{"text": "a"}]}
        ]


def test_make_title():
    assert make_title("hello") == "hello"
    assert make_title("x" * 100) == "x" * 40
    assert make_title("") == ""
    assert make_title("abcdef", max_length=3) == "abc"


@pytest.mark.asyncio
async def test_start_stores_single_user_turn():
    conversation = await Conversation.start("u1", "hello")

    stored = await Conversation.get_collection().find_one(
        {"_id": ObjectId(conversation.id)}
    )
    assert stored["user_id"] == "u1"
    assert stored["history"] == [{"role": "user", "parts": [{"text": "hello"}]}]
    assert "timestamp" in stored and "updated_at" in stored


@pytest.mark.asyncio
async def test_find_owned_filters_on_owner():
    conversation = await Conversation.start("u1", "hello")

    found = await Conversation.find_owned(conversation.id, "u1")
    assert found.id == conversation.id

    with pytest.raises(ConversationNotFound):
        await Conversation.find_owned(conversation.id, "u2")
    with pytest.raises(ConversationNotFound):
        await Conversation.find_owned("definitely-not-an-object-id", "u1")


@pytest.mark.asyncio
async def test_append_turns_reports_matches():
    conversation = await Conversation.start("u1", "hello")

    ack = await Conversation.append_turns(conversation.id, "u1", [Turn.model("hi")])
    assert (ack.matched_count, ack.modified_count) == (1, 1)

    foreign = await Conversation.append_turns(conversation.id, "u2", [Turn.model("x")])
    assert foreign.matched_count == 0

    malformed = await Conversation.append_turns("nope", "u1", [Turn.model("x")])
    assert malformed.matched_count == 0

    found = await Conversation.find_owned(conversation.id, "u1")
    assert [turn.role for turn in found.history] == ["user", "model"]


@pytest.mark.asyncio
async def test_append_turns_keeps_history_order():
    conversation = await Conversation.start("u1", "0")

    for i in range(1, 4):
        await Conversation.append_turns(
            conversation.id, "u1", build_turns(f"q{i}", f"a{i}")
        )

    found = await Conversation.find_owned(conversation.id, "u1")
    assert [turn.parts[0].text for turn in found.history] == [
        "0", "q1", "a1", "q2", "a2", "q3", "a3",
    ]


@pytest.mark.asyncio
async def test_list_for_unknown_owner_raises():
    with pytest.raises(UserChatsNotFound):
        await UserChats.list_for_owner("nobody")


@pytest.mark.asyncio
async def test_ensure_and_append_creates_then_extends():
    await UserChats.ensure_and_append("u1", "c1", "first")
    await UserChats.ensure_and_append("u1", "c2", "second")

    chats = await UserChats.list_for_owner("u1")
    assert [(chat.id, chat.title) for chat in chats] == [
        ("c1", "first"),
        ("c2", "second"),
    ]
    assert await UserChats.get_collection().count_documents({"user_id": "u1"}) == 1


@pytest.mark.asyncio
async def test_ensure_and_append_concurrently_keeps_one_entry():
    await asyncio.gather(
        *(UserChats.ensure_and_append("u1", f"c{i}", f"t{i}") for i in range(5))
    )

    assert await UserChats.get_collection().count_documents({"user_id": "u1"}) == 1
    chats = await UserChats.list_for_owner("u1")
    assert sorted(chat.id for chat in chats) == [f"c{i}" for i in range(5)]


@pytest.mark.asyncio
async def test_ensure_and_append_is_a_single_upsert(monkeypatch):
    collection = MagicMock()
    collection.update_one = AsyncMock(return_value=MagicMock(upserted_id=None))
    collection.find_one = AsyncMock()
    monkeypatch.setattr(UserChats, "get_collection", classmethod(lambda cls: collection))

    await UserChats.ensure_and_append("u1", "c1", "first")

    collection.find_one.assert_not_called()
    collection.update_one.assert_awaited_once()
    args, kwargs = collection.update_one.call_args
    query, update = args
    assert query == {"user_id": "u1"}
    assert kwargs == {"upsert": True}
    assert update["$push"]["chats"]["id"] == "c1"
    assert update["$push"]["chats"]["title"] == "first"
    assert "timestamp" in update["$setOnInsert"]


@pytest.mark.asyncio
async def test_user_id_index_rejects_second_entry():
    await UserChats.ensure_and_append("u1", "c1", "first")

    with pytest.raises(DuplicateKeyError):
        await UserChats.get_collection().insert_one({"user_id": "u1", "chats": []})


def test_user_turn_keeps_empty_image_reference():
    turns = build_turns("q", "a", img={})

    assert turns[0].to_dict() == {"role": "user", "parts": [{"text": "q"}], "img": {}}
