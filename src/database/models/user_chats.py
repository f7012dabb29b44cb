from datetime import datetime
from typing import ClassVar, List, Optional
from pydantic import BaseModel, Field
from pymongo import ASCENDING
from src.config import config
from src.database.mongo_model import MongoModel, utcnow
import logging

logger = logging.getLogger(__name__)


class UserChatsNotFound(Exception):
    """No chat index entry exists for the user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"No chats found for user {user_id}")


class UserChatsCorrupted(Exception):
    """The chat index entry exists but has no ``chats`` list."""


def make_title(text: str, max_length: Optional[int] = None) -> str:
    """Leading characters of ``text``, cut without ellipsis or word boundaries."""
    if max_length is None:
        max_length = config.get_title_max_length()
    return text[:max_length]


class ChatSummary(BaseModel):
    id: str = Field(..., description="Conversation ID")
    title: str = Field(..., description="Conversation title")
    created_at: datetime = Field(
        default_factory=utcnow,
        serialization_alias="createdAt",
        description="Creation timestamp",
    )


class UserChats(MongoModel):
    """Per-user index of conversation summaries, kept for cheap listing.

    Entries are only ever appended, by the conversation creation path.
    """

    user_id: str = Field(..., description="Owner user ID")
    chats: List[ChatSummary] = Field(
        default_factory=list, description="Summaries in creation order"
    )
    updated_at: datetime = Field(
        default_factory=utcnow, description="Last update timestamp"
    )

    collection_name: ClassVar[str] = "userchats"

    @classmethod
    async def ensure_indexes(cls) -> None:
        """One index entry per user."""
        await cls.get_collection().create_index(
            [("user_id", ASCENDING)], unique=True, name="user_id_unique"
        )

    @classmethod
    async def list_for_owner(cls, user_id: str) -> List[ChatSummary]:
        """Return the user's chat summaries in creation order.

        Raises:
            UserChatsNotFound: if the user has never started a chat.
            UserChatsCorrupted: if the entry lacks its ``chats`` list.
        """
        doc = await cls.get_collection().find_one({"user_id": user_id})
        if doc is None:
            raise UserChatsNotFound(user_id)
        if doc.get("chats") is None:
            raise UserChatsCorrupted(f"Chats data is missing for user {user_id}")
        return cls.from_dict(doc).chats

    @classmethod
    async def ensure_and_append(
        cls, user_id: str, conversation_id: str, title: str
    ) -> None:
        """Append a summary, creating the user's entry if it does not exist.

        A single upsert, so concurrent first chats of one user can not
        produce two entries.
        """
        now = utcnow()
        summary = ChatSummary(id=conversation_id, title=title, created_at=now)
        result = await cls.get_collection().update_one(
            {"user_id": user_id},
            {
                "$push": {"chats": summary.model_dump()},
                "$set": {"updated_at": now},
                "$setOnInsert": {"timestamp": now},
            },
            upsert=True,
        )
        if result.upserted_id is not None:
            logger.info(f"Created chat index for user {user_id}")
