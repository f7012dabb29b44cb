from datetime import datetime
from typing import Any, ClassVar, Dict, List, Literal, Optional
from pydantic import BaseModel, Field
from src.database.mongo_model import MongoModel, UpdateAck, parse_object_id, utcnow


class ConversationNotFound(Exception):
    """The conversation does not exist or is owned by someone else.

    Both cases are reported identically so that ids of other users'
    conversations cannot be enumerated.
    """

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation {conversation_id} not found")


class Part(BaseModel):
    text: str = Field(..., description="Plain text content")


class Turn(BaseModel):
    """One message of a conversation."""

    role: Literal["user", "model"] = Field(..., description="Author of the turn")
    parts: List[Part] = Field(..., description="Content parts")
    img: Optional[Any] = Field(
        default=None, description="Image reference attached to a user turn"
    )

    @classmethod
    def user(cls, text: str, img: Optional[Any] = None) -> "Turn":
        return cls(role="user", parts=[Part(text=text)], img=img)

    @classmethod
    def model(cls, text: str) -> "Turn":
        return cls(role="model", parts=[Part(text=text)])

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def build_turns(
    question: Optional[str], answer: str, img: Optional[Any] = None
) -> List[Turn]:
    """Turns to append for one exchange.

    A question yields a user turn followed by the model answer; without a
    question only the answer is stored (e.g. a regenerated reply).
    """
    turns = []
    if question:
        turns.append(Turn.user(question, img))
    turns.append(Turn.model(answer))
    return turns


class Conversation(MongoModel):
    """Model for storing a chat thread and its append-only history."""

    user_id: str = Field(..., description="Owner user ID")
    history: List[Turn] = Field(default_factory=list, description="Ordered turns")
    updated_at: datetime = Field(
        default_factory=utcnow, description="Last update timestamp"
    )

    collection_name: ClassVar[str] = "chats"

    def to_dict(self) -> Dict[str, Any]:
        doc = super().to_dict()
        doc["history"] = [turn.to_dict() for turn in self.history]
        return doc

    @classmethod
    async def start(cls, user_id: str, text: str) -> "Conversation":
        """Create a conversation opened by a single user turn."""
        return await cls.create(user_id=user_id, history=[Turn.user(text)])

    @classmethod
    async def find_owned(cls, conversation_id: str, user_id: str) -> "Conversation":
        """Fetch a conversation, constrained to its owner.

        Raises:
            ConversationNotFound: if the id is malformed, unknown, or belongs
                to another user.
        """
        object_id = parse_object_id(conversation_id)
        if object_id is None:
            raise ConversationNotFound(conversation_id)

        conversation = await cls.find_one({"_id": object_id, "user_id": user_id})
        if conversation is None:
            raise ConversationNotFound(conversation_id)
        return conversation

    @classmethod
    async def append_turns(
        cls, conversation_id: str, user_id: str, turns: List[Turn]
    ) -> UpdateAck:
        """Atomically push ``turns`` onto the history of an owned conversation.

        The returned acknowledgment has ``matched_count == 0`` when no
        conversation with this id belongs to ``user_id``.
        """
        object_id = parse_object_id(conversation_id)
        if object_id is None:
            return UpdateAck(acknowledged=True, matched_count=0, modified_count=0)

        result = await cls.get_collection().update_one(
            {"_id": object_id, "user_id": user_id},
            {
                "$push": {"history": {"$each": [turn.to_dict() for turn in turns]}},
                "$set": {"updated_at": utcnow()},
            },
        )
        return UpdateAck.from_result(result)
