from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, TypeVar, Type, ClassVar
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.results import UpdateResult
import logging
from datetime import datetime, timezone

from src.database.mongo import get_collection

T = TypeVar("T", bound="MongoModel")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(document_id: str) -> Optional[ObjectId]:
    """Return the ObjectId for ``document_id``, or None if it is malformed."""
    try:
        return ObjectId(document_id)
    except (InvalidId, TypeError):
        return None


class UpdateAck(BaseModel):
    """Write acknowledgment of a single-document update."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    matched_count: int = Field(0, serialization_alias="matchedCount")
    modified_count: int = Field(0, serialization_alias="modifiedCount")

    @classmethod
    def from_result(cls, result: UpdateResult) -> "UpdateAck":
        return cls(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )


class MongoModel(BaseModel):
    """Generic base model for MongoDB documents with collection and instance operations."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="MongoDB document ID")

    timestamp: datetime = Field(
        default_factory=utcnow,
        description="Time of creation",
    )

    # Collection name - should be overridden by subclasses
    collection_name: ClassVar[str] = "documents"

    logger: ClassVar[logging.Logger] = logging.getLogger(__name__)

    @classmethod
    def get_collection(cls) -> AsyncIOMotorCollection:
        """Get the MongoDB collection for this model."""
        return get_collection(cls.collection_name)

    @classmethod
    async def create(cls: Type[T], **kwargs) -> T:
        """Create a new document in the collection and return it with its id"""
        doc = cls(**kwargs)
        await doc.save()
        return doc

    @classmethod
    async def find_one(cls: Type[T], filter_dict: Dict[str, Any]) -> Optional[T]:
        """Find a single document by filter criteria."""
        collection = cls.get_collection()
        doc = await collection.find_one(filter_dict)
        return cls.from_dict(doc) if doc else None

    async def save(self: T) -> T:
        """Insert the current instance into the database.

        Documents are never replaced wholesale once stored; later changes go
        through targeted atomic updates on the concrete models.
        """
        if self.id:
            raise ValueError(f"Document with ID {self.id} is already stored")

        collection = self.__class__.get_collection()
        doc_dict = self.to_dict()

        try:
            result = await collection.insert_one(doc_dict)
            self.id = str(result.inserted_id)
            return self

        except Exception as e:
            self.logger.error(f"Error saving document: {e}")
            raise

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for MongoDB storage."""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create model instance from dictionary (e.g., from MongoDB)."""
        if data and "_id" in data:
            data["id"] = str(data["_id"])
            del data["_id"]
        return cls(**data)
