from motor.motor_asyncio import AsyncIOMotorClient
from motor.motor_asyncio import AsyncIOMotorDatabase
from motor.motor_asyncio import AsyncIOMotorCollection
from typing import Optional
import logging

from src.config import MONGO_URI

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = "chats"


class AsyncMongoDBManager:
    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(
        self, connection_string: Optional[str] = None
    ) -> AsyncIOMotorDatabase:
        """Connect to MongoDB and return the database instance."""
        if connection_string is None:
            connection_string = MONGO_URI

        try:
            self.client = AsyncIOMotorClient(connection_string)
            # Test the connection
            await self.client.admin.command("ping")

            # Database named in the URI path, or the default one
            self.database = self.client.get_default_database(DEFAULT_DATABASE_NAME)
            logger.info(f"Connected to MongoDB database '{self.database.name}'")
            return self.database

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    def use_database(self, database: AsyncIOMotorDatabase) -> None:
        """Bind an already created database handle (e.g. an in-memory one)."""
        self.client = None
        self.database = database

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """Get a collection from the database."""
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database[collection_name]

    async def close(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.database = None


async_mongo_manager = AsyncMongoDBManager()


def get_collection(collection_name: str) -> AsyncIOMotorCollection:
    """Get a collection from the database."""
    return async_mongo_manager.get_collection(collection_name)
