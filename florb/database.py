#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Database - MongoDB connection management and indexing.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# Database.connect: Establishes connection to MongoDB.
# Database.disconnect: Closes connection.
# Database._create_indexes: Creates required indexes for collections.
# Database.get_db: Returns the database instance.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# logger: Logger instance.
# Database: Static class managing the MongoDB client and database connection.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# motor.motor_asyncio: Async MongoDB driver.
# typing: Type hints.
# logging: Logging.
# florb.config.get_settings: App settings.
# florb.constants: Collection names.

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
import logging

from florb.config import get_settings
from florb.constants import (
    FLORBS_COLLECTION, RESOURCE_NODES_COLLECTION, PLACED_FLORBS_COLLECTION,
    PLAYER_RESOURCES_COLLECTION, GATHERING_ANALYTICS_COLLECTION,
)

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls) -> None:
        """Establish connection to MongoDB"""
        settings = get_settings()
        try:
            cls.client = AsyncIOMotorClient(settings.mongodb_uri)
            cls.db = cls.client[settings.mongodb_database]

            # Verify connection
            await cls.client.admin.command('ping')
            logger.info(f"Connected to MongoDB: {settings.mongodb_database}")

            await cls._create_indexes()

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    @classmethod
    async def disconnect(cls) -> None:
        """Close MongoDB connection"""
        if cls.client:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    async def _create_indexes(cls) -> None:
        """Create necessary indexes for collections"""
        if cls.db is None:
            return

        florbs = cls.db[FLORBS_COLLECTION]
        await florbs.create_index("florb_id", unique=True)
        await florbs.create_index("rarity", background=True)
        await florbs.create_index("special_effects", background=True)
        # Listing sorts newest first, optionally filtered by rarity
        await florbs.create_index([("created_at", -1)], background=True)
        await florbs.create_index([("rarity", 1), ("created_at", -1)], background=True)

        await cls.db[RESOURCE_NODES_COLLECTION].create_index("id", unique=True)

        placed = cls.db[PLACED_FLORBS_COLLECTION]
        await placed.create_index("id", unique=True)
        await placed.create_index("user_id", background=True)
        await placed.create_index([("id", 1), ("user_id", 1)], background=True)

        await cls.db[PLAYER_RESOURCES_COLLECTION].create_index("user_id", unique=True)

        await cls.db[GATHERING_ANALYTICS_COLLECTION].create_index(
            [("user_id", 1), ("timestamp", -1)],
            background=True
        )

        logger.info("Database indexes created")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Get database instance"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db
