import logging
import os
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from tripplanner.utils.config import MONGODB_URI, MONGODB_DB, ITINERARIES_COLLECTION

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient | None = None
db: AsyncIOMotorDatabase | None = None


async def connect_to_mongo():
    global client, db
    uri = MONGODB_URI or os.getenv("MONGODB_URI")
    name = MONGODB_DB or os.getenv("MONGODB_DB")
    if not uri or not name:
        raise RuntimeError("MONGODB_URI and MONGODB_DB must be set")

    client = AsyncIOMotorClient(uri)
    db = client[name]
    await db.users.create_index("email", unique=True)
    await db.users.create_index("username", unique=True)
    # saved trips are always read by owner, newest first
    try:
        await db[ITINERARIES_COLLECTION].create_index([("user_id", 1), ("created_at", -1)])
    except PyMongoError as exc:
        logger.warning("Could not ensure itinerary indexes at startup: %s", exc)
    logger.info("Connected to MongoDB database '%s' and ensured indexes were created.", name)


async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        client = None
        db = None
        logger.info("MongoDB connection closed.")


def get_db() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("Database not connected. Call connect_to_mongo at startup.")

    return db
