"""
MongoDB Connection Utility

MongoDB stores everything the anonymous Q&A needs:
- Anonymous sessions (session token -> animal icon)
- Questions and their lifecycle status
- Answers, with the reaction tally embedded in each answer

WHY the async client?
- The service is a single asyncio process (HTTP, WebSocket hub, archive sweep)
- Every DB call must yield to the event loop instead of blocking it
"""
import logging

from pymongo import AsyncMongoClient, ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from placehub.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: AsyncMongoClient = None
_db: AsyncDatabase = None


def get_mongo_client() -> AsyncMongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = AsyncMongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> AsyncDatabase:
    """Get the placehub database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> AsyncCollection:
    """
    Get a specific collection.
    Collections we'll use:
    - anon_sessions: Session token -> animal icon
    - anon_questions: Anonymous questions
    - anon_answers: Answers with embedded reaction tallies
    """
    db = get_mongo_db()
    return db[name]


async def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        await client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


async def close_mongo_client():
    """Close the client on shutdown."""
    global _client, _db
    if _client is not None:
        await _client.close()
    _client = None
    _db = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "sessions": "anon_sessions",
    "questions": "anon_questions",
    "answers": "anon_answers"
}


async def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # One session record per client token; init_session relies on this
    await db[COLLECTIONS["sessions"]].create_index("session_id", unique=True)

    # Archive sweep filters on status + created_at
    await db[COLLECTIONS["questions"]].create_index([
        ("status", ASCENDING),
        ("created_at", DESCENDING)
    ])

    # Thread reads and per-session stats
    await db[COLLECTIONS["answers"]].create_index([
        ("question_id", ASCENDING),
        ("created_at", ASCENDING)
    ])
    await db[COLLECTIONS["answers"]].create_index("session_id")

    logger.info("MongoDB indexes created successfully")
