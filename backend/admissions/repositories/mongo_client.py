"""MongoDB Client - Connection, collections and indexes

One lazily created MongoClient per process. Driver timeouts come from
settings so a stalled server surfaces as PersistenceFailureError in the
repositories instead of hanging a transition.
"""
from typing import Any, Dict, List, Optional, Tuple
from pymongo import MongoClient as PyMongoClient
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

SUBJECTS = "subjects"
STATUS_EVENTS = "status_events"
NOTIFICATION_OUTBOX = "notification_outbox"

# collection -> [(keys, unique)]
INDEXES: Dict[str, List[Tuple[List[Tuple[str, int]], bool]]] = {
    SUBJECTS: [
        ([("subject_id", ASCENDING)], True),
        ([("role", ASCENDING), ("status", ASCENDING)], False),
        ([("active", ASCENDING), ("updated_at", DESCENDING)], False),
    ],
    STATUS_EVENTS: [
        ([("event_id", ASCENDING)], True),
        ([("subject_id", ASCENDING), ("timestamp", DESCENDING)], False),
        ([("correlation_id", ASCENDING)], False),
    ],
    NOTIFICATION_OUTBOX: [
        ([("notification_id", ASCENDING)], True),
        ([("status", ASCENDING), ("created_at", ASCENDING)], False),
        ([("subject_id", ASCENDING)], False),
    ],
}

_client: Optional[PyMongoClient] = None
_database: Optional[Database] = None


def get_client() -> PyMongoClient:
    """Get or create the MongoDB client"""
    global _client
    if _client is None:
        logger.info(f"Connecting to MongoDB database {settings.mongo_db}")
        _client = PyMongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
            connectTimeoutMS=settings.mongo_timeout_ms,
            socketTimeoutMS=settings.mongo_socket_timeout_ms,
        )
    return _client


def get_database() -> Database:
    global _database
    if _database is None:
        _database = get_client()[settings.mongo_db]
    return _database


def get_collection(name: str) -> Collection:
    return get_database()[name]


def close_connection() -> None:
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def create_indexes() -> None:
    """Ensure every index in INDEXES exists (idempotent)"""
    db = get_database()
    for collection_name, indexes in INDEXES.items():
        for keys, unique in indexes:
            db[collection_name].create_index(keys, unique=unique)
    logger.info(f"MongoDB indexes ensured for {', '.join(INDEXES)}")


def health_check() -> Dict[str, Any]:
    """Ping MongoDB; never raises"""
    try:
        get_client().admin.command("ping")
        return {"status": "healthy", "database": settings.mongo_db}
    except PyMongoError as e:
        logger.error(f"MongoDB health check failed: {e}", extra={"error_code": type(e).__name__})
        return {"status": "unhealthy", "database": settings.mongo_db, "error": str(e)}
