"""
MongoDB Connection Utility

MongoDB is the only store for this app:
- users: accounts and embedded profiles
- companies: recruiter-owned company records
- jobs: postings referencing a company and their creator
- applications: a student's application to a job

Documents reference each other by ObjectId; there are no joins beyond
the manual population done in the service layer.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_client(client: MongoClient) -> None:
    """Swap the process-wide client (used by tests and scripts)."""
    global _client, _db
    _client = client
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection by its name in COLLECTIONS."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "jobs": "jobs",
    "applications": "applications"
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness and query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # One account per email, one company per name
    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["companies"]].create_index("name", unique=True)
    db[COLLECTIONS["companies"]].create_index("user_id")

    # Admin listing and newest-first search
    db[COLLECTIONS["jobs"]].create_index("created_by")
    db[COLLECTIONS["jobs"]].create_index("company")
    db[COLLECTIONS["jobs"]].create_index([("created_at", DESCENDING)])

    # One application per student per job
    db[COLLECTIONS["applications"]].create_index([
        ("job", ASCENDING),
        ("applicant", ASCENDING)
    ], unique=True)

    logger.info("MongoDB indexes created successfully")
