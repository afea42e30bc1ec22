import logging
import os

import pymongo
from dotenv import load_dotenv

load_dotenv()  # load variables from .env

logger = logging.getLogger(__name__)

_client = None
_db = None


def get_db():
    """Shared database handle, connected on first use"""
    global _client, _db
    if _db is not None:
        return _db

    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI environment variable is not set. Please check your .env file.")

    try:
        client = pymongo.MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
        # Test the connection
        client.admin.command("ping")
    except pymongo.errors.ServerSelectionTimeoutError:
        logger.error("MongoDB connection failed: server not reachable")
        raise
    except pymongo.errors.ConnectionFailure:
        logger.error("MongoDB connection failed: connection error")
        raise

    _client = client
    _db = client[os.getenv("MONGO_DB_NAME", "hangar_cpq")]
    logger.info("MongoDB connection successful (database %s)", _db.name)
    return _db


def set_db(database):
    """Point the shared handle at another database (tests, scripts)"""
    global _db
    _db = database
    return _db
