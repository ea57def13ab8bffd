import logging

from pymongo import MongoClient
from pymongo.collection import Collection

from ..config import Settings

logger = logging.getLogger(__name__)


def connect(settings: Settings) -> MongoClient:
    if not settings.mongo_uri:
        raise ValueError("MONGO_URI is empty. Check your .env file.")
    if not settings.mongo_db:
        raise ValueError("MONGO_DB is empty. Check your .env file.")

    # MongoClient connects lazily; the first query surfaces connection errors
    client = MongoClient(settings.mongo_uri)
    logger.info(f"MongoDB client created for {settings.mongo_uri}, database: {settings.mongo_db}")
    return client


def get_candidate_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.mongo_db][settings.candidates_collection]
