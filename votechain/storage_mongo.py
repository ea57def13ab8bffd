# storage_mongo.py
import datetime
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from .errors import ValidationFailed

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def parse_object_id(value: str) -> ObjectId:
    """Convert a path parameter to an ObjectId or fail with a field-level validation error."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationFailed("id", "Invalid candidate ID")


def serialize_candidate(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)
    out["_id"] = str(out["_id"])
    for key, value in out.items():
        if isinstance(value, datetime.datetime):
            out[key] = value.isoformat()
    return out


class CandidateStorage:
    def __init__(self, collection: Collection):
        """
        Args:
            collection: pymongo (or API-compatible) collection holding candidate records
        """
        self.collection = collection

    def ensure_indexes(self) -> None:
        # One candidate per national ID
        self.collection.create_index("nationalId", unique=True)
        self.collection.create_index("createdAt")

    def ping(self) -> bool:
        try:
            self.collection.database.client.admin.command("ping")
            return True
        except Exception as e:
            logger.error(f"MongoDB ping failed: {e}")
            return False

    def insert_candidate(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        """
        Persist a new candidate with a single insert.

        Returns:
            The stored document, including the generated _id
        """
        result = self.collection.insert_one(dict(candidate))
        logger.info(f"Candidate {result.inserted_id} saved successfully")
        return self.collection.find_one({"_id": result.inserted_id})

    def list_candidates(self) -> List[Dict[str, Any]]:
        candidates = list(self.collection.find({}).sort(NEWEST_FIRST))
        logger.info(f"Retrieved {len(candidates)} candidates")
        return candidates

    def get_candidate(self, candidate_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": candidate_id})

    def update_candidate(self, candidate_id: ObjectId, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply a partial update.

        Args:
            candidate_id: The candidate's ObjectId
            patch: Fields to $set; an empty patch leaves the record untouched

        Returns:
            The document after the update, or None if no candidate has this id
        """
        if not patch:
            return self.get_candidate(candidate_id)
        update = dict(patch)
        update["updatedAt"] = datetime.datetime.now(datetime.timezone.utc)
        updated = self.collection.find_one_and_update(
            {"_id": candidate_id},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        if updated:
            logger.info(f"Candidate {candidate_id} updated successfully")
        return updated

    def delete_candidate(self, candidate_id: ObjectId) -> Optional[Dict[str, Any]]:
        deleted = self.collection.find_one_and_delete({"_id": candidate_id})
        if deleted:
            logger.info(f"Candidate {candidate_id} deleted successfully")
        return deleted

    def count(self) -> int:
        return self.collection.count_documents({})
