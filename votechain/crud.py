import datetime
import logging
from typing import Any, Dict

from .config import Settings
from .errors import DerivationFailed
from .face_utils import derive_face_hash, fingerprint_placeholder
from .models.candidate_model import CandidateCreate, CandidateRecord
from .storage_mongo import CandidateStorage

logger = logging.getLogger(__name__)


# Register a new candidate: face ID from the captured images, placeholder fingerprint, one insert
def register_candidate(storage: CandidateStorage, settings: Settings, payload: CandidateCreate) -> Dict[str, Any]:
    national_id = payload.nationalId

    face_id = derive_face_hash(settings.dataset_root, national_id, settings.image_extensions)
    if not face_id:
        raise DerivationFailed("Failed to generate face ID from captured images")

    # TODO: capture a real fingerprint instead of hashing the ID and timestamp
    fingerprint = fingerprint_placeholder(national_id)

    now = datetime.datetime.now(datetime.timezone.utc)
    record = CandidateRecord(
        **payload.model_dump(),
        faceId=face_id,
        fingerprint=fingerprint,
        isVerified=False,
        verificationStatus="pending",
        createdAt=now,
        updatedAt=now,
    )
    logger.info(f"Registering candidate with national ID {national_id}")
    return storage.insert_candidate(record.to_document())
