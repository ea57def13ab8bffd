import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import Settings
from ..crud import register_candidate
from ..errors import NotFound
from ..face_utils import derive_face_hash
from ..models.candidate_model import CandidateCreate, CandidateUpdate
from ..storage_mongo import CandidateStorage, parse_object_id, serialize_candidate
from ..training import TrainingRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/candidates", tags=["Candidates"])


def get_storage(request: Request) -> CandidateStorage:
    return request.app.state.storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_trainer(request: Request) -> TrainingRunner:
    return request.app.state.trainer


@router.post("/register", status_code=201)
def register(
    payload: CandidateCreate,
    storage: CandidateStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Received candidate data for national ID {payload.nationalId}")
    candidate = register_candidate(storage, settings, payload)
    return {
        "success": True,
        "message": "Candidate registered successfully",
        "data": serialize_candidate(candidate),
    }


@router.get("/")
def list_candidates(storage: CandidateStorage = Depends(get_storage)):
    logger.info("Fetching all candidates...")
    candidates = [serialize_candidate(c) for c in storage.list_candidates()]
    logger.info(f"Found {len(candidates)} candidates")
    return {"success": True, "message": f"Found {len(candidates)} candidates", "data": candidates}


@router.get("/{candidate_id}")
def get_candidate(candidate_id: str, storage: CandidateStorage = Depends(get_storage)):
    logger.info(f"Fetching candidate with ID: {candidate_id}")
    candidate = storage.get_candidate(parse_object_id(candidate_id))
    if not candidate:
        logger.info(f"Candidate not found with ID: {candidate_id}")
        raise NotFound("Candidate not found")
    return {"success": True, "message": "Candidate found", "data": serialize_candidate(candidate)}


@router.put("/{candidate_id}")
def update_candidate(
    candidate_id: str,
    payload: CandidateUpdate,
    storage: CandidateStorage = Depends(get_storage),
):
    oid = parse_object_id(candidate_id)
    patch = payload.to_patch()
    logger.info(f"Updating candidate with ID: {candidate_id}, fields: {sorted(patch)}")
    candidate = storage.update_candidate(oid, patch)
    if not candidate:
        logger.info(f"Candidate not found for update: {candidate_id}")
        raise NotFound("Candidate not found")
    return {"success": True, "message": "Candidate updated successfully", "data": serialize_candidate(candidate)}


@router.delete("/{candidate_id}")
def delete_candidate(candidate_id: str, storage: CandidateStorage = Depends(get_storage)):
    oid = parse_object_id(candidate_id)
    logger.info(f"Deleting candidate with ID: {candidate_id}")
    if not storage.delete_candidate(oid):
        logger.info(f"Candidate not found for deletion: {candidate_id}")
        raise NotFound("Candidate not found")
    return {"success": True, "message": "Candidate deleted successfully"}


@router.get("/face-hash/{nid}")
def face_hash(nid: str, settings: Settings = Depends(get_settings)):
    logger.info(f"[Face Hash] Generating face hash for NID: {nid}")
    face_id = derive_face_hash(settings.dataset_root, nid, settings.image_extensions)
    if not face_id:
        raise NotFound(
            "Failed to generate face hash from captured images. "
            "Please ensure face capture is completed first."
        )
    logger.info(f"[Face Hash] Successfully generated face hash: {face_id[:16]}...")
    return {"success": True, "message": "Face hash generated successfully", "faceHash": face_id}


@router.post("/train-face/{nid}")
def train_face(nid: str, trainer: TrainingRunner = Depends(get_trainer)):
    logger.info(f"[Train Face] Starting face training for NID: {nid}")
    result = trainer.run(nid)
    if not result.succeeded:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Face training failed",
                "error": result.error,
                "code": result.exit_status,
            },
        )
    return {
        "success": True,
        "message": "Face training completed successfully",
        "output": result.output,
        "nid": nid,
    }
