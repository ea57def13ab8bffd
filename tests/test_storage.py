import datetime

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from votechain.errors import ValidationFailed
from votechain.storage_mongo import parse_object_id, serialize_candidate


def _doc(nid, minutes=0):
    created = datetime.datetime(2024, 1, 1, 12, minutes)
    return {"name": f"cand-{nid}", "party": "P", "nationalId": nid, "createdAt": created}


def test_list_is_newest_first(storage):
    storage.insert_candidate(_doc("A", minutes=0))
    storage.insert_candidate(_doc("B", minutes=5))
    assert [c["nationalId"] for c in storage.list_candidates()] == ["B", "A"]


def test_list_breaks_creation_time_ties_by_insert_order(storage):
    storage.insert_candidate(_doc("A"))
    storage.insert_candidate(_doc("B"))
    assert [c["nationalId"] for c in storage.list_candidates()] == ["B", "A"]


def test_partial_update_touches_only_supplied_fields(storage):
    created = storage.insert_candidate(_doc("A"))
    updated = storage.update_candidate(created["_id"], {"party": "Green"})
    assert updated["party"] == "Green"
    assert updated["name"] == "cand-A"
    assert "updatedAt" in updated


def test_empty_patch_returns_current_record(storage):
    created = storage.insert_candidate(_doc("A"))
    assert storage.update_candidate(created["_id"], {})["name"] == "cand-A"


def test_update_and_delete_unknown_id_return_none(storage):
    missing = ObjectId()
    assert storage.update_candidate(missing, {"name": "x"}) is None
    assert storage.delete_candidate(missing) is None


def test_delete_twice(storage):
    created = storage.insert_candidate(_doc("A"))
    assert storage.delete_candidate(created["_id"]) is not None
    assert storage.delete_candidate(created["_id"]) is None
    assert storage.count() == 0


def test_national_id_is_unique(storage):
    storage.insert_candidate(_doc("A"))
    with pytest.raises(DuplicateKeyError):
        storage.insert_candidate(_doc("A"))
    assert storage.count() == 1


def test_parse_object_id_rejects_garbage():
    with pytest.raises(ValidationFailed) as exc:
        parse_object_id("not-an-id")
    assert exc.value.status_code == 400
    assert exc.value.error == [{"field": "id", "message": "Invalid candidate ID"}]


def test_serialize_candidate_stringifies_id_and_dates():
    oid = ObjectId()
    out = serialize_candidate({"_id": oid, "createdAt": datetime.datetime(2024, 1, 1)})
    assert out == {"_id": str(oid), "createdAt": "2024-01-01T00:00:00"}


def test_candidate_record_document_is_bson_ready():
    from votechain.models.candidate_model import CandidateCreate, CandidateRecord

    now = datetime.datetime(2024, 1, 1, 12, 0)
    payload = CandidateCreate(name="Jane", party="P", nationalId="A", dateOfBirth="1990-04-12")
    doc = CandidateRecord(**payload.model_dump(), faceId="f", fingerprint="g",
                          createdAt=now, updatedAt=now).to_document()

    assert doc["dateOfBirth"] == datetime.datetime(1990, 4, 12)
    assert "postCode" not in doc
    assert doc["isVerified"] is False and doc["verificationStatus"] == "pending"
