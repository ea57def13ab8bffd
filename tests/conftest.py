import sys

import mongomock
import pytest
from fastapi.testclient import TestClient

from votechain.config import Settings
from votechain.main import create_app
from votechain.storage_mongo import CandidateStorage


@pytest.fixture
def face_root(tmp_path):
    root = tmp_path / "votechain-face-recognition"
    (root / "dataset").mkdir(parents=True)
    return root


@pytest.fixture
def make_images(face_root):
    """Create <dataset>/<nid>/ with the given {filename: bytes} and return the directory."""
    def _make(nid, files):
        target = face_root / "dataset" / nid
        target.mkdir(parents=True, exist_ok=True)
        for name, data in files.items():
            (target / name).write_bytes(data)
        return target
    return _make


@pytest.fixture
def write_train_script(face_root):
    def _write(body):
        (face_root / "train_faces.py").write_text(body)
    return _write


@pytest.fixture
def settings(face_root):
    return Settings(
        face_recognition_dir=str(face_root),
        python_executable=sys.executable,
        log_level="DEBUG",
    )


@pytest.fixture
def collection():
    return mongomock.MongoClient().votechain_test.candidates


@pytest.fixture
def storage(collection):
    s = CandidateStorage(collection)
    s.ensure_indexes()
    return s


@pytest.fixture
def app(settings, collection):
    return create_app(settings, collection)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def candidate_payload():
    return {
        "name": "Jane Doe",
        "party": "Independent",
        "nationalId": "1990123456789",
        "fathersName": "John Doe",
        "mothersName": "Mary Doe",
        "dateOfBirth": "1990-04-12",
        "bloodGroup": "O+",
        "postOffice": "Central",
        "postCode": 1200,
        "location": "Dhaka",
    }

