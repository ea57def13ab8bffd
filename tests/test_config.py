import os
import sys

from votechain.config import Settings


def test_defaults_derive_dataset_and_script_paths():
    s = Settings(face_recognition_dir="/srv/face")
    assert s.dataset_root == os.path.join("/srv/face", "dataset")
    assert s.train_script_path == os.path.join("/srv/face", "train_faces.py")
    assert s.python_executable == sys.executable
    assert s.image_extensions == [".jpg"]


def test_from_env_reads_variables_and_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("MONGO_DB=from_dotenv\nIMAGE_EXTENSIONS=.jpg, .jpeg\n")
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("DATASET_DIR", "/data/faces")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test,http://b.test")
    # set-then-delete so monkeypatch restores whatever load_dotenv writes
    for name in ("MONGO_DB", "IMAGE_EXTENSIONS"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    s = Settings.from_env(dotenv_path=str(env_file))

    assert s.mongo_uri == "mongodb://db:27017"
    assert s.mongo_db == "from_dotenv"
    assert s.dataset_root == "/data/faces"
    assert s.image_extensions == [".jpg", ".jpeg"]
    assert s.cors_origins == ["http://a.test", "http://b.test"]
