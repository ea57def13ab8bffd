# votechain/config.py
# Central place for paths, connection strings and constants
import os
import sys
import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Deployed demo contract the frontend talks to
DEFAULT_CONTRACT_ADDRESS = "0x7f6575CC92465D24C1091a5b252a93f6a7Ff8108"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",  # For Create React App
    "http://localhost:5173",  # For Vite
]


def _split(value: Optional[str], default: List[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    # --- Database ---
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "votechain"
    candidates_collection: str = "candidates"

    # --- Face dataset & training ---
    face_recognition_dir: str = os.path.join("..", "votechain-face-recognition")
    dataset_dir: Optional[str] = None  # defaults to <face_recognition_dir>/dataset
    train_script: str = "train_faces.py"
    python_executable: str = sys.executable
    image_extensions: List[str] = Field(default_factory=lambda: [".jpg"])

    # --- HTTP ---
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    # --- Smart contract (voting client only) ---
    web3_provider_uri: str = "http://127.0.0.1:8545"
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    voter_private_key: Optional[str] = None

    @property
    def dataset_root(self) -> str:
        return os.path.abspath(self.dataset_dir or os.path.join(self.face_recognition_dir, "dataset"))

    @property
    def train_script_path(self) -> str:
        # absolute, since the child runs with a different working directory
        return os.path.abspath(os.path.join(self.face_recognition_dir, self.train_script))

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Settings":
        """
        Build settings from the process environment.
        A .env file (if present) is loaded first; real environment variables win.
        """
        load_dotenv(dotenv_path=dotenv_path)
        defaults = cls()
        return cls(
            mongo_uri=os.getenv("MONGO_URI", defaults.mongo_uri),
            mongo_db=os.getenv("MONGO_DB", defaults.mongo_db),
            candidates_collection=os.getenv("CANDIDATES_COLLECTION", defaults.candidates_collection),
            face_recognition_dir=os.getenv("FACE_RECOGNITION_DIR", defaults.face_recognition_dir),
            dataset_dir=os.getenv("DATASET_DIR") or None,
            train_script=os.getenv("TRAIN_SCRIPT", defaults.train_script),
            python_executable=os.getenv("PYTHON_EXECUTABLE", defaults.python_executable),
            image_extensions=_split(os.getenv("IMAGE_EXTENSIONS"), defaults.image_extensions),
            cors_origins=_split(os.getenv("CORS_ORIGINS"), defaults.cors_origins),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            web3_provider_uri=os.getenv("WEB3_PROVIDER_URI", defaults.web3_provider_uri),
            contract_address=os.getenv("CONTRACT_ADDRESS", defaults.contract_address),
            voter_private_key=os.getenv("VOTER_PRIVATE_KEY") or None,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
