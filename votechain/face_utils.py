# votechain/face_utils.py
"""
Content fingerprints over captured face images.

Nothing here looks at pixels: the "face ID" is a SHA-256 digest of the raw
bytes of every image in an identity's dataset directory. Two captures of the
same person give different digests; the same files always give the same one.
"""
import hashlib
import logging
import os
import time
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

READ_CHUNK = 64 * 1024


def identity_dir(dataset_root: str, national_id: str) -> Optional[str]:
    """
    Path of the per-identity image directory, or None if the identity
    would resolve outside dataset_root (e.g. "../x" or "a/b").
    """
    if not national_id or national_id in (".", "..") or os.sep in national_id or "/" in national_id:
        return None
    if os.altsep and os.altsep in national_id:
        return None
    try:
        root = os.path.realpath(dataset_root)
        path = os.path.realpath(os.path.join(root, national_id))
    except (OSError, ValueError) as e:
        # e.g. an embedded NUL byte in the identity
        logger.error(f"Unusable identity {national_id!r}: {e}")
        return None
    if os.path.dirname(path) != root:
        return None
    return path


def list_face_images(dataset_root: str, national_id: str, extensions: Iterable[str]) -> Optional[List[str]]:
    """
    Full paths of the recognized image files for an identity, in sorted listing order.
    Returns None if the directory is missing or cannot be listed; an empty list if it holds no images.
    """
    path = identity_dir(dataset_root, national_id)
    if path is None or not os.path.isdir(path):
        logger.error(f"Dataset directory not found for identity {national_id!r} under {dataset_root}")
        return None

    suffixes = tuple(extensions)
    try:
        names = sorted(
            name for name in os.listdir(path)
            if name.endswith(suffixes) and os.path.isfile(os.path.join(path, name))
        )
    except OSError as e:
        logger.error(f"Cannot list dataset directory {path}: {e}")
        return None
    return [os.path.join(path, name) for name in names]


def derive_face_hash(dataset_root: str, national_id: str, extensions: Iterable[str] = (".jpg",)) -> Optional[str]:
    """
    SHA-256 (hex) over the concatenated bytes of every image in the identity's directory.
    Returns None when the directory is missing, empty, or unreadable.
    """
    files = list_face_images(dataset_root, national_id, extensions)
    if files is None:
        return None
    if not files:
        logger.error(f"No face images found for {national_id} in {dataset_root}")
        return None

    logger.info(f"Found {len(files)} face images for {national_id}")
    digest = hashlib.sha256()
    try:
        for file_path in files:
            logger.debug(f"Reading image: {file_path}")
            with open(file_path, "rb") as f:
                for chunk in iter(lambda: f.read(READ_CHUNK), b""):
                    digest.update(chunk)
    except OSError as e:
        logger.error(f"Error generating face ID for {national_id}: {e}")
        return None

    face_id = digest.hexdigest()
    logger.info(f"Generated face ID: {face_id[:16]}...")
    return face_id


def fingerprint_placeholder(national_id: str, now_ms: Optional[int] = None) -> str:
    """
    Stand-in for a fingerprint ID until real capture exists:
    sha256(national_id + epoch milliseconds).
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return hashlib.sha256(f"{national_id}{now_ms}".encode("utf-8")).hexdigest()
