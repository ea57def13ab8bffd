import logging
import os
import subprocess
import threading
from typing import IO, List, Set

from pydantic import BaseModel

from .config import Settings
from .errors import NotFound, TrainingInProgress, TrainingLaunchError
from .face_utils import list_face_images

logger = logging.getLogger(__name__)


class TrainingResult(BaseModel):
    exit_status: int
    output: str
    error: str

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0


def _pump(stream: IO[str], sink: List[str], level: int, label: str) -> None:
    for line in iter(stream.readline, ""):
        logger.log(level, f"[Train Face] Training {label}: {line.rstrip()}")
        sink.append(line)


class TrainingRunner:
    """
    Runs the external face-training script for one identity and waits for it.

    The caller's request blocks until the child exits; there is no timeout.
    At most one run per identity is in flight at a time.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._lock = threading.Lock()
        self._in_flight: Set[str] = set()

    def command(self) -> List[str]:
        return [self.settings.python_executable, self.settings.train_script_path]

    def working_dir(self) -> str:
        # parent of the dataset directory
        return os.path.dirname(self.settings.dataset_root)

    def run(self, national_id: str) -> TrainingResult:
        files = list_face_images(self.settings.dataset_root, national_id, self.settings.image_extensions)
        if files is None:
            raise NotFound("Face images not found. Please capture face images first.")
        if not files:
            raise NotFound("No face images found. Please capture face images first.")
        logger.info(f"[Train Face] Found {len(files)} face images for training")

        with self._lock:
            if national_id in self._in_flight:
                raise TrainingInProgress(f"Face training already running for {national_id}")
            self._in_flight.add(national_id)
        try:
            return self._execute()
        finally:
            with self._lock:
                self._in_flight.discard(national_id)

    def _execute(self) -> TrainingResult:
        cmd = self.command()
        logger.info(f"[Train Face] Running training script: {' '.join(cmd)}")
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=self.working_dir(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error(f"[Train Face] Process error: {e}")
            raise TrainingLaunchError("Failed to start training process", error=str(e))

        out: List[str] = []
        err: List[str] = []
        # Popen's context manager closes both pipes and reaps the child on every path
        with proc:
            readers = [
                threading.Thread(target=_pump, args=(proc.stdout, out, logging.INFO, "output"), daemon=True),
                threading.Thread(target=_pump, args=(proc.stderr, err, logging.ERROR, "error"), daemon=True),
            ]
            for t in readers:
                t.start()
            for t in readers:
                t.join()
            code = proc.wait()

        logger.info(f"[Train Face] Training process finished with code: {code}")
        return TrainingResult(exit_status=code, output="".join(out), error="".join(err))
