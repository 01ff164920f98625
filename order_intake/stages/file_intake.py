"""
File Intake stage.
Validates the selected purchase order and owns its preview resource.
"""

import tempfile
from pathlib import Path
from typing import Optional, Set

from order_intake.config import get_config
from order_intake.errors import FileValidationError, ValidationReason
from order_intake.schemas.file import CandidateFile
from order_intake.state import WorkflowState
from order_intake.utils.logging import setup_logging, log_stage_action


logger = setup_logging(__name__)
config = get_config()

STAGE = "FileIntake"


class PreviewHandle:
    """A temporary on-disk copy of the selected file, used to render a preview."""

    def __init__(self, path: Path, filename: str, content_type: str):
        self.path = path
        self.filename = filename
        self.content_type = content_type
        self.released = False

    def read_bytes(self) -> bytes:
        """File contents for rendering."""
        if self.released:
            raise RuntimeError(f"Preview for {self.filename} was already released")
        return self.path.read_bytes()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"PreviewHandle({self.filename!r}, {state})"


class PreviewStore:
    """Creates and releases preview handles and tracks which are still live."""

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory if directory is not None else config.PREVIEW_DIR
        self._live: Set[PreviewHandle] = set()

    @property
    def live_count(self) -> int:
        return len(self._live)

    def acquire(self, candidate: CandidateFile) -> PreviewHandle:
        suffix = Path(candidate.name).suffix or ".pdf"
        with tempfile.NamedTemporaryFile(
            delete=False, suffix=suffix, dir=self.directory
        ) as tmp:
            tmp.write(candidate.data)
            tmp_path = tmp.name

        handle = PreviewHandle(Path(tmp_path), candidate.name, candidate.content_type)
        self._live.add(handle)
        logger.debug(f"Preview created for {candidate.name}: {tmp_path}")
        return handle

    def release(self, handle: PreviewHandle) -> None:
        if handle.released:
            return
        handle.path.unlink(missing_ok=True)
        handle.released = True
        self._live.discard(handle)
        logger.debug(f"Preview released for {handle.filename}")


class FileIntake:
    """
    Single ownership point for the active file's preview handle.

    Every path that replaces or clears the active file goes through
    select_file() or close(), which release the previous handle first.
    """

    def __init__(self, state: WorkflowState, store: Optional[PreviewStore] = None):
        self.state = state
        self.store = store or PreviewStore()
        self._handle: Optional[PreviewHandle] = None

    @property
    def preview(self) -> Optional[PreviewHandle]:
        return self._handle

    def _release(self) -> None:
        if self._handle is not None:
            self.store.release(self._handle)
            self._handle = None

    def validate(self, candidate: CandidateFile) -> None:
        """Raise FileValidationError if the candidate cannot be accepted."""
        if not candidate.is_pdf():
            raise FileValidationError(ValidationReason.NOT_A_PDF)
        if candidate.size > config.MAX_UPLOAD_BYTES:
            raise FileValidationError(ValidationReason.TOO_LARGE)

    def select_file(self, candidate: Optional[CandidateFile]) -> Optional[CandidateFile]:
        """
        Make candidate the active file.

        Selecting anything, including None or an invalid file, invalidates
        all state derived from the previous file.

        Args:
            candidate: The selected or dropped file, or None to remove it

        Returns:
            The active file, or None when the selection was cleared

        Raises:
            FileValidationError: Wrong media type or file too large
        """
        self._release()
        self.state.file_error = None
        self.state.active_file = None
        self.state.clear_derived()

        if candidate is None:
            log_stage_action(logger, STAGE, "File removed")
            self.state.add_event(STAGE, "File removed")
            return None

        try:
            self.validate(candidate)
        except FileValidationError as e:
            self.state.file_error = str(e)
            logger.warning(f"[{STAGE}] Rejected {candidate.name}: {e.reason.value}")
            self.state.add_event(STAGE, f"Rejected {candidate.name}: {e}")
            raise

        self._handle = self.store.acquire(candidate)
        self.state.active_file = candidate
        log_stage_action(
            logger,
            STAGE,
            "File selected",
            {"filename": candidate.name, "size": candidate.size},
        )
        self.state.add_event(STAGE, f"Selected {candidate.name} ({candidate.size} bytes)")
        return candidate

    def close(self) -> None:
        """Release the preview on workflow teardown."""
        self._release()
