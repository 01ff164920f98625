"""
Uploaded file model handed to file intake.
"""

import mimetypes
from pathlib import Path
from typing import Any
from pydantic import BaseModel


class CandidateFile(BaseModel):
    """A user-selected or dropped file, before validation."""
    name: str
    content_type: str = ""
    size: int
    data: bytes = b""

    @classmethod
    def from_uploaded(cls, uploaded: Any) -> "CandidateFile":
        """Build from a Streamlit UploadedFile (name, type, size, getvalue())."""
        data = uploaded.getvalue()
        return cls(
            name=uploaded.name,
            content_type=uploaded.type or "",
            size=getattr(uploaded, "size", len(data)),
            data=data,
        )

    @classmethod
    def from_path(cls, path: str) -> "CandidateFile":
        """Build from a file on disk; media type is guessed from the extension."""
        file_path = Path(path)
        data = file_path.read_bytes()
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            content_type=content_type or "",
            size=len(data),
            data=data,
        )

    def is_pdf(self) -> bool:
        """Declared media type indicates PDF."""
        return "pdf" in self.content_type.lower()
