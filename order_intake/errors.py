"""
Error taxonomy for the order intake workflow.
"""

from enum import Enum
from typing import Optional


class OrderIntakeError(Exception):
    """Base class for all order intake errors."""


class ValidationReason(str, Enum):
    """Why a candidate file was rejected."""
    NOT_A_PDF = "not_a_pdf"
    TOO_LARGE = "too_large"


class FileValidationError(OrderIntakeError):
    """A selected file failed client-side validation."""

    MESSAGES = {
        ValidationReason.NOT_A_PDF: "Please upload a PDF file",
        ValidationReason.TOO_LARGE: "File size must be less than 10MB",
    }

    def __init__(self, reason: ValidationReason):
        self.reason = reason
        super().__init__(self.MESSAGES[reason])


class RequestError(OrderIntakeError):
    """A backend call returned a non-2xx status or failed in transport."""

    def __init__(self, status: Optional[int], message: Optional[str] = None):
        self.status = status
        if message is None:
            message = f"HTTP error! status: {status}"
        super().__init__(message)


class DraftLockedError(OrderIntakeError):
    """The order draft was already submitted and can no longer change."""
