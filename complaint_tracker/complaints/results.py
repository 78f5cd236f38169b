from dataclasses import dataclass
from typing import Optional

from django.db import models

from .records import Complaint


class ErrorKind(models.TextChoices):
    NOT_FOUND = "NotFound", "Complaint not found"
    VALIDATION_ERROR = "ValidationError", "Validation failed"
    INVALID_STATE = "InvalidState", "Operation not allowed in current status"
    ALREADY_APPEALED = "AlreadyAppealed", "Appeal already raised"
    STORE_FAILURE = "StoreFailure", "Complaint storage unavailable"


class ComplaintOperationError(Exception):
    """Raised inside a repository mutator to abort the operation before anything is saved."""

    def __init__(self, kind, message=""):
        self.kind = kind
        self.message = message or ErrorKind(kind).label
        super().__init__(self.message)


@dataclass
class OperationResult:
    ok: bool
    complaint: Optional[Complaint] = None
    error: Optional[str] = None
    message: str = ""

    def __bool__(self):
        return self.ok

    @classmethod
    def success(cls, complaint):
        return cls(ok=True, complaint=complaint)

    @classmethod
    def failure(cls, kind, message="", complaint=None):
        return cls(
            ok=False,
            complaint=complaint,
            error=kind,
            message=message or ErrorKind(kind).label,
        )
