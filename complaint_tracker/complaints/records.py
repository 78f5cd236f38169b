import logging
import re
from dataclasses import dataclass, field
from typing import List

from django.db import models

logger = logging.getLogger(__name__)


class Status(models.TextChoices):
    PENDING_VERIFICATION = "PendingVerification", "Pending Verification"
    VERIFIED = "Verified", "Verified"
    IN_PROGRESS = "InProgress", "In Progress"
    RESOLVED = "Resolved", "Resolved"
    REJECTED = "Rejected", "Rejected"
    APPEAL_RAISED = "AppealRaised", "Appeal Raised"


class RejectionReason(models.TextChoices):
    DUPLICATE = "Duplicate", "Duplicate complaint"
    INSUFFICIENT_EVIDENCE = "InsufficientEvidence", "Insufficient evidence"
    NOT_IN_JURISDICTION = "NotInJurisdiction", "Not in jurisdiction"
    INVALID_COMPLAINT = "InvalidComplaint", "Invalid complaint"
    ALREADY_RESOLVED = "AlreadyResolved", "Already resolved"
    OTHER = "Other", "Other"


class Severity(models.TextChoices):
    HIGH = "High", "High"
    MEDIUM = "Medium", "Medium"
    LOW = "Low", "Low"


SEVERITY_RANK = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}

TIMELINE_COMPLETED = "completed"
ESCALATION_STEP = "Escalated to Higher Authority"
APPEAL_STEP = "Appeal Raised by Citizen"

TRUTHY_STRINGS = {"1", "true", "yes", "on"}

# Ids travel in URL paths, so they are restricted to path-safe characters.
COMPLAINT_ID_PATTERN = re.compile(r"^[\w.-]+$")


def as_text(value) -> str:
    if value is None:
        return ""
    return str(value)


def as_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def normalize_status(value) -> str:
    text = as_text(value).strip()
    if text in Status.values:
        return text
    # Older records stored the display label instead of the value.
    for choice_value, label in Status.choices:
        if text.lower() == label.lower():
            return choice_value
    if text:
        logger.warning("Unknown complaint status %r, falling back to %s", text, Status.PENDING_VERIFICATION)
    return Status.PENDING_VERIFICATION.value


def normalize_severity(value) -> str:
    text = as_text(value).strip().capitalize()
    if text in Severity.values:
        return text
    return Severity.MEDIUM.value


@dataclass
class Citizen:
    name: str = ""
    phone: str = ""

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return cls()
        return cls(name=as_text(data.get("name")), phone=as_text(data.get("phone")))

    def to_dict(self):
        return {"name": self.name, "phone": self.phone}


@dataclass
class TimelineEntry:
    step: str
    status: str = TIMELINE_COMPLETED
    date: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            step=as_text(data.get("step")),
            status=as_text(data.get("status")) or TIMELINE_COMPLETED,
            date=as_text(data.get("date")),
        )

    def to_dict(self):
        return {"step": self.step, "status": self.status, "date": self.date}


@dataclass
class AuditEntry:
    action: str
    by_admin: str
    timestamp: str
    previous_status: str
    new_status: str
    reason: str = ""
    comment: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            action=as_text(data.get("action")),
            by_admin=as_text(data.get("byAdmin")),
            timestamp=as_text(data.get("timestamp")),
            previous_status=as_text(data.get("previousStatus")),
            new_status=as_text(data.get("newStatus")),
            reason=as_text(data.get("reason")),
            comment=as_text(data.get("comment")),
        )

    def to_dict(self):
        return {
            "action": self.action,
            "byAdmin": self.by_admin,
            "timestamp": self.timestamp,
            "previousStatus": self.previous_status,
            "newStatus": self.new_status,
            "reason": self.reason,
            "comment": self.comment,
        }


@dataclass
class Complaint:
    id: str
    category: str = ""
    ward: str = ""
    zone: str = ""
    description: str = ""
    photo_reference: str = ""
    citizen: Citizen = field(default_factory=Citizen)
    severity: str = Severity.MEDIUM.value
    created_at: str = ""
    status: str = Status.PENDING_VERIFICATION.value
    officer_comment: str = ""
    eta: str = ""
    department: str = ""
    escalated: bool = False
    timeline: List[TimelineEntry] = field(default_factory=list)
    rejection_reason: str = ""
    rejection_comment: str = ""
    audit_log: List[AuditEntry] = field(default_factory=list)
    appeal_message: str = ""
    appeal_photo_reference: str = ""
    appeal_raised_at: str = ""
    updated_at: str = ""

    def __str__(self):
        return self.id

    @property
    def status_label(self) -> str:
        return Status(self.status).label

    @property
    def has_appeal(self) -> bool:
        return bool(self.appeal_raised_at)

    def can_raise_appeal(self) -> bool:
        return self.status == Status.REJECTED and not self.has_appeal

    @classmethod
    def from_dict(cls, data):
        """Build a complaint from a stored record, filling every absent field with its default."""
        timeline = data.get("timeline")
        if not isinstance(timeline, list):
            timeline = []
        audit_log = data.get("auditLog")
        if not isinstance(audit_log, list):
            audit_log = []
        return cls(
            id=as_text(data.get("id")),
            category=as_text(data.get("category")),
            ward=as_text(data.get("ward")),
            zone=as_text(data.get("zone")),
            description=as_text(data.get("description")),
            photo_reference=as_text(data.get("photoReference")),
            citizen=Citizen.from_dict(data.get("citizen")),
            severity=normalize_severity(data.get("severity")),
            created_at=as_text(data.get("createdAt")),
            status=normalize_status(data.get("status")),
            officer_comment=as_text(data.get("officerComment")),
            eta=as_text(data.get("eta")),
            department=as_text(data.get("department")),
            escalated=as_flag(data.get("escalated")),
            timeline=[TimelineEntry.from_dict(entry) for entry in timeline if isinstance(entry, dict)],
            rejection_reason=as_text(data.get("rejectionReason")),
            rejection_comment=as_text(data.get("rejectionComment")),
            audit_log=[AuditEntry.from_dict(entry) for entry in audit_log if isinstance(entry, dict)],
            appeal_message=as_text(data.get("appealMessage")),
            appeal_photo_reference=as_text(data.get("appealPhotoReference")),
            appeal_raised_at=as_text(data.get("appealRaisedAt")),
            updated_at=as_text(data.get("updatedAt")),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "ward": self.ward,
            "zone": self.zone,
            "description": self.description,
            "photoReference": self.photo_reference,
            "citizen": self.citizen.to_dict(),
            "severity": self.severity,
            "createdAt": self.created_at,
            "status": self.status,
            "officerComment": self.officer_comment,
            "eta": self.eta,
            "department": self.department,
            "escalated": self.escalated,
            "timeline": [entry.to_dict() for entry in self.timeline],
            "rejectionReason": self.rejection_reason,
            "rejectionComment": self.rejection_comment,
            "auditLog": [entry.to_dict() for entry in self.audit_log],
            "appealMessage": self.appeal_message,
            "appealPhotoReference": self.appeal_photo_reference,
            "appealRaisedAt": self.appeal_raised_at,
            "updatedAt": self.updated_at,
        }
