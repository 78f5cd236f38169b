import logging

from .records import (
    ESCALATION_STEP,
    AuditEntry,
    RejectionReason,
    Status,
    TimelineEntry,
    as_text,
)
from .results import ComplaintOperationError, ErrorKind

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("complaints.audit")

MIN_REJECTION_COMMENT_LENGTH = 30


def resolve_rejection(rejection_reason, rejection_reason_other, comment):
    """Return the (reason, comment) pair to record for a rejection, or raise ComplaintOperationError."""
    reason = as_text(rejection_reason).strip()
    if not reason:
        raise ComplaintOperationError(ErrorKind.VALIDATION_ERROR, "A rejection reason is required.")
    if reason not in RejectionReason.values:
        raise ComplaintOperationError(ErrorKind.VALIDATION_ERROR, f"Unknown rejection reason: {reason}.")
    if reason == RejectionReason.OTHER:
        reason = as_text(rejection_reason_other).strip()
        if not reason:
            raise ComplaintOperationError(ErrorKind.VALIDATION_ERROR, "Please describe the rejection reason.")

    comment = as_text(comment).strip()
    if len(comment) < MIN_REJECTION_COMMENT_LENGTH:
        raise ComplaintOperationError(
            ErrorKind.VALIDATION_ERROR,
            f"Rejection comment must be at least {MIN_REJECTION_COMMENT_LENGTH} characters.",
        )
    return reason, comment


def record_audit(complaint, entry):
    complaint.audit_log.append(entry)
    audit_logger.info(
        "%s %s by %s: %s -> %s",
        complaint.id,
        entry.action,
        entry.by_admin,
        entry.previous_status,
        entry.new_status,
    )


class StatusWorkflow:
    def __init__(self, repository):
        self.repository = repository

    def update_status(
        self,
        complaint_id,
        status,
        comment="",
        eta="",
        department="",
        rejection_reason="",
        rejection_reason_other="",
        admin="admin",
    ):
        new_status = as_text(status).strip()
        comment = as_text(comment).strip()
        eta = as_text(eta).strip()
        department = as_text(department).strip()

        def apply(complaint, timestamp):
            if new_status not in Status.values:
                raise ComplaintOperationError(ErrorKind.VALIDATION_ERROR, f"Unknown status: {new_status or '-'}.")
            reason = ""
            if new_status == Status.REJECTED:
                reason, rejection_comment = resolve_rejection(rejection_reason, rejection_reason_other, comment)

            previous_status = complaint.status
            complaint.status = new_status
            if comment:
                complaint.officer_comment = comment
            if eta:
                complaint.eta = eta
            if department:
                complaint.department = department
            if new_status == Status.REJECTED:
                complaint.rejection_reason = reason
                complaint.rejection_comment = rejection_comment
            else:
                complaint.rejection_reason = ""
                complaint.rejection_comment = ""

            complaint.timeline.append(TimelineEntry(step=Status(new_status).label, date=timestamp))
            record_audit(
                complaint,
                AuditEntry(
                    action="status_update",
                    by_admin=admin,
                    timestamp=timestamp,
                    previous_status=previous_status,
                    new_status=new_status,
                    reason=reason,
                    comment=comment,
                ),
            )

        result = self.repository.replace(complaint_id, apply)
        if result:
            logger.info("Complaint %s moved to %s by %s", complaint_id, new_status, admin)
        return result

    def escalate(self, complaint_id, admin="admin"):
        """
        Mark a complaint as escalated.

        The flag and its timeline entry are set once; every call is still written
        to the audit log.
        """

        def apply(complaint, timestamp):
            action = "escalation_repeated" if complaint.escalated else "escalated"
            if not complaint.escalated:
                complaint.escalated = True
                complaint.timeline.append(TimelineEntry(step=ESCALATION_STEP, date=timestamp))
            record_audit(
                complaint,
                AuditEntry(
                    action=action,
                    by_admin=admin,
                    timestamp=timestamp,
                    previous_status=complaint.status,
                    new_status=complaint.status,
                ),
            )

        result = self.repository.replace(complaint_id, apply)
        if result:
            logger.info("Complaint %s escalated by %s", complaint_id, admin)
        return result
