import logging

from .records import APPEAL_STEP, Status, TimelineEntry, as_text
from .results import ComplaintOperationError, ErrorKind

logger = logging.getLogger(__name__)

MIN_APPEAL_MESSAGE_LENGTH = 20


class AppealService:
    def __init__(self, repository):
        self.repository = repository

    def raise_appeal(self, complaint_id, appeal_message, appeal_photo=""):
        message = as_text(appeal_message).strip()
        photo = as_text(appeal_photo)

        def apply(complaint, timestamp):
            if complaint.has_appeal:
                raise ComplaintOperationError(ErrorKind.ALREADY_APPEALED, "An appeal has already been raised.")
            if complaint.status != Status.REJECTED:
                raise ComplaintOperationError(
                    ErrorKind.INVALID_STATE,
                    "Only rejected complaints can be appealed.",
                )
            if len(message) < MIN_APPEAL_MESSAGE_LENGTH:
                raise ComplaintOperationError(
                    ErrorKind.VALIDATION_ERROR,
                    f"Appeal message must be at least {MIN_APPEAL_MESSAGE_LENGTH} characters.",
                )
            complaint.status = Status.APPEAL_RAISED.value
            complaint.appeal_message = message
            complaint.appeal_photo_reference = photo
            complaint.appeal_raised_at = timestamp
            complaint.timeline.append(TimelineEntry(step=APPEAL_STEP, date=timestamp))

        result = self.repository.replace(complaint_id, apply)
        if result:
            logger.info("Appeal raised on complaint %s", complaint_id)
        return result
