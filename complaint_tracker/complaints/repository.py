import logging
import re

from django.utils import timezone

from .records import COMPLAINT_ID_PATTERN, Citizen, Complaint, Status, as_text, normalize_severity
from .results import ComplaintOperationError, ErrorKind, OperationResult

logger = logging.getLogger(__name__)

SEQUENCE_PATTERN = re.compile(r"(\d+)$")


class ComplaintRepository:
    def __init__(self, store, clock=timezone.now, id_prefix="CMP"):
        self.store = store
        self.clock = clock
        self.id_prefix = id_prefix

    def now(self) -> str:
        return self.clock().isoformat()

    def _load(self):
        complaints = []
        for record in self.store.load():
            if not isinstance(record, dict):
                logger.warning("Skipping stored complaint that is not an object: %r", record)
                continue
            complaints.append(Complaint.from_dict(record))

        seen = set()
        for complaint in complaints:
            if not COMPLAINT_ID_PATTERN.match(complaint.id) or complaint.id in seen:
                new_id = self.next_id(complaints)
                logger.warning("Stored complaint id %r is missing, invalid or duplicated; assigned %s", complaint.id, new_id)
                complaint.id = new_id
            seen.add(complaint.id)
        return complaints

    def next_id(self, complaints) -> str:
        highest = 0
        for complaint in complaints:
            match = SEQUENCE_PATTERN.search(complaint.id)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{self.id_prefix}-{self.clock().year}-{highest + 1:06d}"

    def create(self, fields) -> OperationResult:
        complaints = self._load()
        citizen = fields.get("citizen")
        if isinstance(citizen, dict):
            citizen = Citizen.from_dict(citizen)
        elif not isinstance(citizen, Citizen):
            citizen = Citizen(
                name=as_text(fields.get("citizen_name")),
                phone=as_text(fields.get("citizen_phone")),
            )
        timestamp = self.now()
        complaint = Complaint(
            id=self.next_id(complaints),
            category=as_text(fields.get("category")),
            ward=as_text(fields.get("ward")),
            zone=as_text(fields.get("zone")),
            description=as_text(fields.get("description")),
            photo_reference=as_text(fields.get("photo_reference")),
            citizen=citizen,
            severity=normalize_severity(fields.get("severity")),
            created_at=timestamp,
            status=Status.PENDING_VERIFICATION.value,
            updated_at=timestamp,
        )
        complaints.append(complaint)
        if not self.store.save(complaints):
            return OperationResult.failure(ErrorKind.STORE_FAILURE, complaint=complaint)
        logger.info("Complaint %s created in ward %s", complaint.id, complaint.ward or "-")
        return OperationResult.success(complaint)

    def get_all(self):
        return self._load()

    def get_by_id(self, complaint_id) -> OperationResult:
        for complaint in self._load():
            if complaint.id == complaint_id:
                return OperationResult.success(complaint)
        return OperationResult.failure(ErrorKind.NOT_FOUND, f"Complaint {complaint_id} not found.")

    def replace(self, complaint_id, mutator) -> OperationResult:
        """
        Load the collection, apply ``mutator(complaint, timestamp)`` to the matching
        record and persist the full collection, as one unit.

        A mutator aborts by raising ComplaintOperationError before touching the record.
        """
        complaints = self._load()
        index = next((i for i, complaint in enumerate(complaints) if complaint.id == complaint_id), None)
        if index is None:
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Complaint {complaint_id} not found.")

        complaint = complaints[index]
        timestamp = self.now()
        try:
            mutator(complaint, timestamp)
        except ComplaintOperationError as error:
            logger.info("Complaint %s left unchanged: %s", complaint_id, error.message)
            return OperationResult.failure(error.kind, error.message)
        complaint.updated_at = timestamp

        if not self.store.save(complaints):
            return OperationResult.failure(ErrorKind.STORE_FAILURE, complaint=complaint)
        return OperationResult.success(complaint)
