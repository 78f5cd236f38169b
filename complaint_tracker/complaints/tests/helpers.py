from datetime import datetime, timedelta, timezone

from complaints.repository import ComplaintRepository
from complaints.storage import InMemoryKeyValueStore, RecordStore, StoreError


class StepClock:
    """Returns a strictly increasing UTC time on each call."""

    def __init__(self, start=None, step=timedelta(minutes=1)):
        self.current = start or datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        value = self.current
        self.current += self.step
        return value


class FailingKeyValueStore(InMemoryKeyValueStore):
    def __init__(self, initial=None, fail_reads=False, fail_writes=True):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key):
        if self.fail_reads:
            raise StoreError("medium unavailable")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise StoreError("medium unavailable")
        super().set(key, value)


def make_repository(backend=None, clock=None):
    backend = backend if backend is not None else InMemoryKeyValueStore()
    store = RecordStore(backend, key="complaints")
    return ComplaintRepository(store, clock=clock or StepClock())


def complaint_fields(**overrides):
    fields = {
        "category": "Water Logging",
        "ward": "W1",
        "zone": "South",
        "description": "Water collects outside the school after every rain.",
        "citizen": {"name": "Meena Iyer", "phone": "9988776655"},
    }
    fields.update(overrides)
    return fields
