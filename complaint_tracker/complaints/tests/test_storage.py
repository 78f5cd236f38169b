import json

from django.core.cache import caches
from django.test import SimpleTestCase, TestCase, override_settings

from complaints.models import StorageSlot
from complaints.storage import (
    CacheKeyValueStore,
    DatabaseKeyValueStore,
    InMemoryKeyValueStore,
    RecordStore,
)

from .helpers import FailingKeyValueStore

SAMPLE = [{"id": "CMP-2024-000001", "status": "Verified"}, {"id": "CMP-2024-000002"}]


class RecordStoreTests(SimpleTestCase):
    def test_load_returns_empty_when_slot_absent(self):
        self.assertEqual(RecordStore(InMemoryKeyValueStore()).load(), [])

    def test_load_returns_empty_for_invalid_json(self):
        backend = InMemoryKeyValueStore({"complaints": "{not json"})
        with self.assertLogs("complaints.storage", level="WARNING"):
            self.assertEqual(RecordStore(backend).load(), [])

    def test_load_returns_empty_when_slot_is_not_a_list(self):
        backend = InMemoryKeyValueStore({"complaints": json.dumps({"id": "CMP-2024-000001"})})
        with self.assertLogs("complaints.storage", level="WARNING"):
            self.assertEqual(RecordStore(backend).load(), [])

    def test_load_returns_empty_when_medium_fails(self):
        backend = FailingKeyValueStore({"complaints": json.dumps(SAMPLE)}, fail_reads=True)
        with self.assertLogs("complaints.storage", level="WARNING"):
            self.assertEqual(RecordStore(backend).load(), [])

    def test_save_reports_failure_without_raising(self):
        backend = FailingKeyValueStore()
        with self.assertLogs("complaints.storage", level="ERROR"):
            self.assertFalse(RecordStore(backend).save(SAMPLE))
        self.assertIsNone(backend.get("complaints"))

    def test_save_replaces_whole_slot(self):
        backend = InMemoryKeyValueStore()
        store = RecordStore(backend)
        self.assertTrue(store.save(SAMPLE))
        self.assertTrue(store.save(SAMPLE[:1]))
        self.assertEqual(store.load(), SAMPLE[:1])

    def test_save_of_loaded_data_is_idempotent(self):
        backend = InMemoryKeyValueStore({"complaints": json.dumps(SAMPLE, indent=4)})
        store = RecordStore(backend)
        store.save(store.load())
        once = backend.get("complaints")
        store.save(store.load())
        self.assertEqual(backend.get("complaints"), once)

    def test_uses_configured_key(self):
        backend = InMemoryKeyValueStore()
        RecordStore(backend, key="citizen_complaints").save(SAMPLE)
        self.assertIsNone(backend.get("complaints"))
        self.assertEqual(json.loads(backend.get("citizen_complaints")), SAMPLE)


class DatabaseKeyValueStoreTests(TestCase):
    def test_set_creates_and_then_updates_single_row(self):
        store = RecordStore(DatabaseKeyValueStore())
        store.save(SAMPLE)
        store.save(SAMPLE[:1])
        self.assertEqual(StorageSlot.objects.filter(key="complaints").count(), 1)
        self.assertEqual(store.load(), SAMPLE[:1])

    def test_get_missing_slot_returns_none(self):
        self.assertIsNone(DatabaseKeyValueStore().get("missing"))


@override_settings(
    CACHES={"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache", "LOCATION": "storage-tests"}}
)
class CacheKeyValueStoreTests(SimpleTestCase):
    def tearDown(self):
        caches["default"].clear()

    def test_round_trip_through_cache(self):
        store = RecordStore(CacheKeyValueStore())
        self.assertTrue(store.save(SAMPLE))
        self.assertEqual(store.load(), SAMPLE)
