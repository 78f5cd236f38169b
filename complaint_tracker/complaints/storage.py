"""
Persistence of the complaint collection.

The whole collection lives as one JSON array under a single key of a
key-value medium and is always read and written in full.
"""

import json
import logging

from django.core.cache import caches
from django.db import DatabaseError

from .models import StorageSlot

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


class InMemoryKeyValueStore:
    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


class DatabaseKeyValueStore:
    def get(self, key):
        try:
            return StorageSlot.objects.filter(key=key).values_list("value", flat=True).first()
        except DatabaseError as error:
            raise StoreError(f"Could not read slot {key!r}: {error}") from error

    def set(self, key, value):
        try:
            StorageSlot.objects.update_or_create(key=key, defaults={"value": value})
        except DatabaseError as error:
            raise StoreError(f"Could not write slot {key!r}: {error}") from error


class CacheKeyValueStore:
    def __init__(self, alias="default"):
        self.alias = alias

    @property
    def cache(self):
        return caches[self.alias]

    def get(self, key):
        try:
            return self.cache.get(key)
        except Exception as error:
            raise StoreError(f"Could not read cache key {key!r}: {error}") from error

    def set(self, key, value):
        try:
            self.cache.set(key, value, timeout=None)
        except Exception as error:
            raise StoreError(f"Could not write cache key {key!r}: {error}") from error


class RecordStore:
    def __init__(self, backend, key="complaints"):
        self.backend = backend
        self.key = key

    def load(self) -> list:
        try:
            raw = self.backend.get(self.key)
        except StoreError as error:
            logger.warning("Complaint store unreadable, using empty collection: %s", error)
            return []
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Complaint store slot %r holds invalid JSON, using empty collection", self.key)
            return []
        if not isinstance(records, list):
            logger.warning("Complaint store slot %r is not a list, using empty collection", self.key)
            return []
        return records

    def save(self, records) -> bool:
        payload = json.dumps(
            [record.to_dict() if hasattr(record, "to_dict") else record for record in records],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        try:
            self.backend.set(self.key, payload)
        except StoreError as error:
            logger.error("Complaint store write failed: %s", error)
            return False
        return True
