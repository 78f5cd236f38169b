from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .appeals import AppealService
from .repository import ComplaintRepository
from .storage import CacheKeyValueStore, DatabaseKeyValueStore, InMemoryKeyValueStore, RecordStore
from .workflow import StatusWorkflow

# Shared by every repository built in this process and lost when it exits.
_memory_backend = InMemoryKeyValueStore()


def get_store_config():
    config = {
        "BACKEND": "database",
        "KEY": "complaints",
        "CACHE_ALIAS": "default",
        "ID_PREFIX": "CMP",
    }
    config.update(getattr(settings, "COMPLAINT_STORE", {}))
    return config


def get_backend(config):
    backend = config["BACKEND"]
    if backend == "database":
        return DatabaseKeyValueStore()
    if backend == "cache":
        return CacheKeyValueStore(alias=config["CACHE_ALIAS"])
    if backend == "memory":
        return _memory_backend
    raise ImproperlyConfigured(f"Unknown COMPLAINT_STORE backend: {backend}")


def get_record_store():
    config = get_store_config()
    return RecordStore(get_backend(config), key=config["KEY"])


def get_repository():
    return ComplaintRepository(get_record_store(), id_prefix=get_store_config()["ID_PREFIX"])


def get_workflow():
    return StatusWorkflow(get_repository())


def get_appeal_service():
    return AppealService(get_repository())
