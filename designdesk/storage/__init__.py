"""Storage backends and the repository facade"""

import logging

from designdesk.config import Settings
from designdesk.storage.adapter import StorageAdapter
from designdesk.storage.base import StorageBackend
from designdesk.storage.memory import MemoryStorage
from designdesk.storage.relational import RelationalStorage

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> StorageAdapter:
    """Build the facade over the backend the settings select"""
    if settings.storage_backend == "memory":
        backend = MemoryStorage(
            admin_username=settings.admin_username,
            admin_email=settings.admin_email,
            admin_password=settings.admin_password,
        )
    else:
        backend = RelationalStorage.from_url(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.database_echo,
        )
    logger.info(f"Using {type(backend).__name__} storage backend")
    return StorageAdapter(backend)


__all__ = [
    "StorageAdapter",
    "StorageBackend",
    "MemoryStorage",
    "RelationalStorage",
    "create_storage",
]
