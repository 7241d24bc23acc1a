"""Object-store clients consumed by the filesystem layer."""

from .base import ObjectStoreClient
from .memory import InMemoryObjectStoreClient

__all__ = ["ObjectStoreClient", "InMemoryObjectStoreClient"]
