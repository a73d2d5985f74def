"""Durable store backends and the batching adapter in front of them."""

from stratum.storage.adapter import StoreAdapter
from stratum.storage.allocator import IdAllocator
from stratum.storage.memory import MemoryStore
from stratum.storage.models import RetryPolicy
from stratum.storage.protocol import DurableStore

__all__ = [
    "DurableStore",
    "IdAllocator",
    "MemoryStore",
    "RetryPolicy",
    "StoreAdapter",
]
