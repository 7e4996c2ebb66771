"""
Key-value boundary layer: TTL-capable store, idempotency guard, job lock.

Exports:
  - KeyValueStore: Protocol shared by all backends
  - RedisKeyValueStore, MemoryKeyValueStore: Backends
  - build_key_value_store(): Backend selection from settings
  - IdempotencyGuard: Enqueue deduplication markers
  - JobLock: Per-job mutual exclusion markers
"""

from jobrunner.boundary.cache.kv_store import (
    KeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
    build_key_value_store,
)
from jobrunner.boundary.cache.idempotency import IdempotencyGuard
from jobrunner.boundary.cache.lock import JobLock

__all__ = [
    "IdempotencyGuard",
    "JobLock",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "build_key_value_store",
]
