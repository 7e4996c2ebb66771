"""
Idempotency guard for job enqueueing.

TTL-bounded deduplication markers keyed by (job type, payload hash). This
is best effort: a duplicate submitted after the marker expires is accepted
as a new job.

Dependencies: jobrunner.boundary.cache.kv_store
System role: Enqueue deduplication
"""

import hashlib
import json
from typing import Any

from jobrunner.boundary.cache.kv_store import KeyValueStore

_MARKER = "1"


def hash_payload(payload: dict[str, Any]) -> str:
    """
    Deterministic SHA256 of a canonical payload.

    Keys are sorted at every level so field order never affects the hash.

    Args:
        payload: Validated, normalized payload

    Returns:
        SHA256 hash as hex string (64 characters)
    """
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class IdempotencyGuard:
    """Checks and records enqueue markers in the key-value store."""

    def __init__(self, store: KeyValueStore, key_prefix: str = "jobs") -> None:
        self.store = store
        self.key_prefix = key_prefix

    def key(self, job_type: str, payload_hash: str) -> str:
        return f"{self.key_prefix}:dedup:{job_type}:{payload_hash}"

    async def check(self, job_type: str, payload_hash: str) -> bool:
        """
        Return True if an identical enqueue happened within the active TTL window.

        Args:
            job_type: Job type value
            payload_hash: Canonical payload hash
        """
        return await self.store.get(self.key(job_type, payload_hash)) is not None

    async def mark(self, job_type: str, payload_hash: str, ttl_seconds: float) -> None:
        """
        Record the marker; it expires on its own after `ttl_seconds`.

        Args:
            job_type: Job type value
            payload_hash: Canonical payload hash
            ttl_seconds: Deduplication window
        """
        await self.store.set(self.key(job_type, payload_hash), _MARKER, ttl_seconds)
