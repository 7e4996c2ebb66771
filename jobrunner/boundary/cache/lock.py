"""
Per-job distributed lock.

A TTL-bounded marker keyed by job id, set with set-if-absent semantics.
The marker holds a random owner token so that release only removes a lock
this runner still owns. A runner that crashes mid-step leaves the marker to
expire.

This is not linearizable: clock skew or a store failover can let two
runners hold the same job.

Dependencies: jobrunner.boundary.cache.kv_store
System role: Mutual exclusion between concurrent runner processes
"""

import uuid

from jobrunner.boundary.cache.kv_store import KeyValueStore


class JobLock:
    """Acquire/release helper for job lock markers."""

    def __init__(self, store: KeyValueStore, ttl_seconds: float = 30, key_prefix: str = "jobs") -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def key(self, job_id: str) -> str:
        return f"{self.key_prefix}:lock:{job_id}"

    async def acquire(self, job_id: str) -> str | None:
        """
        Try to take the lock for a job.

        Args:
            job_id: Job identifier

        Returns:
            Owner token if acquired, None if another runner holds the lock
        """
        token = uuid.uuid4().hex
        if await self.store.set_if_absent(self.key(job_id), token, self.ttl_seconds):
            return token
        return None

    async def release(self, job_id: str, token: str) -> bool:
        """
        Release the lock if it is still owned by `token`.

        Args:
            job_id: Job identifier
            token: Owner token returned by `acquire`

        Returns:
            True if the marker was deleted, False if it had expired or changed owner
        """
        return await self.store.delete_if_equals(self.key(job_id), token)
