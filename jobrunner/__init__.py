"""
CMS background job runner.

Durable multi-step workflow engine: idempotent enqueueing, per-job
distributed locking, bounded retries and per-step timeouts.
"""
