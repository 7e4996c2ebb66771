"""
Exception hierarchy for the job engine.

Provides layered exception structure for enqueue rejections and
configuration errors. All exceptions include context for observability
and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the engine
"""

from typing import Any


class JobEngineException(Exception):
    """Base exception for all job engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class EnqueueRejectedError(JobEngineException):
    """Base class for synchronous enqueue rejections (no side effects occurred)."""


class UnknownJobTypeError(EnqueueRejectedError):
    """Raised when a job type has no workflow or an empty step list."""

    def __init__(self, job_type: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize unknown job type error.

        Args:
            job_type: The rejected job type
            details: Additional context
        """
        details = details or {}
        details["job_type"] = job_type
        self.job_type = job_type
        super().__init__(f"Unknown or misconfigured job type: {job_type}", details)


class InvalidPayloadError(EnqueueRejectedError):
    """Raised when a payload fails validation against its job type schema."""

    def __init__(
        self,
        job_type: str,
        errors: list[dict[str, Any]],
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid payload error.

        Args:
            job_type: Job type whose schema rejected the payload
            errors: Field-level validation errors (loc, msg, type)
            details: Additional context
        """
        details = details or {}
        details["job_type"] = job_type
        details["errors"] = errors
        self.job_type = job_type
        self.errors = errors
        super().__init__(f"Invalid payload for job type {job_type}", details)


class DuplicateJobError(EnqueueRejectedError):
    """Raised when an identical enqueue happened inside the idempotency window."""

    def __init__(
        self,
        job_type: str,
        payload_hash: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize duplicate job error.

        Args:
            job_type: Job type of the duplicate request
            payload_hash: Canonical payload hash that collided
            details: Additional context
        """
        details = details or {}
        details["job_type"] = job_type
        details["payload_hash"] = payload_hash
        self.job_type = job_type
        self.payload_hash = payload_hash
        super().__init__(
            f"Duplicate job detected for type={job_type} (hash={payload_hash})",
            details,
        )


class WorkflowConfigurationError(JobEngineException):
    """Raised when a workflow definition is malformed."""
