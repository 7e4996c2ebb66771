"""
Dependency injection container.

Builds the engine object graph lazily from settings: database engine,
key-value store, registry, dispatcher, lock, guard, service, runner and
coordinator. Components are created once per container and shared.

Dependencies: jobrunner.configs, jobrunner.boundary, jobrunner.core, jobrunner.application
System role: DI container for the job engine
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from jobrunner.application.services.job_service import JobService
from jobrunner.boundary.cache.idempotency import IdempotencyGuard
from jobrunner.boundary.cache.kv_store import KeyValueStore, build_key_value_store
from jobrunner.boundary.cache.lock import JobLock
from jobrunner.boundary.db.connection import get_async_engine, get_async_session_factory
from jobrunner.configs import Settings, get_settings
from jobrunner.core.jobs.coordinator import BatchCoordinator
from jobrunner.core.jobs.dispatcher import StepDispatcher, build_default_dispatcher
from jobrunner.core.jobs.registry import WorkflowRegistry, build_default_registry
from jobrunner.core.jobs.runner import JobRunner


class EngineContainer:
    """Container for lazily built, shared engine components."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        engine: AsyncEngine | None = None,
        kv_store: KeyValueStore | None = None,
        registry: WorkflowRegistry | None = None,
        dispatcher: StepDispatcher | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._engine = engine
        self._kv_store = kv_store
        self._registry = registry
        self._dispatcher = dispatcher
        self._session_factory = None
        self._job_service = None
        self._runner = None
        self._coordinator = None

    @property
    def engine(self) -> AsyncEngine:
        """Get cached database engine."""
        if self._engine is None:
            self._engine = get_async_engine(self.settings.database)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get cached session factory bound to the engine."""
        if self._session_factory is None:
            self._session_factory = get_async_session_factory(self.engine)
        return self._session_factory

    @property
    def kv_store(self) -> KeyValueStore:
        """Get cached key-value store."""
        if self._kv_store is None:
            self._kv_store = build_key_value_store(self.settings.redis)
        return self._kv_store

    @property
    def registry(self) -> WorkflowRegistry:
        """Get the workflow registry."""
        if self._registry is None:
            self._registry = build_default_registry()
        return self._registry

    @property
    def dispatcher(self) -> StepDispatcher:
        """Get the step dispatcher."""
        if self._dispatcher is None:
            self._dispatcher = build_default_dispatcher(self.registry)
        return self._dispatcher

    @property
    def idempotency_guard(self) -> IdempotencyGuard:
        return IdempotencyGuard(self.kv_store, key_prefix=self.settings.jobs.key_prefix)

    @property
    def job_lock(self) -> JobLock:
        jobs = self.settings.jobs
        return JobLock(self.kv_store, ttl_seconds=jobs.lock_ttl_seconds, key_prefix=jobs.key_prefix)

    @property
    def job_service(self) -> JobService:
        """Get cached job service."""
        if self._job_service is None:
            self._job_service = JobService(
                self.session_factory,
                self.registry,
                self.idempotency_guard,
                dedup_ttl_seconds=self.settings.jobs.dedup_ttl_seconds,
            )
        return self._job_service

    @property
    def runner(self) -> JobRunner:
        """Get cached job runner."""
        if self._runner is None:
            jobs = self.settings.jobs
            self._runner = JobRunner(
                self.session_factory,
                self.registry,
                self.dispatcher,
                self.job_lock,
                max_attempts=jobs.max_attempts,
                step_timeout_seconds=jobs.step_timeout_seconds,
            )
        return self._runner

    @property
    def coordinator(self) -> BatchCoordinator:
        """Get cached batch coordinator."""
        if self._coordinator is None:
            self._coordinator = BatchCoordinator(self.runner, default_limit=self.settings.jobs.batch_size)
        return self._coordinator

    async def aclose(self) -> None:
        """Dispose the database engine and close the key-value store."""
        if self._kv_store is not None:
            await self._kv_store.aclose()
        if self._engine is not None:
            await self._engine.dispose()
        self._kv_store = None
        self._engine = None
        self._session_factory = None
        self._job_service = None
        self._runner = None
        self._coordinator = None


@lru_cache
def get_engine_container() -> EngineContainer:
    """
    Get the process-wide container for long-lived event loops.

    Usage:
        container = get_engine_container()
        job = await container.job_service.enqueue("IMAGE_GEN", {"postId": "p1"})
    """
    return EngineContainer(get_settings())
