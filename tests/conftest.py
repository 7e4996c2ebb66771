"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory job store, memory key-value store with a controllable
clock, registry/guard/lock/service/runner wiring
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from typing import Any, Mapping

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from jobrunner.application.services.job_service import JobService
from jobrunner.boundary.cache.idempotency import IdempotencyGuard
from jobrunner.boundary.cache.kv_store import MemoryKeyValueStore
from jobrunner.boundary.cache.lock import JobLock
from jobrunner.boundary.db.base import Base
from jobrunner.boundary.db.CRUD.job_crud import job_crud
from jobrunner.boundary.db.models.job_model import JobModel, JobType
from jobrunner.core.jobs.coordinator import BatchCoordinator
from jobrunner.core.jobs.dispatcher import StepDispatcher, build_default_dispatcher
from jobrunner.core.jobs.registry import WorkflowRegistry, build_default_registry
from jobrunner.core.jobs.runner import JobRunner
from jobrunner.core.jobs.types import StepHandler


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
async def engine():
    """
    Create in-memory SQLite async engine with the job schema.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store(clock: FakeClock) -> MemoryKeyValueStore:
    return MemoryKeyValueStore(clock=clock)


@pytest.fixture
def registry() -> WorkflowRegistry:
    return build_default_registry()


@pytest.fixture
def guard(kv_store: MemoryKeyValueStore) -> IdempotencyGuard:
    return IdempotencyGuard(kv_store)


@pytest.fixture
def lock(kv_store: MemoryKeyValueStore) -> JobLock:
    return JobLock(kv_store, ttl_seconds=30)


@pytest.fixture
def job_service(session_factory, registry: WorkflowRegistry, guard: IdempotencyGuard) -> JobService:
    return JobService(session_factory, registry, guard, dedup_ttl_seconds=300)


@pytest.fixture
def runner(session_factory, registry: WorkflowRegistry, lock: JobLock) -> JobRunner:
    """Runner wired to the built-in workflow handlers."""
    return JobRunner(session_factory, registry, build_default_dispatcher(registry), lock)


@pytest.fixture
def coordinator(runner: JobRunner) -> BatchCoordinator:
    return BatchCoordinator(runner, default_limit=5)


@pytest.fixture
def build_runner(session_factory, registry: WorkflowRegistry, lock: JobLock):
    """
    Factory for runners with custom step handlers.

    Returns:
        Callable: (handlers, registry=None, **runner_kwargs) -> JobRunner
    """

    def _build(
        handlers: Mapping[JobType, Mapping[str, StepHandler]],
        custom_registry: WorkflowRegistry | None = None,
        **kwargs: Any,
    ) -> JobRunner:
        return JobRunner(
            session_factory,
            custom_registry or registry,
            StepDispatcher(handlers),
            lock,
            **kwargs,
        )

    return _build


@pytest.fixture
def load_job(session_factory):
    """Fetch a fresh copy of a job row by id."""

    async def _load(job_id) -> JobModel:
        async with session_factory() as session:
            job = await job_crud.get_by_id(session, job_id)
        assert job is not None
        return job

    return _load
