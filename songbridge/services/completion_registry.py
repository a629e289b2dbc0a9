"""
In-memory registry of job completion state, keyed by provider task ID.
"""
import logging
import threading
from collections import OrderedDict
from typing import Optional

from songbridge.config import REGISTRY_MAX_ENTRIES
from songbridge.models.job import Job, SongResult

logger = logging.getLogger(__name__)


class CompletionRegistry:
    """
    Process-wide store of Job snapshots.

    The webhook side writes terminal results; pollers only read. Every
    read-check-write runs under one lock, so a transition can never
    interleave with another write or an eviction.

    threading.Lock is used instead of asyncio.Lock: no operation here
    suspends, and the registry may be touched from threadpool code as well
    as from the event loop.
    """

    def __init__(self, max_entries: int = REGISTRY_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError('max_entries must be at least 1')
        self._max_entries = max_entries
        self._jobs: 'OrderedDict[str, Job]' = OrderedDict()
        self._lock = threading.Lock()
        self._latest_job_id: Optional[str] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs

    def get(self, job_id: str) -> Optional[Job]:
        """Get the current snapshot for a job, or None if unknown."""
        with self._lock:
            return self._jobs.get(job_id)

    def pending_count(self) -> int:
        """Number of tracked jobs not yet terminal."""
        with self._lock:
            return sum(1 for job in self._jobs.values() if not job.is_terminal)

    def latest_job_id(self) -> Optional[str]:
        """ID of the most recently registered job still being tracked."""
        with self._lock:
            return self._latest_job_id

    def register(self, job_id: str) -> Job:
        """
        Start tracking a job as pending.

        Returns the existing snapshot unchanged if the job is already known
        (the callback may have raced ahead of the submission).
        """
        with self._lock:
            job = self._get_or_create(job_id)
            self._latest_job_id = job_id
            return job

    def set_complete(self, job_id: str, result: SongResult) -> bool:
        """
        Mark a job complete.

        Returns False without touching the stored job if it is already
        terminal; the first terminal write wins.
        """
        return self._transition(job_id, lambda job: job.completed(result))

    def set_failed(self, job_id: str, reason: str) -> bool:
        """
        Mark a job failed.

        Returns False without touching the stored job if it is already
        terminal.
        """
        return self._transition(job_id, lambda job: job.failed(reason))

    def clear(self):
        """Forget every tracked job."""
        with self._lock:
            self._jobs.clear()
            self._latest_job_id = None

    def _transition(self, job_id: str, apply) -> bool:
        with self._lock:
            current = self._get_or_create(job_id)
            if current.is_terminal:
                logger.info(
                    'Ignoring transition for job %s: already %s',
                    job_id,
                    current.status.value,
                )
                return False

            updated = apply(current)
            self._jobs[job_id] = updated

        logger.info('Job %s is now %s', job_id, updated.status.value)
        return True

    def _get_or_create(self, job_id: str) -> Job:
        # Caller holds self._lock
        job = self._jobs.get(job_id)
        if job is None:
            self._evict_if_full()
            job = Job(job_id=job_id)
            self._jobs[job_id] = job
        return job

    def _evict_if_full(self):
        # Caller holds self._lock. Oldest terminal jobs go first.
        while len(self._jobs) >= self._max_entries:
            victim = next(
                (job_id for job_id, job in self._jobs.items() if job.is_terminal),
                next(iter(self._jobs)),
            )
            del self._jobs[victim]
            if victim == self._latest_job_id:
                self._latest_job_id = None
            logger.debug('Evicted job %s from registry', victim)


# Singleton instance
_completion_registry: Optional[CompletionRegistry] = None


def get_completion_registry() -> CompletionRegistry:
    """
    Get the completion registry singleton instance.

    Usage with FastAPI dependency injection:
        @router.get('/jobs/{job_id}')
        async def get_job(job_id: str, registry: CompletionRegistry = Depends(get_completion_registry)):
            return registry.get(job_id)
    """
    global _completion_registry
    if _completion_registry is None:
        _completion_registry = CompletionRegistry()
    return _completion_registry


def reset_completion_registry():
    """Reset the completion registry singleton (for testing)."""
    global _completion_registry
    _completion_registry = None
