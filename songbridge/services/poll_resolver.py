"""
Bounded long-poll over the completion registry.
"""
import asyncio
import logging
from typing import Optional

from songbridge.exceptions import StillPending
from songbridge.models.job import Job
from songbridge.services.completion_registry import CompletionRegistry

logger = logging.getLogger(__name__)


class PollResolver:
    """
    Waits for a job to reach a terminal status.

    The registry is checked up to ``max_attempts`` times with ``interval``
    seconds between checks. Each waiting caller runs its own loop, so any
    number of callers can poll the same or different jobs at once.
    """

    def __init__(self, registry: CompletionRegistry):
        self._registry = registry

    async def wait(
        self,
        job_id: str,
        max_attempts: int,
        interval: float,
        deadline: Optional[float] = None,
    ) -> Job:
        """
        Return the terminal Job for ``job_id``.

        Args:
            job_id: Provider task ID to wait for
            max_attempts: Number of registry observations (>= 1)
            interval: Seconds to sleep between observations (> 0)
            deadline: Optional outer bound in seconds on the whole wait

        Returns:
            The job once it is complete or failed

        Raises:
            StillPending: the job was not terminal after every attempt, or
                the deadline expired first
        """
        if max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')
        if interval <= 0:
            raise ValueError('interval must be positive')

        loop = asyncio.get_running_loop()
        expires_at = loop.time() + deadline if deadline is not None else None

        for attempt in range(1, max_attempts + 1):
            job = self._registry.get(job_id)
            if job is not None and job.is_terminal:
                logger.debug('Job %s resolved on attempt %d', job_id, attempt)
                return job

            if attempt == max_attempts:
                break

            if expires_at is not None:
                remaining = expires_at - loop.time()
                if remaining < interval:
                    # Deadline falls before the next observation
                    await asyncio.sleep(max(remaining, 0))
                    logger.info('Deadline of %.2fs reached while polling job %s', deadline, job_id)
                    raise StillPending(job_id, attempt)
            await asyncio.sleep(interval)

        logger.info('Job %s still pending after %d attempts', job_id, max_attempts)
        raise StillPending(job_id, max_attempts)
