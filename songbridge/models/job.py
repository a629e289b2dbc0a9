"""
Job model for music generation tasks.
"""
import enum
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional


DEFAULT_TITLE = 'Untitled'


class JobStatus(str, enum.Enum):
    """Status states for generation jobs."""
    pending = 'pending'
    complete = 'complete'
    failed = 'failed'


@dataclass(frozen=True)
class SongResult:
    """Finished song as reported by the provider callback."""
    audio_url: str
    image_url: Optional[str] = None
    title: str = DEFAULT_TITLE


@dataclass(frozen=True)
class Job:
    """
    Snapshot of a generation job.

    Snapshots are immutable: a status transition produces a new Job that
    replaces the old one in the registry.

    Attributes:
        job_id: Provider-assigned task identifier
        status: Current job status
        result: Song details, only when complete
        failure_reason: Provider message, only when failed
        created_at: When the job was first seen
        finished_at: When the job reached a terminal status
    """
    job_id: str
    status: JobStatus = JobStatus.pending
    result: Optional[SongResult] = None
    failure_reason: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != JobStatus.pending

    def completed(self, result: SongResult) -> 'Job':
        """Return the complete version of this pending job."""
        if self.is_terminal:
            raise ValueError(f'Job {self.job_id} is already {self.status.value}')
        return replace(
            self,
            status=JobStatus.complete,
            result=result,
            finished_at=datetime.utcnow(),
        )

    def failed(self, reason: str) -> 'Job':
        """Return the failed version of this pending job."""
        if self.is_terminal:
            raise ValueError(f'Job {self.job_id} is already {self.status.value}')
        return replace(
            self,
            status=JobStatus.failed,
            failure_reason=reason,
            finished_at=datetime.utcnow(),
        )

    def __repr__(self):
        return f'<Job {self.job_id} status={self.status.value}>'
