"""
Pydantic schemas for the agent-facing tool endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from songbridge.models.job import Job


class GenerateMusicRequest(BaseModel):
    """Schema for starting a music generation job."""
    prompt: str = Field(..., min_length=1, description='Lyrics here...')
    style: Optional[str] = Field(None, description='Musical style')
    title: Optional[str] = Field(None, description='Song title')
    instrumental: bool = Field(..., strict=True, description='Generate without vocals')


class GenerateMusicResponse(BaseModel):
    """Schema for a submitted job."""
    task_id: str
    status: str
    message: str


class MusicResultRequest(BaseModel):
    """Schema for waiting on a job result."""
    task_id: Optional[str] = Field(None, description='Task to wait for (null = latest submission)')
    max_attempts: Optional[int] = Field(None, ge=1, le=60)
    interval_seconds: Optional[float] = Field(None, gt=0, le=60)


class MusicResultResponse(BaseModel):
    """Schema for a job result, terminal or still pending."""
    task_id: str
    status: str
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    title: Optional[str] = None
    failure_reason: Optional[str] = None
    message: str


class JobSnapshotResponse(BaseModel):
    """Schema for the current state of a job without waiting."""
    task_id: str
    status: str
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    title: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    finished_at: Optional[datetime] = None

    @classmethod
    def from_job(cls, job: Job) -> 'JobSnapshotResponse':
        result = job.result
        return cls(
            task_id=job.job_id,
            status=job.status.value,
            audio_url=result.audio_url if result else None,
            image_url=result.image_url if result else None,
            title=result.title if result else None,
            failure_reason=job.failure_reason,
            created_at=job.created_at,
            finished_at=job.finished_at,
        )
