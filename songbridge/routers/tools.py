"""
Agent-facing tool endpoints: generate music and collect the result.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from songbridge.config import POLL_DEADLINE_SECONDS, POLL_INTERVAL_SECONDS, POLL_MAX_ATTEMPTS
from songbridge.exceptions import JobFailed, ProviderRejected, ProviderUnreachable, StillPending
from songbridge.models.job import Job, JobStatus
from songbridge.schemas.job import (
    GenerateMusicRequest,
    GenerateMusicResponse,
    JobSnapshotResponse,
    MusicResultRequest,
    MusicResultResponse,
)
from songbridge.services.completion_registry import CompletionRegistry, get_completion_registry
from songbridge.services.poll_resolver import PollResolver
from songbridge.services.provider_client import ProviderClient, get_provider_client

logger = logging.getLogger(__name__)

STILL_PENDING_MESSAGE = 'Still generating music. Try again in a few minutes!'


router = APIRouter(prefix='/tools', tags=['tools'])


def get_poll_resolver(
    registry: CompletionRegistry = Depends(get_completion_registry),
) -> PollResolver:
    """Poll resolver reading from the shared registry."""
    return PollResolver(registry)


@router.post('/generate-music', response_model=GenerateMusicResponse, status_code=201)
async def generate_music(
    request: GenerateMusicRequest,
    provider: ProviderClient = Depends(get_provider_client),
    registry: CompletionRegistry = Depends(get_completion_registry),
) -> GenerateMusicResponse:
    """
    Start a music generation job.

    Returns as soon as the provider accepts the job. The finished song
    arrives later through the webhook; use get-music-result to collect it.
    """
    try:
        task_id = await provider.submit(
            prompt=request.prompt,
            instrumental=request.instrumental,
            style=request.style,
            title=request.title,
        )
    except ProviderRejected as e:
        raise HTTPException(status_code=502, detail=f'Music generation failed: {e.message}')
    except ProviderUnreachable as e:
        raise HTTPException(status_code=503, detail=f'Music generation failed: {e}')

    registry.register(task_id)

    return GenerateMusicResponse(
        task_id=task_id,
        status=JobStatus.pending.value,
        message=f"Music generation started! Use 'Get Music Result' with task {task_id} to check status.",
    )


@router.post(
    '/get-music-result',
    response_model=MusicResultResponse,
    responses={202: {'model': MusicResultResponse, 'description': 'Job still pending'}},
)
async def get_music_result(
    request: MusicResultRequest,
    resolver: PollResolver = Depends(get_poll_resolver),
    registry: CompletionRegistry = Depends(get_completion_registry),
):
    """
    Wait for a job to finish and return the song.

    Polls for a bounded time. If the job is still running afterwards the
    response is 202 and the caller should ask again later.
    """
    task_id = request.task_id or registry.latest_job_id()
    if not task_id:
        raise HTTPException(status_code=404, detail='No music generation job has been submitted')

    try:
        job = await resolver.wait(
            task_id,
            max_attempts=request.max_attempts or POLL_MAX_ATTEMPTS,
            interval=request.interval_seconds or POLL_INTERVAL_SECONDS,
            deadline=POLL_DEADLINE_SECONDS,
        )
        return _completed_response(job)
    except StillPending:
        pending = MusicResultResponse(
            task_id=task_id,
            status=JobStatus.pending.value,
            message=STILL_PENDING_MESSAGE,
        )
        return JSONResponse(status_code=202, content=pending.model_dump())
    except JobFailed as e:
        return MusicResultResponse(
            task_id=task_id,
            status=JobStatus.failed.value,
            failure_reason=e.reason,
            message=f'Music generation failed: {e.reason}',
        )


@router.get('/jobs/{task_id}', response_model=JobSnapshotResponse)
async def get_job(
    task_id: str,
    registry: CompletionRegistry = Depends(get_completion_registry),
) -> JobSnapshotResponse:
    """Get the current state of a job without waiting."""
    job = registry.get(task_id)
    if job is None:
        raise HTTPException(status_code=404, detail=f'Job not found: {task_id}')
    return JobSnapshotResponse.from_job(job)


def _completed_response(job: Job) -> MusicResultResponse:
    if job.status == JobStatus.failed:
        raise JobFailed(job.job_id, job.failure_reason or 'Unknown error')

    result = job.result
    return MusicResultResponse(
        task_id=job.job_id,
        status=JobStatus.complete.value,
        audio_url=result.audio_url,
        image_url=result.image_url,
        title=result.title,
        message=f'Music complete! Listen here: {result.audio_url}',
    )
