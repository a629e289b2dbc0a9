"""
Health check endpoint.
"""
from pydantic import BaseModel
from fastapi import APIRouter, Depends

from songbridge.config import APP_VERSION
from songbridge.services.completion_registry import CompletionRegistry, get_completion_registry


router = APIRouter(tags=['health'])


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str
    version: str
    tracked_jobs: int


@router.get('/health', response_model=HealthResponse)
async def health_check(
    registry: CompletionRegistry = Depends(get_completion_registry),
) -> HealthResponse:
    """
    Check server health status.

    Returns server version and the number of jobs held in memory.
    """
    return HealthResponse(
        status='ok',
        version=APP_VERSION,
        tracked_jobs=len(registry),
    )
