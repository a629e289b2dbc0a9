"""
Pydantic schemas for API request/response validation.
"""
from songbridge.schemas.job import (
    GenerateMusicRequest,
    GenerateMusicResponse,
    JobSnapshotResponse,
    MusicResultRequest,
    MusicResultResponse,
)
from songbridge.schemas.callback import CallbackAck, CallbackData, CallbackPayload, CallbackTrack

__all__ = [
    'GenerateMusicRequest',
    'GenerateMusicResponse',
    'JobSnapshotResponse',
    'MusicResultRequest',
    'MusicResultResponse',
    'CallbackAck',
    'CallbackData',
    'CallbackPayload',
    'CallbackTrack',
]
