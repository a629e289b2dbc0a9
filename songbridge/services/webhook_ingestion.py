"""
Turns provider callbacks into registry transitions.
"""
import enum
import logging
from typing import Any

from pydantic import ValidationError

from songbridge.exceptions import MalformedCallback
from songbridge.models.job import DEFAULT_TITLE, SongResult
from songbridge.schemas.callback import CallbackPayload
from songbridge.services.completion_registry import CompletionRegistry

logger = logging.getLogger(__name__)

PROVIDER_SUCCESS_CODE = 200

# Lyrics-only stage sent before any audio exists
INTERMEDIATE_CALLBACK_TYPES = frozenset({'text'})


class IngestOutcome(str, enum.Enum):
    """What a callback did to the registry."""
    completed = 'completed'
    failed = 'failed'
    duplicate = 'duplicate'
    ignored = 'ignored'


def parse_callback(payload: Any) -> CallbackPayload:
    """
    Validate the shape of a callback body.

    Raises:
        MalformedCallback: missing message, correlation key, results or audio URL
    """
    if not isinstance(payload, dict):
        raise MalformedCallback('Callback body must be a JSON object')

    try:
        callback = CallbackPayload.model_validate(payload)
    except ValidationError as e:
        raise MalformedCallback(f'Invalid callback payload: {e.error_count()} error(s)') from e

    if not callback.data.task_id:
        raise MalformedCallback('Callback is missing task_id')

    if _reports_failure(callback):
        return callback

    tracks = callback.data.data
    if not tracks:
        raise MalformedCallback('Callback has no results')
    if not tracks[0].audio_url:
        raise MalformedCallback('First result is missing audio_url')

    return callback


def ingest_callback(payload: Any, registry: CompletionRegistry) -> IngestOutcome:
    """
    Apply a provider callback to the registry.

    The registry is left untouched when the payload is malformed. A callback
    for a job that already finished is acknowledged but does not replace the
    stored result.

    Raises:
        MalformedCallback: the payload failed validation
    """
    callback = parse_callback(payload)
    job_id = callback.data.task_id

    if _reports_failure(callback):
        logger.warning('Provider reported failure for job %s: %s', job_id, callback.msg)
        if registry.set_failed(job_id, callback.msg):
            return IngestOutcome.failed
        return IngestOutcome.duplicate

    if _is_intermediate(callback):
        logger.info('Ignoring %s callback for job %s', callback.data.callback_type, job_id)
        return IngestOutcome.ignored

    track = callback.data.data[0]
    result = SongResult(
        audio_url=track.audio_url,
        image_url=track.image_url or None,
        title=track.title or DEFAULT_TITLE,
    )
    logger.info('Callback received for job %s - audio URL: %s', job_id, result.audio_url)

    if registry.set_complete(job_id, result):
        return IngestOutcome.completed

    logger.info('Duplicate callback for job %s ignored', job_id)
    return IngestOutcome.duplicate


def _reports_failure(callback: CallbackPayload) -> bool:
    return callback.code is not None and callback.code != PROVIDER_SUCCESS_CODE


def _is_intermediate(callback: CallbackPayload) -> bool:
    return callback.data.callback_type in INTERMEDIATE_CALLBACK_TYPES
