"""
Provider-facing webhook endpoint.
"""
import json
import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from songbridge import config
from songbridge.exceptions import MalformedCallback
from songbridge.schemas.callback import CallbackAck
from songbridge.services.completion_registry import CompletionRegistry, get_completion_registry
from songbridge.services.webhook_ingestion import ingest_callback

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = 'Invalid webhook payload'


router = APIRouter(tags=['webhook'])


@router.post(
    '/webhook',
    response_model=CallbackAck,
    responses={
        400: {'model': CallbackAck, 'description': 'Malformed callback'},
        401: {'model': CallbackAck, 'description': 'Callback token mismatch'},
    },
)
async def receive_callback(
    request: Request,
    token: Optional[str] = Query(default=None),
    registry: CompletionRegistry = Depends(get_completion_registry),
):
    """
    Receive a generation callback from the provider.

    Malformed payloads get a 400 acknowledgment and never reach the
    registry. Repeated callbacks for a finished job are acknowledged
    normally; the first result is kept.
    """
    if config.CALLBACK_TOKEN and not secrets.compare_digest(
        (token or '').encode(),
        config.CALLBACK_TOKEN.encode(),
    ):
        logger.warning('Rejected webhook call with invalid token')
        return JSONResponse(status_code=401, content={'message': 'Invalid callback token'})

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning('Webhook body is not valid JSON')
        return JSONResponse(status_code=400, content={'message': INVALID_PAYLOAD_MESSAGE})

    logger.debug('Received webhook payload: %s', payload)

    try:
        outcome = ingest_callback(payload, registry)
    except MalformedCallback as e:
        logger.warning('Rejected webhook payload: %s', e)
        return JSONResponse(status_code=400, content={'message': INVALID_PAYLOAD_MESSAGE})

    logger.info('Webhook processed: %s', outcome.value)
    return CallbackAck(message='Received')
