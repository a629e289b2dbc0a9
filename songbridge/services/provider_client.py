"""
Client for the music generation provider's submission API.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from songbridge.config import (
    CALLBACK_TOKEN,
    CALLBACK_URL,
    PROVIDER_API_KEY,
    PROVIDER_BASE_URL,
    PROVIDER_MODEL,
    PROVIDER_TIMEOUT_SECONDS,
)
from songbridge.exceptions import ProviderRejected, ProviderUnreachable

logger = logging.getLogger(__name__)

GENERATE_PATH = '/api/v1/generate'
PROVIDER_SUCCESS_CODE = 200


def build_callback_url(base_url: str, token: str = '') -> str:
    """Callback address handed to the provider, carrying the shared token if any."""
    if not token:
        return base_url
    separator = '&' if '?' in base_url else '?'
    return f'{base_url}{separator}{urlencode({"token": token})}'


class ProviderClient:
    """
    Submits generation jobs to the provider.

    The provider answers immediately with a task ID and reports the finished
    song later through the callback URL. This client only performs the
    submission; it keeps no job state.
    """

    def __init__(
        self,
        base_url: str = PROVIDER_BASE_URL,
        api_key: str = PROVIDER_API_KEY,
        callback_url: str = CALLBACK_URL,
        callback_token: str = CALLBACK_TOKEN,
        model: str = PROVIDER_MODEL,
        timeout_seconds: float = PROVIDER_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.callback_url = build_callback_url(callback_url, callback_token)
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def build_payload(
        self,
        prompt: str,
        instrumental: bool,
        style: Optional[str] = None,
        title: Optional[str] = None,
    ) -> dict:
        """Request body for a generation job."""
        return {
            'prompt': prompt,
            'style': style,
            'title': title,
            'customMode': True,
            'instrumental': instrumental,
            'model': self.model,
            'callBackUrl': self.callback_url,
        }

    async def submit(
        self,
        prompt: str,
        instrumental: bool,
        style: Optional[str] = None,
        title: Optional[str] = None,
    ) -> str:
        """
        Submit a generation job.

        Args:
            prompt: Lyrics or description (required, non-empty)
            instrumental: Generate without vocals
            style: Optional musical style
            title: Optional song title

        Returns:
            Provider-assigned task ID

        Raises:
            ProviderRejected: provider answered without accepting the job
            ProviderUnreachable: network or transport failure
        """
        if not prompt or not prompt.strip():
            raise ValueError('prompt must not be empty')
        if not isinstance(instrumental, bool):
            raise ValueError('instrumental must be a boolean')

        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
        }
        payload = self.build_payload(prompt, instrumental, style=style, title=title)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f'{self.base_url}{GENERATE_PATH}',
                    headers=headers,
                    json=payload,
                )
        except httpx.RequestError as e:
            logger.error('Provider unreachable: %s', e)
            raise ProviderUnreachable(f'Provider unreachable: {e}') from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            raise ProviderRejected(
                f'Provider returned a non-JSON response (HTTP {response.status_code})',
                status_code=response.status_code,
            )

        code = body.get('code')
        message = body.get('msg') or 'Unknown error from provider'
        data = body.get('data') or {}
        task_id = data.get('taskId') if isinstance(data, dict) else None

        if response.status_code != 200 or code != PROVIDER_SUCCESS_CODE or not task_id:
            logger.error('Provider rejected submission (HTTP %s, code %s): %s',
                         response.status_code, code, message)
            raise ProviderRejected(message, status_code=response.status_code)

        logger.info('Provider accepted job %s', task_id)
        return str(task_id)


# Singleton instance
_provider_client: Optional[ProviderClient] = None


def get_provider_client() -> ProviderClient:
    """Get the provider client singleton instance."""
    global _provider_client
    if _provider_client is None:
        _provider_client = ProviderClient()
    return _provider_client


def reset_provider_client():
    """Reset the provider client singleton (for testing)."""
    global _provider_client
    _provider_client = None
