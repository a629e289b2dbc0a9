"""
Application configuration.

Every value can be overridden with an environment variable.
"""
import os
from typing import Optional


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return float(value)


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return int(value)


# Application identity
APP_NAME = 'SongBridge'
APP_VERSION = '0.1.0'

# Server configuration
SERVER_HOST = os.environ.get('SONGBRIDGE_HOST', '127.0.0.1')
TOOLS_PORT = _env_int('SONGBRIDGE_TOOLS_PORT', 2022)
WEBHOOK_PORT = _env_int('SONGBRIDGE_WEBHOOK_PORT', 3001)

# Generation provider (Suno-compatible API)
PROVIDER_BASE_URL = os.environ.get('SUNO_API_BASE_URL', 'https://apibox.erweima.ai')
PROVIDER_API_KEY = os.environ.get('SUNO_API_KEY', '')
PROVIDER_MODEL = os.environ.get('SUNO_MODEL', 'V3_5')
PROVIDER_TIMEOUT_SECONDS = _env_float('SUNO_TIMEOUT_SECONDS', 30.0)

# Address the provider calls back when a job finishes. Must be reachable
# from the provider (e.g. through a tunnel in development).
CALLBACK_URL = os.environ.get('SONGBRIDGE_CALLBACK_URL', f'http://localhost:{WEBHOOK_PORT}/webhook')

# Shared secret appended to the callback URL. Empty disables the check.
CALLBACK_TOKEN = os.environ.get('SONGBRIDGE_CALLBACK_TOKEN', '')

# Poll policy for get-music-result
POLL_MAX_ATTEMPTS = _env_int('SONGBRIDGE_POLL_MAX_ATTEMPTS', 15)
POLL_INTERVAL_SECONDS = _env_float('SONGBRIDGE_POLL_INTERVAL_SECONDS', 20.0)
POLL_DEADLINE_SECONDS = _env_float('SONGBRIDGE_POLL_DEADLINE_SECONDS', None)

# Upper bound on jobs tracked in memory
REGISTRY_MAX_ENTRIES = _env_int('SONGBRIDGE_REGISTRY_MAX_ENTRIES', 1000)
