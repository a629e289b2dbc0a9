#!/usr/bin/env python3
"""
SongBridge FastAPI Server

Bridges a music generation provider that reports completion through a
webhook to agents that can only poll. Two applications share one process
and one completion registry:

    tools app    (agent-facing)     POST /tools/generate-music, POST /tools/get-music-result
    webhook app  (provider-facing)  POST /webhook
"""
import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from songbridge.config import APP_NAME, APP_VERSION, CALLBACK_URL, SERVER_HOST, TOOLS_PORT, WEBHOOK_PORT
from songbridge.services.completion_registry import get_completion_registry
from songbridge.routers import health_router, tools_router, webhook_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Tools application lifespan.

    Startup:
        - Create the shared completion registry

    Shutdown:
        - Report jobs still pending
    """
    print(f'Starting {APP_NAME} v{APP_VERSION}...')
    registry = get_completion_registry()
    print(f'Provider callbacks go to {CALLBACK_URL}')

    yield

    print('Shutting down...')
    pending = registry.pending_count()
    if pending:
        print(f'{pending} job(s) still pending; their callbacks will be lost.')
    print('Shutdown complete.')


# Agent-facing application
app = FastAPI(
    title=APP_NAME,
    description='Generate music with an asynchronous provider and poll for the result.',
    version=APP_VERSION,
    lifespan=lifespan,
)
app.include_router(health_router)
app.include_router(tools_router)


# Provider-facing application
webhook_app = FastAPI(
    title=f'{APP_NAME} Webhook',
    description='Receives generation callbacks from the provider.',
    version=APP_VERSION,
)
webhook_app.include_router(health_router)
webhook_app.include_router(webhook_router)


async def serve():
    """Run both applications on one event loop so they share the registry."""
    tools_server = uvicorn.Server(uvicorn.Config(
        app,
        host=SERVER_HOST,
        port=TOOLS_PORT,
        log_level='info',
    ))
    webhook_server = uvicorn.Server(uvicorn.Config(
        webhook_app,
        host=SERVER_HOST,
        port=WEBHOOK_PORT,
        log_level='info',
    ))

    print(f'Tools server at http://{SERVER_HOST}:{TOOLS_PORT} (docs at /docs)')
    print(f'Webhook server at http://{SERVER_HOST}:{WEBHOOK_PORT}/webhook')

    await asyncio.gather(tools_server.serve(), webhook_server.serve())


if __name__ == '__main__':
    asyncio.run(serve())
