"""
FastAPI routers.
"""
from songbridge.routers.health import router as health_router
from songbridge.routers.tools import router as tools_router
from songbridge.routers.webhook import router as webhook_router

__all__ = ['health_router', 'tools_router', 'webhook_router']
