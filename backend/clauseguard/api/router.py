"""API router: aggregates all endpoints."""

from fastapi import APIRouter

from clauseguard.api import health, root, settings
from clauseguard.api.policy_analyzer.router import router as policy_analyzer_router

api_router = APIRouter()

api_router.include_router(root.router)
api_router.include_router(health.router)
api_router.include_router(settings.router)
api_router.include_router(policy_analyzer_router)
