"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from brokerage.api.v1 import deadlines, deals, health, offers, reports, settings
from brokerage.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(deals.router)
api_router.include_router(offers.router)
api_router.include_router(deadlines.router)
api_router.include_router(settings.router)
api_router.include_router(reports.router)


def get_api_router() -> APIRouter:
    return api_router
