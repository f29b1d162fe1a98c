"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
Both routers define their own paths internally, so no prefix is given
here.
"""

from fastapi import APIRouter

from .endpoints import health, requests

router = APIRouter()

router.include_router(requests.router, tags=["requests"])
router.include_router(health.router, tags=["health"])
