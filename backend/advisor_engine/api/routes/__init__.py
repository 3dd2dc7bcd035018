"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from advisor_engine.api.dependencies.engine import invalid_user_id

from .dashboard import router as dashboard_router
from .market import router as market_router
from .profile import router as profile_router
from .recommendations import router as recommendations_router

# sections whose routes take a user id as their first path segment
USER_SECTIONS = ("recommendations", "recommendation", "profile", "portfolio", "education", "dashboard")


async def missing_user_id() -> None:
    raise invalid_user_id()


api_router = APIRouter()
api_router.include_router(recommendations_router, tags=["recommendations"])
api_router.include_router(profile_router, tags=["profile"])
api_router.include_router(market_router, tags=["market"])
api_router.include_router(dashboard_router, tags=["dashboard"])

for section in USER_SECTIONS:
    for path in (f"/{section}", f"/{section}/"):
        api_router.add_api_route(path, missing_user_id, methods=["GET"], include_in_schema=False)

__all__ = ["api_router"]
