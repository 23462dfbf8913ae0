"""
API v1 router - aggregates all endpoint modules.
"""

from fastapi import APIRouter

from shareit.api.v1.endpoints import bookings, health, items, requests, search, users

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
