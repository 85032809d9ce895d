"""
Top-level API router.

Aggregates the resource routers.  The users collection is served at
``/users`` without a version prefix, matching the paths existing
clients already call.
"""

from fastapi import APIRouter

from .endpoints import users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
