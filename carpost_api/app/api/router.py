"""
Top‑level API router.

Aggregates the area routers.  Paths are part of the public contract
with the frontend; keep them unchanged when reorganising endpoints.
"""

from fastapi import APIRouter

from .endpoints import cars, profile, register


router = APIRouter()

router.include_router(register.router, tags=["auth"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
router.include_router(cars.router, prefix="/profile/car", tags=["cars"])
