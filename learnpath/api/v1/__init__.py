"""
API v1 routes.
"""

from fastapi import APIRouter

from learnpath.api.v1 import learn, masteries

router = APIRouter()

router.include_router(learn.router, prefix="/learn", tags=["Learn"])
router.include_router(masteries.router, prefix="/masteries", tags=["Masteries"])
