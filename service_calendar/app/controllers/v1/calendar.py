"""
Calendar controller, API version 1.0.
"""

from fastapi import APIRouter

from ..versioning import V1, versioned_router

router: APIRouter = versioned_router(V1, "calendar", tags=["calendar"])


@router.get("")
async def calendar_status():
    """Report that the calendar controller is reachable."""
    return {
        "controller": "calendar",
        "api_version": str(V1),
        "status": "operational",
    }
