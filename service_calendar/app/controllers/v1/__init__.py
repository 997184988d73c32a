"""
Version 1.0 controllers.
"""

from .calendar import router as calendar_router

routers = [calendar_router]

__all__ = ["calendar_router", "routers"]
