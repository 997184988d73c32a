"""
Versioned API controllers for the Calendar Service.

Each version package exposes ``routers``; all are mounted under ``/v{major}``.
"""

from .versioning import (
    ApiVersion,
    DEFAULT_VERSION,
    SUPPORTED_VERSIONS,
    create_info_for_api_version,
    versioned_router,
)
from . import v1

ROUTERS = {
    "v1": v1.routers,
}

__all__ = [
    "ApiVersion",
    "DEFAULT_VERSION",
    "ROUTERS",
    "SUPPORTED_VERSIONS",
    "create_info_for_api_version",
    "versioned_router",
]
