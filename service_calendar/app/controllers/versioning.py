"""
API versioning helpers for the calendar controllers.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from fastapi import APIRouter, Depends, Response


@dataclass(frozen=True)
class ApiVersion:
    """Major/minor API version, rendered as ``1.0`` with route group ``v1``."""

    major: int
    minor: int = 0
    deprecated: bool = False

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @property
    def group_name(self) -> str:
        return f"v{self.major}"


V1 = ApiVersion(1, 0)
SUPPORTED_VERSIONS: List[ApiVersion] = [V1]
DEFAULT_VERSION = V1


def supported_versions_header(versions: Iterable[ApiVersion] = SUPPORTED_VERSIONS) -> str:
    return ", ".join(str(version) for version in versions if not version.deprecated)


async def report_api_versions(response: Response) -> None:
    """Advertise the supported API versions on every versioned response."""
    response.headers["api-supported-versions"] = supported_versions_header()
    deprecated = [str(version) for version in SUPPORTED_VERSIONS if version.deprecated]
    if deprecated:
        response.headers["api-deprecated-versions"] = ", ".join(deprecated)


def versioned_router(version: ApiVersion, resource: str, **kwargs: Any) -> APIRouter:
    """Router mounted at ``/v{major}/{resource}``."""
    return APIRouter(
        prefix=f"/{version.group_name}/{resource}",
        dependencies=[Depends(report_api_versions)],
        deprecated=version.deprecated or None,
        **kwargs
    )


def create_info_for_api_version(version: ApiVersion) -> Dict[str, Any]:
    """OpenAPI document metadata for an API version."""
    description = (
        f"Calendar API with support for Swagger and API versioning ({version})."
    )
    if version.deprecated:
        description += "\n\n*** This API version has been deprecated ***"

    return {
        "title": f"Calendar API {version}",
        "version": str(version),
        "description": description,
        "contact": {"name": "Calendar API Engineering"},
        "terms_of_service": "Proprietary",
        "license_info": {"name": "Proprietary"},
    }
