"""
Calendar API service.
"""

from typing import Optional

from fastapi import FastAPI

from shared.base_service import BaseService
from shared.config import ServiceConfig
from service_calendar.app.access import AccessGate, AccessGateMiddleware, load_access_policy
from service_calendar.app.controllers import (
    DEFAULT_VERSION,
    ROUTERS,
    SUPPORTED_VERSIONS,
    create_info_for_api_version,
)

SERVICE_NAME = "calendar"
DEFAULT_PORT = 8000
SWAGGER_URL = "/swagger"


class CalendarService(BaseService):
    """Calendar API service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        self.access_policy = None
        self.access_gate = None
        super().__init__(SERVICE_NAME, DEFAULT_PORT, config=config)

        self._setup_calendar_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.calendar_service = self

        self.logger.info(
            "Calendar service configured",
            api_versions=[str(version) for version in SUPPORTED_VERSIONS],
            allowed_ranges=self.access_policy.range_text,
        )

    def _create_app(self) -> FastAPI:
        """Create the FastAPI application with versioned Swagger documentation."""
        info = create_info_for_api_version(DEFAULT_VERSION)
        return FastAPI(
            docs_url=SWAGGER_URL,
            redoc_url=None,
            swagger_ui_oauth2_redirect_url=f"{SWAGGER_URL}/oauth2-redirect",
            openapi_url=f"{SWAGGER_URL}/{DEFAULT_VERSION.group_name}/swagger.json",
            **info
        )

    def _setup_service_middleware(self):
        """Place the access gate in front of every calendar route."""
        self.access_policy = load_access_policy(self.config)
        self.access_gate = AccessGate(self.access_policy, metrics=self.metrics)
        self.app.add_middleware(
            AccessGateMiddleware,
            gate=self.access_gate,
            exempt_paths=self.config.exempt_path_prefixes,
        )

    def _setup_calendar_routes(self):
        """Mount the versioned controllers."""
        for routers in ROUTERS.values():
            for router in routers:
                self.app.include_router(router)

        @self.app.get("/", include_in_schema=False)
        async def root():
            """Root endpoint."""
            return {
                "service": self.service_name,
                "message": "Calendar API",
                "api_versions": [str(version) for version in SUPPORTED_VERSIONS],
                "docs": SWAGGER_URL,
            }


def create_app(config: Optional[ServiceConfig] = None) -> FastAPI:
    """Create FastAPI application."""
    service = CalendarService(config)
    return service.app


def main() -> None:
    service = CalendarService()
    service.run()


if __name__ == "__main__":
    main()
