"""
Shared utilities for the Calendar API.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings and appsettings files
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service scaffold with health, metrics and middleware

Do not import from service_* packages into shared/.
"""
