"""
Shared logging configuration for the Calendar API.
"""

import sys
import os
import getpass
import socket
import structlog
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional
from contextvars import ContextVar

from shared.errors import ConfigurationError

# Context variables for correlation IDs
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

# Minimum log level per deployment mode
DEPLOYMENT_MODE_LEVELS: Dict[str, str] = {
    "LOCAL": "debug",
    "DEV": "info",
    "QA": "info",
    "STAGE": "warning",
    "TEST": "warning",
    "DEMO": "warning",
    "TRAINING": "warning",
    "PROD": "warning",
}


def resolve_log_level(deployment_mode: str) -> str:
    """Map a deployment mode to its minimum log level."""
    level = DEPLOYMENT_MODE_LEVELS.get(deployment_mode.strip().upper())
    if level is None:
        raise ConfigurationError(
            f"Unknown deployment mode found: {deployment_mode}",
            details={"deployment_mode": deployment_mode}
        )
    return level


def local_log_file(log_path: str, application_name: str, day: Optional[datetime] = None) -> str:
    """Daily detailed log file used in LOCAL mode, named after the application."""
    day = day or datetime.now()
    return os.path.join(log_path, f"{application_name}-local-{day.strftime('%Y%m%d')}.log")


def configure_logging(
    service_name: str,
    log_level: str = "info",
    deployment_mode: Optional[str] = None,
    log_path: Optional[str] = None,
    application_name: Optional[str] = None,
) -> None:
    """Configure structured logging for a service."""
    if deployment_mode:
        log_level = resolve_log_level(deployment_mode)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_host_context,
            add_correlation_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_path and deployment_mode and deployment_mode.strip().upper() == "LOCAL":
        os.makedirs(log_path, exist_ok=True)
        handlers.append(logging.FileHandler(local_log_file(log_path, application_name or service_name), encoding="utf-8"))

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    get_logger(service_name).debug(
        "Logging configuration complete",
        log_level=log_level,
        deployment_mode=deployment_mode,
        log_file=handlers[-1].baseFilename if len(handlers) > 1 else None,
    )


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    # Extract service name from logger name
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        service_name = logger_name.split(".")[0]
        event_dict["service"] = service_name

    return event_dict


def add_host_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add machine and OS user names to log events."""
    event_dict.setdefault("machine", socket.gethostname())
    try:
        event_dict.setdefault("os_user", getpass.getuser())
    except (KeyError, OSError):
        pass
    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation context to log events."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id

    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set request ID in context."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def clear_context():
    """Clear all context variables."""
    request_id_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
