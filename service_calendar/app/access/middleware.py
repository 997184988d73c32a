"""
Pipeline step placing the AccessGate in front of the calendar routes.
"""

from typing import Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .gate import AccessGate


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Rejects requests the gate denies with a bare 401; forwards the rest unchanged."""

    def __init__(self, app, gate: AccessGate, exempt_paths: Iterable[str] = ()):
        super().__init__(app)
        self.gate = gate
        self.exempt_paths = tuple(exempt_paths)

    def is_exempt(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix.rstrip("/") + "/") for prefix in self.exempt_paths)

    async def dispatch(self, request: Request, call_next):
        if self.is_exempt(request.url.path):
            return await call_next(request)

        decision = self.gate.authorize_request(request)
        if not decision.allowed:
            # The deny reason stays in the server logs
            return Response(status_code=401)

        return await call_next(request)
