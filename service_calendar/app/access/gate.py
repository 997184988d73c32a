"""
HTTP Basic credential and IP allowlist gate.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from fastapi import Request

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .policy import AccessPolicy

BASIC_SCHEME = "Basic "


class DenyReason(str, Enum):
    """Why a request was refused. Server-side only, never sent to clients."""
    MISSING_OR_WRONG_SCHEME = "MissingOrWrongScheme"
    MALFORMED_HEADER = "MalformedHeader"
    INVALID_CREDENTIALS = "InvalidCredentials"
    UNSUPPORTED_ADDRESS_FAMILY = "UnsupportedAddressFamily"
    IP_NOT_ALLOWED = "IpNotAllowed"


@dataclass(frozen=True)
class Decision:
    """Outcome of a gate check: allowed, or denied with a reason."""

    allowed: bool
    reason: Optional[DenyReason] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(False, reason)


@dataclass(frozen=True)
class Credentials:
    """Username and passcode decoded from a Basic Authorization header."""

    username: str
    passcode: str = field(repr=False)


def parse_basic_credentials(authorization: Optional[str]):
    """Decode a Basic Authorization header.

    Returns ``(credentials, None)`` on success or ``(None, reason)`` when the
    header is absent, uses another scheme, or cannot be decoded.
    """
    if not authorization or not authorization.startswith(BASIC_SCHEME):
        return None, DenyReason.MISSING_OR_WRONG_SCHEME

    encoded = authorization[len(BASIC_SCHEME):].strip()
    if not encoded:
        return None, DenyReason.MALFORMED_HEADER

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        # UnicodeDecodeError is a ValueError
        return None, DenyReason.MALFORMED_HEADER

    username, _, passcode = decoded.partition(":")
    if not username or not passcode:
        return None, DenyReason.MALFORMED_HEADER

    return Credentials(username=username, passcode=passcode), None


def to_ipv4(remote_ip: Optional[str]) -> Optional[ipaddress.IPv4Address]:
    """Return the IPv4 form of a remote address, unwrapping IPv4-mapped IPv6."""
    if not remote_ip:
        return None
    try:
        address = ipaddress.ip_address(remote_ip.strip())
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address):
        return address.ipv4_mapped
    return address


class AccessGate:
    """Checks Basic credentials, then the caller's IP, against an AccessPolicy.

    The gate holds no per-request state and is safe to share across
    concurrent requests.
    """

    def __init__(self, policy: AccessPolicy, metrics: Optional[MetricsCollector] = None):
        self.policy = policy
        self.metrics = metrics
        self.logger = get_logger("calendar.access_gate")

    def authorize(self, authorization: Optional[str], remote_ip: Optional[str]) -> Decision:
        """Decide whether a request with this header and remote address may proceed."""
        decision = self._evaluate(authorization, remote_ip)
        if self.metrics is not None:
            self.metrics.record_access_decision(
                decision.allowed,
                decision.reason.value if decision.reason else None
            )
        return decision

    def authorize_request(self, request: Request) -> Decision:
        """Authorize a Starlette/FastAPI request."""
        remote_ip = request.client.host if request.client else None
        return self.authorize(request.headers.get("Authorization"), remote_ip)

    def _evaluate(self, authorization: Optional[str], remote_ip: Optional[str]) -> Decision:
        credentials, reason = parse_basic_credentials(authorization)
        if credentials is None:
            self.logger.warning("Request rejected", reason=reason.value, client_ip=remote_ip)
            return Decision.deny(reason)

        if not self._credentials_match(credentials):
            self.logger.error(
                "API credentials failed",
                reason=DenyReason.INVALID_CREDENTIALS.value,
                username=credentials.username,
            )
            return Decision.deny(DenyReason.INVALID_CREDENTIALS)

        address = to_ipv4(remote_ip)
        if address is None:
            self.logger.warning(
                "Request rejected",
                reason=DenyReason.UNSUPPORTED_ADDRESS_FAMILY.value,
                client_ip=remote_ip,
            )
            return Decision.deny(DenyReason.UNSUPPORTED_ADDRESS_FAMILY)

        if self.policy.allows_address(address):
            return Decision.allow()

        self.logger.error(
            "Incoming connection from an unsafe IP",
            reason=DenyReason.IP_NOT_ALLOWED.value,
            client_ip=remote_ip,
            allowed_ranges=self.policy.range_text,
        )
        return Decision.deny(DenyReason.IP_NOT_ALLOWED)

    def _credentials_match(self, credentials: Credentials) -> bool:
        # Evaluate both comparisons so timing does not reveal which one failed
        username_ok = hmac.compare_digest(
            credentials.username.encode("utf-8"),
            self.policy.expected_username.encode("utf-8")
        )
        passcode_ok = hmac.compare_digest(
            credentials.passcode.encode("utf-8"),
            self.policy.expected_passcode.encode("utf-8")
        )
        return username_ok and passcode_ok
