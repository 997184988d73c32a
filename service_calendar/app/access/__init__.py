"""
Access gate for the Calendar API: HTTP Basic credentials plus an IPv4 allowlist.
"""

from .policy import AccessPolicy, IpRange, load_access_policy, parse_ip_ranges
from .gate import AccessGate, Credentials, Decision, DenyReason, parse_basic_credentials
from .middleware import AccessGateMiddleware

__all__ = [
    "AccessGate",
    "AccessGateMiddleware",
    "AccessPolicy",
    "Credentials",
    "Decision",
    "DenyReason",
    "IpRange",
    "load_access_policy",
    "parse_basic_credentials",
    "parse_ip_ranges",
]
