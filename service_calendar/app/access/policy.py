"""
Access policy for the Calendar API gate.

The policy is built once from configuration at startup and shared, read-only,
by every request. Missing or unparseable settings raise ``ConfigurationError``
so a misconfigured service never starts.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Iterable, Tuple, Union

from shared.config import BaseConfig
from shared.errors import ConfigurationError

IPv4 = ipaddress.IPv4Address


@dataclass(frozen=True)
class IpRange:
    """Inclusive IPv4 address range parsed from one ``SystemValidIpRange`` entry."""

    first: IPv4
    last: IPv4
    text: str

    def __contains__(self, address: IPv4) -> bool:
        return self.first <= address <= self.last

    def __str__(self) -> str:
        return self.text

    @classmethod
    def parse(cls, text: str) -> "IpRange":
        """Parse CIDR, netmask, hyphenated range (full or last-octet) or single-address notation.

        Raises ``ValueError`` for anything that is not an IPv4 range.
        """
        entry = text.strip()
        if not entry:
            raise ValueError("empty IP range")

        if "-" in entry:
            begin, _, end = entry.partition("-")
            begin, end = begin.strip(), end.strip()
            first = ipaddress.IPv4Address(begin)
            if end.isdigit() and int(end) <= 255:
                # Short form "192.168.10.10-20": the end replaces the last octet
                end = f"{begin.rsplit('.', 1)[0]}.{int(end)}"
            last = ipaddress.IPv4Address(end)
            if first > last:
                raise ValueError(f"range start {first} is after range end {last}")
            return cls(first, last, entry)

        # Covers "10.0.0.0/8", "10.0.0.0/255.0.0.0" and bare "10.1.2.3"
        network = ipaddress.IPv4Network(entry, strict=False)
        return cls(network.network_address, network.broadcast_address, entry)


@dataclass(frozen=True)
class AccessPolicy:
    """The single valid credential pair and the networks callers may come from."""

    expected_username: str
    expected_passcode: str = field(repr=False)
    allowed_ranges: Tuple[IpRange, ...]

    def allows_address(self, address: IPv4) -> bool:
        """True when ``address`` falls in any configured range, tested in order."""
        return any(address in ip_range for ip_range in self.allowed_ranges)

    @property
    def range_text(self) -> str:
        return ",".join(str(ip_range) for ip_range in self.allowed_ranges)


def parse_ip_ranges(value: Union[str, Iterable[str]]) -> Tuple[IpRange, ...]:
    """Parse a comma-separated (or already split) list of IPv4 ranges."""
    entries = value.split(",") if isinstance(value, str) else list(value)
    ranges = []
    for entry in entries:
        if not entry.strip():
            continue
        try:
            ranges.append(IpRange.parse(entry))
        except ValueError as exc:
            raise ConfigurationError(
                f"SystemValidIpRange entry '{entry.strip()}' is not a valid IPv4 range",
                details={"entry": entry.strip(), "error": str(exc)}
            ) from exc
    return tuple(ranges)


def _require(value, key: str) -> str:
    if value is None or not str(value).strip():
        raise ConfigurationError(f"{key} is not set in the application settings", details={"key": key})
    return str(value)


def load_access_policy(config: BaseConfig) -> AccessPolicy:
    """Build the access policy from configuration, failing fast on missing values."""
    username = _require(config.basic_auth_username, "BasicAuth:Username")
    passcode = _require(config.basic_auth_passcode, "BasicAuth:Passcode")
    range_setting = _require(config.system_valid_ip_range, "SystemValidIpRange")

    allowed_ranges = parse_ip_ranges(range_setting)
    if not allowed_ranges:
        raise ConfigurationError(
            "SystemValidIpRange does not contain any IP range",
            details={"key": "SystemValidIpRange"}
        )

    return AccessPolicy(
        expected_username=username,
        expected_passcode=passcode,
        allowed_ranges=allowed_ranges,
    )
