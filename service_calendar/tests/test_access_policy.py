"""
Unit tests for AccessPolicy loading and IP range parsing.
"""

import ipaddress
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_calendar.app.access.policy import IpRange, load_access_policy, parse_ip_ranges
from shared.config import BaseConfig
from shared.errors import ConfigurationError


def ip(value: str) -> ipaddress.IPv4Address:
    return ipaddress.IPv4Address(value)


class TestIpRange:
    """Test cases for IpRange parsing and containment."""

    def test_cidr_containment(self):
        """Test the /24 containment example."""
        ip_range = IpRange.parse("192.168.1.0/24")
        assert ip("192.168.1.55") in ip_range
        assert ip("192.168.2.1") not in ip_range

    def test_cidr_bounds(self):
        """Test network and broadcast addresses are inside the range."""
        ip_range = IpRange.parse("10.0.0.0/8")
        assert ip("10.0.0.0") in ip_range
        assert ip("10.255.255.255") in ip_range
        assert ip("11.0.0.0") not in ip_range

    def test_host_bits_allowed(self):
        """Test a CIDR with host bits set covers its network."""
        ip_range = IpRange.parse("192.168.1.77/24")
        assert ip("192.168.1.1") in ip_range

    def test_single_address(self):
        ip_range = IpRange.parse("10.1.2.3")
        assert ip("10.1.2.3") in ip_range
        assert ip("10.1.2.4") not in ip_range

    def test_netmask_notation(self):
        ip_range = IpRange.parse("192.168.0.0/255.255.0.0")
        assert ip("192.168.200.1") in ip_range
        assert ip("192.169.0.1") not in ip_range

    def test_hyphenated_range(self):
        ip_range = IpRange.parse("10.0.0.1 - 10.0.0.50")
        assert ip("10.0.0.1") in ip_range
        assert ip("10.0.0.50") in ip_range
        assert ip("10.0.0.51") not in ip_range
        assert ip("10.0.0.0") not in ip_range

    def test_last_octet_range(self):
        """Test the short hyphen form where the end is only the last octet."""
        ip_range = IpRange.parse("192.168.10.10-20")
        assert ip_range.first == ip("192.168.10.10")
        assert ip_range.last == ip("192.168.10.20")
        assert ip("192.168.10.15") in ip_range
        assert ip("192.168.10.21") not in ip_range
        assert str(ip_range) == "192.168.10.10-20"

    def test_last_octet_range_in_setting(self):
        ranges = parse_ip_ranges("10.0.0.0/8, 192.168.10.10-20")
        assert [str(r) for r in ranges] == ["10.0.0.0/8", "192.168.10.10-20"]

    def test_text_is_kept(self):
        assert str(IpRange.parse(" 10.0.0.0/8 ")) == "10.0.0.0/8"

    @pytest.mark.parametrize("text", [
        "",
        "10.0.0.0/33",
        "300.1.1.1",
        "10.0.0.50-10.0.0.1",
        "10.0.0.20-5",
        "10.0.0.1-256",
        "2001:db8::/32",
        "not-an-ip",
    ])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            IpRange.parse(text)


class TestParseIpRanges:
    """Test cases for SystemValidIpRange parsing."""

    def test_order_is_preserved(self):
        ranges = parse_ip_ranges("10.0.0.0/8,192.168.1.0/24, 172.16.0.0/12")
        assert [str(r) for r in ranges] == ["10.0.0.0/8", "192.168.1.0/24", "172.16.0.0/12"]

    def test_blank_entries_skipped(self):
        assert len(parse_ip_ranges("10.0.0.0/8,, ,")) == 1

    def test_accepts_sequence(self):
        assert len(parse_ip_ranges(["10.0.0.0/8", "192.168.1.0/24"])) == 2

    def test_invalid_entry(self):
        """Test one bad entry fails the whole setting."""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_ip_ranges("10.0.0.0/8,bogus")
        assert exc_info.value.details["entry"] == "bogus"


class TestLoadAccessPolicy:
    """Test cases for load_access_policy."""

    @pytest.fixture
    def config(self):
        """Complete gate configuration."""
        return BaseConfig(
            basic_auth_username="svc",
            basic_auth_passcode="secret1",
            system_valid_ip_range="10.0.0.0/8,192.168.1.0/24",
        )

    def test_load(self, config):
        policy = load_access_policy(config)

        assert policy.expected_username == "svc"
        assert policy.expected_passcode == "secret1"
        assert policy.range_text == "10.0.0.0/8,192.168.1.0/24"
        assert policy.allows_address(ip("192.168.1.55"))
        assert not policy.allows_address(ip("192.168.2.1"))

    def test_policy_is_immutable(self, config):
        policy = load_access_policy(config)
        with pytest.raises(Exception):
            policy.expected_username = "other"

    def test_passcode_hidden_from_repr(self, config):
        assert "secret1" not in repr(load_access_policy(config))

    @pytest.mark.parametrize("field,key", [
        ("basic_auth_username", "BasicAuth:Username"),
        ("basic_auth_passcode", "BasicAuth:Passcode"),
        ("system_valid_ip_range", "SystemValidIpRange"),
    ])
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_setting(self, config, field, key, value):
        """Test each required setting fails fast."""
        broken = config.model_copy(update={field: value})

        with pytest.raises(ConfigurationError) as exc_info:
            load_access_policy(broken)

        assert exc_info.value.code == "CONFIGURATION_ERROR"
        assert exc_info.value.details["key"] == key
        assert key in exc_info.value.message

    def test_only_blank_ranges(self, config):
        broken = config.model_copy(update={"system_valid_ip_range": " , ,"})
        with pytest.raises(ConfigurationError):
            load_access_policy(broken)

    def test_invalid_range(self, config):
        broken = config.model_copy(update={"system_valid_ip_range": "10.0.0.0/8,10.0.0.0/40"})
        with pytest.raises(ConfigurationError):
            load_access_policy(broken)
