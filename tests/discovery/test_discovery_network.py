"""
tests/discovery/test_discovery_network.py - discovery/network.py 테스트
"""

import ipaddress

import pytest

from discovery.network import (
    TransportAddress,
    TransportAddressResolver,
    parse_address,
    parse_port_range,
    to_uri_string,
)


class TestParseAddress:
    """parse_address / to_uri_string"""

    def test_ipv4(self):
        ip = parse_address("10.0.0.5")
        assert ip == ipaddress.IPv4Address("10.0.0.5")
        assert to_uri_string(ip) == "10.0.0.5"

    def test_ipv6_bracketed(self):
        ip = parse_address("2001:db8:0:0::1")
        assert to_uri_string(ip) == "[2001:db8::1]"

    def test_whitespace_trimmed(self):
        assert str(parse_address(" 10.0.0.5 ")) == "10.0.0.5"

    @pytest.mark.parametrize("text", ["", "not-an-ip", "10.0.0.256", "search-1.internal"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_address(text)


class TestParsePortRange:
    """parse_port_range 테스트"""

    def test_single_port(self):
        assert parse_port_range("9300") == (9300, 9300)

    def test_range(self):
        assert parse_port_range("9300-9400") == (9300, 9400)

    @pytest.mark.parametrize("text", ["", "abc", "9300-", "70000", "9400-9300"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_port_range(text)


class TestTransportAddress:
    """TransportAddress 문자열 표현"""

    def test_str_v4(self):
        assert str(TransportAddress("10.0.0.1", 9300)) == "10.0.0.1:9300"

    def test_str_v6(self):
        assert str(TransportAddress("2001:db8::1", 9300)) == "[2001:db8::1]:9300"


class TestTransportAddressResolver:
    """TransportAddressResolver 테스트"""

    def test_default_port_limited_to_one(self):
        resolver = TransportAddressResolver("9300-9400")

        assert resolver.addresses_from_string("10.0.0.1", 1) == [TransportAddress("10.0.0.1", 9300)]

    def test_limit_caps_range(self):
        resolver = TransportAddressResolver("9300-9302")

        addresses = resolver.addresses_from_string("10.0.0.1", 5)

        assert [a.port for a in addresses] == [9300, 9301, 9302]

    def test_explicit_port(self):
        resolver = TransportAddressResolver()

        assert resolver.addresses_from_string("10.0.0.1:9500", 1) == [TransportAddress("10.0.0.1", 9500)]

    def test_bracketed_ipv6(self):
        resolver = TransportAddressResolver()

        assert resolver.addresses_from_string("[2001:db8::1]", 1) == [TransportAddress("2001:db8::1", 9300)]
        assert resolver.addresses_from_string("[2001:db8::1]:9301", 1) == [TransportAddress("2001:db8::1", 9301)]

    def test_bare_ipv6_has_no_port(self):
        resolver = TransportAddressResolver("9300")

        assert resolver.addresses_from_string("2001:db8::1", 1) == [TransportAddress("2001:db8::1", 9300)]

    def test_default_ports(self):
        assert TransportAddressResolver("9500-9600").default_ports == (9500, 9600)

    @pytest.mark.parametrize("address", ["", ":9300", "[2001:db8::1", "[]:9300", "[::1]x", "10.0.0.1:abc"])
    def test_malformed(self, address):
        with pytest.raises(ValueError):
            TransportAddressResolver().addresses_from_string(address, 1)

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            TransportAddressResolver().addresses_from_string("10.0.0.1", 0)
