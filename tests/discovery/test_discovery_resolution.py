"""
tests/discovery/test_discovery_resolution.py - discovery/resolution.py 테스트
"""

import logging
from unittest.mock import MagicMock

from discovery.config import HostType
from discovery.network import TransportAddress, TransportAddressResolver
from discovery.resolution import PER_ADDRESS_LIMIT, resolve_endpoints, select_address
from discovery.types import OmissionReason


class TestSelectAddress:
    """select_address 테스트"""

    def test_private(self, make_vm):
        assert select_address(make_vm(), HostType.PRIVATE_IP) == "10.0.0.1"

    def test_public(self, make_vm):
        assert select_address(make_vm(), HostType.PUBLIC_IP) == "54.0.0.1"

    def test_no_fallback_to_other_family(self, make_vm):
        assert select_address(make_vm(private_ip=None), HostType.PRIVATE_IP) is None
        assert select_address(make_vm(public_ip=None), HostType.PUBLIC_IP) is None

    def test_empty_string_is_missing(self, make_vm):
        assert select_address(make_vm(private_ip=""), HostType.PRIVATE_IP) is None


class TestResolveEndpoints:
    """resolve_endpoints 테스트"""

    def test_private_ip(self, make_vm):
        result = resolve_endpoints(make_vm(), HostType.PRIVATE_IP, TransportAddressResolver())

        assert result.is_resolved
        assert result.endpoints == (TransportAddress("10.0.0.1", 9300),)

    def test_public_ip(self, make_vm):
        result = resolve_endpoints(make_vm(), HostType.PUBLIC_IP, TransportAddressResolver())

        assert result.endpoints == (TransportAddress("54.0.0.1", 9300),)

    def test_ipv6(self, make_vm):
        result = resolve_endpoints(make_vm(private_ip="2001:db8::5"), HostType.PRIVATE_IP, TransportAddressResolver())

        assert result.endpoints == (TransportAddress("2001:db8::5", 9300),)

    def test_single_endpoint_per_address(self, make_vm):
        result = resolve_endpoints(make_vm(), HostType.PRIVATE_IP, TransportAddressResolver("9300-9400"))

        assert PER_ADDRESS_LIMIT == 1
        assert len(result.endpoints) == 1

    def test_missing_address(self, make_vm, caplog):
        with caplog.at_level(logging.DEBUG, logger="discovery.resolution"):
            result = resolve_endpoints(make_vm(name="vm2", private_ip=None), HostType.PRIVATE_IP, TransportAddressResolver())

        assert result.omitted is OmissionReason.NO_ADDRESS
        assert result.endpoints == ()
        assert "no private ip available. ignoring [vm2]..." in caplog.text

    def test_missing_public_address_no_fallback(self, make_vm):
        result = resolve_endpoints(make_vm(public_ip=None), HostType.PUBLIC_IP, TransportAddressResolver())

        assert result.omitted is OmissionReason.NO_ADDRESS
        assert result.detail == "no public ip"

    def test_invalid_address(self, make_vm, caplog):
        with caplog.at_level(logging.WARNING, logger="discovery.resolution"):
            result = resolve_endpoints(make_vm(private_ip="10.0.0"), HostType.PRIVATE_IP, TransportAddressResolver())

        assert result.omitted is OmissionReason.INVALID_ADDRESS
        assert result.detail
        assert caplog.records[0].levelno == logging.WARNING

    def test_transport_error(self, make_vm, caplog):
        transport = MagicMock()
        transport.addresses_from_string.side_effect = RuntimeError("boom")

        with caplog.at_level(logging.WARNING, logger="discovery.resolution"):
            result = resolve_endpoints(make_vm(), HostType.PRIVATE_IP, transport)

        assert result.omitted is OmissionReason.TRANSPORT_ERROR
        assert result.detail == "boom"
        assert "can not convert [10.0.0.1] to transport address. skipping. [boom]" in caplog.text

    def test_transport_returns_nothing(self, make_vm):
        transport = MagicMock()
        transport.addresses_from_string.return_value = []

        result = resolve_endpoints(make_vm(), HostType.PRIVATE_IP, transport)

        assert result.omitted is OmissionReason.TRANSPORT_ERROR

    def test_uses_injected_logger(self, make_vm):
        log = MagicMock()

        resolve_endpoints(make_vm(private_ip=None), HostType.PRIVATE_IP, TransportAddressResolver(), log)

        log.debug.assert_called_once()
