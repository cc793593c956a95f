"""
discovery/resolution.py - VM 단위 주소 해석

VM에서 설정된 종류의 주소를 골라 파싱하고, 전송 엔드포인트 하나로
확장합니다. 모든 실패는 반환되는 ResolutionResult의 제외 사유가 되며
여기서 예외를 올리지 않습니다.
"""

from __future__ import annotations

import logging

from .config import HostType
from .inventory.types import VirtualMachine
from .network import TransportAddressResolver, parse_address, to_uri_string
from .types import OmissionReason, ResolutionResult

logger = logging.getLogger(__name__)

# 주소당 포트 1개
PER_ADDRESS_LIMIT = 1


def select_address(vm: VirtualMachine, host_type: HostType) -> str | None:
    """host_type에 해당하는 VM 주소, 없으면 None (다른 종류로 대체하지 않음)"""
    if host_type == HostType.PRIVATE_IP:
        address = vm.private_ip
    else:
        address = vm.public_ip
    return address or None


def resolve_endpoints(
    vm: VirtualMachine,
    host_type: HostType,
    transport: TransportAddressResolver,
    log: logging.Logger = logger,
) -> ResolutionResult:
    raw = select_address(vm, host_type)
    if raw is None:
        kind = "private" if host_type == HostType.PRIVATE_IP else "public"
        log.debug("no %s ip available. ignoring [%s]...", kind, vm.name)
        return ResolutionResult.omit(vm, OmissionReason.NO_ADDRESS, f"no {kind} ip")

    try:
        ip = parse_address(raw)
    except ValueError as e:
        log.warning("no network address found. ignoring [%s]... [%s]", vm.name, e)
        return ResolutionResult.omit(vm, OmissionReason.INVALID_ADDRESS, str(e))

    network_address = to_uri_string(ip)
    log.debug("found networkAddress for [%s]: [%s]", vm.name, network_address)

    try:
        endpoints = transport.addresses_from_string(network_address, PER_ADDRESS_LIMIT)
    except Exception as e:
        log.warning("can not convert [%s] to transport address. skipping. [%s]", network_address, e)
        return ResolutionResult.omit(vm, OmissionReason.TRANSPORT_ERROR, str(e))

    if not endpoints:
        log.warning("no transport address for [%s]. skipping.", network_address)
        return ResolutionResult.omit(vm, OmissionReason.TRANSPORT_ERROR, "no endpoints")

    return ResolutionResult.resolved(vm, endpoints)
