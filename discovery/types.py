"""
discovery/types.py - Discovery result types

- DiscoveryNode: one cluster member candidate
- ResolutionResult: what happened to one inventory record
- DiscoveryReport: every ResolutionResult of a refresh, in inventory order
"""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .inventory.types import VirtualMachine
from .network import TransportAddress

NODE_ID_PREFIX = "#cloud-"


class OmissionReason(str, enum.Enum):
    """Why an inventory record produced no discovery node"""

    POWER_STATE = "power_state"
    REGION_MISMATCH = "region_mismatch"
    GROUP_MISMATCH = "group_mismatch"
    HOST_NAME_MISMATCH = "host_name_mismatch"
    NO_ADDRESS = "no_address"
    INVALID_ADDRESS = "invalid_address"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class DiscoveryNode:
    """A cluster membership candidate"""

    node_id: str
    address: TransportAddress
    version: str
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    roles: frozenset[str] = frozenset()

    @classmethod
    def for_vm(cls, vm: VirtualMachine, address: TransportAddress, version: str) -> "DiscoveryNode":
        return cls(node_id=NODE_ID_PREFIX + vm.name, address=address, version=version)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving a single VM

    Exactly one of ``endpoints`` (non-empty) or ``omitted`` is set.
    """

    vm: VirtualMachine
    endpoints: tuple[TransportAddress, ...] = ()
    omitted: OmissionReason | None = None
    detail: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.omitted is None

    @classmethod
    def resolved(cls, vm: VirtualMachine, endpoints: list[TransportAddress]) -> "ResolutionResult":
        return cls(vm=vm, endpoints=tuple(endpoints))

    @classmethod
    def omit(cls, vm: VirtualMachine, reason: OmissionReason, detail: str = "") -> "ResolutionResult":
        return cls(vm=vm, omitted=reason, detail=detail)


@dataclass(frozen=True)
class DiscoveryReport:
    """Everything one refresh produced"""

    results: tuple[ResolutionResult, ...]
    nodes: tuple[DiscoveryNode, ...]
    fetched_at: float

    def omitted(self, reason: OmissionReason | None = None) -> list[ResolutionResult]:
        return [
            r
            for r in self.results
            if r.omitted is not None and (reason is None or r.omitted == reason)
        ]

    def count_by_reason(self) -> dict[OmissionReason, int]:
        return dict(Counter(r.omitted for r in self.results if r.omitted is not None))
