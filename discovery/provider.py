"""
discovery/provider.py - Cloud hosts provider

Builds the list of cluster member candidates from the cloud inventory.
A discovery loop calls build_dynamic_nodes() on every cycle; the provider
answers from its cache or lists the inventory again, depending on the
refresh interval in force for that cycle.

Example:
    import boto3
    from discovery import CloudHostsProvider, EC2InventoryProvider, EnvSettingsSource

    provider = CloudHostsProvider(
        EnvSettingsSource(),
        EC2InventoryProvider(boto3.Session(), regions=["us-east-1"]),
    )
    for node in provider.build_dynamic_nodes():
        print(node.node_id, node.address)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .cache import DiscoveryCache
from .config import DiscoverySettings, SettingsSource, minimum_compatibility_version
from .filter import check_filters
from .inventory.base import InventoryProvider
from .inventory.types import VirtualMachine
from .network import TransportAddressResolver
from .resolution import resolve_endpoints
from .types import DiscoveryNode, DiscoveryReport, ResolutionResult


class CloudHostsProvider:
    """Resolves cloud VMs into discovery nodes, with TTL caching

    Args:
        settings_source: Read on every cycle, so setting changes apply live
        inventory: Lists the cloud VMs
        transport_resolver: Expands addresses into transport endpoints
            (built from the settings' port range when None)
        logger: Diagnostics sink; defaults to this module's logger
        clock: Wall clock in epoch seconds
        version: Minimum compatibility version stamped on every node
    """

    def __init__(
        self,
        settings_source: SettingsSource,
        inventory: InventoryProvider,
        transport_resolver: TransportAddressResolver | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], float] = time.time,
        version: str | None = None,
    ):
        self._settings_source = settings_source
        self._inventory = inventory
        self._transport_resolver = transport_resolver
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._version = version or minimum_compatibility_version()
        self._cache = DiscoveryCache()

        if settings_source.get().region is None:
            self._logger.debug(
                "starting discovery without region set. "
                "This should be avoided if some nodes can be started in multiple regions."
            )

    @property
    def cache(self) -> DiscoveryCache:
        return self._cache

    @property
    def last_report(self) -> DiscoveryReport | None:
        """Report of the most recent successful refresh"""
        return self._cache.report

    def build_dynamic_nodes(self) -> list[DiscoveryNode]:
        """Return the current discovery nodes

        Raises:
            InventoryFetchError: if the inventory cannot be listed; the
                previously cached list is left in place
        """
        # settings are read per cycle so refresh_interval updates apply live
        settings = self._settings_source.get()

        with self._cache.lock:
            if self._cache.should_use_cache(settings.refresh_interval, self._clock()):
                self._logger.debug("using cache to retrieve node list")
                return self._cache.nodes or []

            self._logger.debug("start building nodes list using cloud API")
            report = self._refresh(settings)
            return self._cache.store(report)

    def _refresh(self, settings: DiscoverySettings) -> DiscoveryReport:
        started = self._clock()
        vms = self._inventory.get_virtual_machines(settings.group_name)
        transport = self._transport_resolver or TransportAddressResolver(settings.port_range)

        results: list[ResolutionResult] = []
        nodes: list[DiscoveryNode] = []
        for vm in vms:
            result = self.resolve_vm(vm, settings, transport)
            results.append(result)
            for address in result.endpoints:
                self._logger.debug("adding %s, transport_address %s", vm.name, address)
                nodes.append(DiscoveryNode.for_vm(vm, address, self._version))

        self._logger.debug("%d node(s) added", len(nodes))
        return DiscoveryReport(results=tuple(results), nodes=tuple(nodes), fetched_at=started)

    def resolve_vm(
        self,
        vm: VirtualMachine,
        settings: DiscoverySettings,
        transport: TransportAddressResolver,
    ) -> ResolutionResult:
        """Run the filter pipeline, then address resolution, on one VM"""
        reason = check_filters(vm, settings, self._logger)
        if reason is not None:
            return ResolutionResult.omit(vm, reason)
        return resolve_endpoints(vm, settings.host_type, transport, self._logger)
