"""
discovery/inventory/base.py - Inventory provider interface
"""

from __future__ import annotations

import abc

from .types import VirtualMachine


class InventoryProvider(abc.ABC):
    """Lists the virtual machines of a cloud account

    Implementations raise InventoryFetchError when the cloud API cannot be
    reached or refuses the call; they never return a partial list.
    """

    @abc.abstractmethod
    def get_virtual_machines(self, group_scope: str | None) -> list[VirtualMachine]:
        """Return the VMs in scope, in the order the cloud API lists them

        Args:
            group_scope: Configured group name (exact or glob), or None for
                every VM the provider can see. Providers may use it to narrow
                the API call; the discovery filters still apply afterwards.
        """
        ...


class StaticInventoryProvider(InventoryProvider):
    """Serves a fixed VM list, for tests and dry runs"""

    def __init__(self, vms: list[VirtualMachine] | None = None):
        self._vms = list(vms or [])
        self.calls: list[str | None] = []

    def set_virtual_machines(self, vms: list[VirtualMachine]) -> None:
        self._vms = list(vms)

    def get_virtual_machines(self, group_scope: str | None) -> list[VirtualMachine]:
        self.calls.append(group_scope)
        return list(self._vms)
