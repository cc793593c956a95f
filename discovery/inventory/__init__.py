"""
discovery/inventory - Cloud inventory providers

Classes:
    - InventoryProvider: interface the discovery core lists VMs through
    - EC2InventoryProvider: EC2 implementation (boto3)
    - StaticInventoryProvider: fixed list, for tests and dry runs

Usage:
    import boto3
    from discovery.inventory import EC2InventoryProvider

    provider = EC2InventoryProvider(boto3.Session(), regions=["us-east-1"])
    vms = provider.get_virtual_machines("search-*")
"""

from .base import InventoryProvider, StaticInventoryProvider
from .ec2 import EC2InventoryProvider, collect_instances, parse_instance
from .types import EC2_STATE_MAP, PowerState, VirtualMachine

__all__ = [
    # Providers
    "InventoryProvider",
    "EC2InventoryProvider",
    "StaticInventoryProvider",
    # EC2 helpers
    "collect_instances",
    "parse_instance",
    # Types
    "EC2_STATE_MAP",
    "PowerState",
    "VirtualMachine",
]
