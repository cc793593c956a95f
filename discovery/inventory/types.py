"""
discovery/inventory/types.py - Inventory record types

Cloud-agnostic snapshot of a compute instance as seen by discovery.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class PowerState(str, enum.Enum):
    """Lifecycle state of a virtual machine"""

    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    DEALLOCATING = "deallocating"
    DEALLOCATED = "deallocated"
    UNKNOWN = "unknown"

    @property
    def is_discoverable(self) -> bool:
        """True for states whose VM can join (or is joining) the cluster"""
        return self in (PowerState.STARTING, PowerState.RUNNING)


# EC2 instance state name -> PowerState
EC2_STATE_MAP: dict[str, PowerState] = {
    "pending": PowerState.STARTING,
    "running": PowerState.RUNNING,
    "shutting-down": PowerState.STOPPING,
    "stopping": PowerState.STOPPING,
    "stopped": PowerState.STOPPED,
    "terminated": PowerState.DEALLOCATED,
}


@dataclass(frozen=True)
class VirtualMachine:
    """Virtual machine information"""

    name: str
    power_state: PowerState
    region: str = ""
    group_name: str = ""
    private_ip: str | None = None
    public_ip: str | None = None

    # Informational
    instance_id: str = ""
    instance_type: str = ""
    tags: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_running(self) -> bool:
        return self.power_state == PowerState.RUNNING
