"""
discovery/inventory/ec2.py - EC2 inventory provider

Lists EC2 instances with ``describe_instances`` and maps them to
VirtualMachine records.

Mapping:
    name        Name tag, or the instance id when untagged
    group_name  value of the configured group tag
    region      region of the client that listed the instance
    power_state EC2 state name through EC2_STATE_MAP
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from ..config import DEFAULT_GROUP_TAG, get_default_region
from ..exceptions import InventoryFetchError
from .base import InventoryProvider
from .client import get_client
from .types import EC2_STATE_MAP, PowerState, VirtualMachine

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)


def parse_instance(data: dict[str, Any], region: str, group_tag: str = DEFAULT_GROUP_TAG) -> VirtualMachine:
    """Convert one describe_instances record into a VirtualMachine"""
    tags = {}
    for tag in data.get("Tags", []):
        key = tag.get("Key", "")
        if key:
            tags[key] = tag.get("Value", "")

    instance_id = data.get("InstanceId", "")
    state_name = data.get("State", {}).get("Name", "")

    return VirtualMachine(
        name=tags.get("Name") or instance_id,
        power_state=EC2_STATE_MAP.get(state_name, PowerState.UNKNOWN),
        region=region,
        group_name=tags.get(group_tag, ""),
        private_ip=data.get("PrivateIpAddress") or None,
        public_ip=data.get("PublicIpAddress") or None,
        instance_id=instance_id,
        instance_type=data.get("InstanceType", ""),
        tags=tags,
    )


def collect_instances(
    session: "Session",
    region: str,
    group_tag: str = DEFAULT_GROUP_TAG,
    group_scope: str | None = None,
) -> list[VirtualMachine]:
    """Collect EC2 instances in one region

    Args:
        session: Boto3 session
        region: AWS region
        group_tag: Tag holding the group name
        group_scope: Group name to narrow the call to; EC2 tag filters
            understand the same ``*`` and ``?`` wildcards and treat
            ``[`` literally

    Raises:
        InventoryFetchError: if the API call fails
    """
    filters = []
    if group_scope is not None:
        filters.append({"Name": f"tag:{group_tag}", "Values": [group_scope]})

    instances = []
    try:
        ec2 = get_client(session, "ec2", region_name=region)
        paginator = ec2.get_paginator("describe_instances")

        pages = paginator.paginate(Filters=filters) if filters else paginator.paginate()
        for page in pages:
            for reservation in page.get("Reservations", []):
                for data in reservation.get("Instances", []):
                    instances.append(parse_instance(data, region, group_tag))

    except ClientError as e:
        raise InventoryFetchError.from_client_error("ec2", "describe_instances", e) from e
    except BotoCoreError as e:
        raise InventoryFetchError("ec2", "describe_instances", error_message=str(e), cause=e) from e

    return instances


class EC2InventoryProvider(InventoryProvider):
    """Inventory provider backed by the EC2 API

    Args:
        session: Boto3 session (credentials come from its provider chain)
        regions: Regions to list, in order (session or default region if empty)
        group_tag: Tag holding the group name
    """

    def __init__(
        self,
        session: "Session",
        regions: list[str] | tuple[str, ...] | None = None,
        group_tag: str = DEFAULT_GROUP_TAG,
    ):
        self._session = session
        self._regions = list(regions or []) or [session.region_name or get_default_region()]
        self._group_tag = group_tag

    @property
    def regions(self) -> list[str]:
        return list(self._regions)

    def get_virtual_machines(self, group_scope: str | None) -> list[VirtualMachine]:
        vms: list[VirtualMachine] = []
        for region in self._regions:
            found = collect_instances(self._session, region, self._group_tag, group_scope)
            logger.debug("listed %d instance(s) in %s", len(found), region)
            vms.extend(found)
        return vms
