"""
discovery - 클라우드 기반 클러스터 멤버 디스커버리

클라우드 계정의 인스턴스를 클러스터가 디스커버리 단계에서 접속을
시도할 노드 목록으로 변환합니다.

Architecture:
    discovery/
    ├── inventory/      # 클라우드 인벤토리 제공자 (EC2)
    ├── config.py       # 타입 설정과 설정 소스
    ├── filter.py       # 전원 상태 / 리전 / 그룹 / 호스트 이름 필터
    ├── network.py      # 주소 파싱과 전송 엔드포인트 확장
    ├── resolution.py   # VM 단위 주소 해석
    ├── cache.py        # 갱신 주기 캐시
    ├── provider.py     # CloudHostsProvider (진입점)
    ├── types.py        # DiscoveryNode, ResolutionResult, DiscoveryReport
    └── exceptions.py   # 예외 계층

Usage:
    import boto3
    from discovery import CloudHostsProvider, DiscoverySettings, StaticSettingsSource
    from discovery.inventory import EC2InventoryProvider

    settings = DiscoverySettings(refresh_interval="30s", group_name="search-*")
    provider = CloudHostsProvider(
        StaticSettingsSource(settings),
        EC2InventoryProvider(boto3.Session(), regions=["us-east-1"]),
    )
    nodes = provider.build_dynamic_nodes()
"""

from .cache import DiscoveryCache
from .config import (
    DiscoverySettings,
    EnvSettingsSource,
    HostType,
    SettingsSource,
    StaticSettingsSource,
    YamlSettingsSource,
    get_version,
)
from .exceptions import ConfigError, DiscoveryError, InventoryFetchError
from .inventory import EC2InventoryProvider, InventoryProvider, PowerState, VirtualMachine
from .network import TransportAddress, TransportAddressResolver
from .provider import CloudHostsProvider
from .types import DiscoveryNode, DiscoveryReport, OmissionReason, ResolutionResult

__version__ = get_version()

__all__: list[str] = [
    # 진입점
    "CloudHostsProvider",
    "DiscoveryCache",
    # 설정
    "DiscoverySettings",
    "HostType",
    "SettingsSource",
    "StaticSettingsSource",
    "EnvSettingsSource",
    "YamlSettingsSource",
    # 인벤토리
    "InventoryProvider",
    "EC2InventoryProvider",
    "PowerState",
    "VirtualMachine",
    # 네트워크
    "TransportAddress",
    "TransportAddressResolver",
    # 결과
    "DiscoveryNode",
    "DiscoveryReport",
    "OmissionReason",
    "ResolutionResult",
    # 예외
    "DiscoveryError",
    "ConfigError",
    "InventoryFetchError",
]
