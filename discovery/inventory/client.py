"""
discovery/inventory/client.py - 인벤토리 조회용 boto3 클라이언트

디스커버리 주기는 실패해도 스스로 재시도하지 않으므로, 일시적인 API 오류는
여기서 botocore 재시도 설정(adaptive)으로 흡수합니다. 주기가 멈춘 API
호출에 붙잡히지 않도록 연결/읽기 타임아웃도 짧게 둡니다.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

INVENTORY_CLIENT_CONFIG = Config(
    retries={"max_attempts": 5, "mode": "adaptive"},
    connect_timeout=5,
    read_timeout=20,
    max_pool_connections=4,
)


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    config: Config | None = None,
    **kwargs: Any,
) -> Any:
    """인벤토리 설정이 적용된 클라이언트 생성

    Args:
        session: boto3 Session
        service_name: 서비스 이름 (ec2)
        region_name: 리전 (None이면 세션 기본값)
        config: 기본 설정 위에 덮어쓸 botocore Config
        **kwargs: session.client()에 그대로 전달 (endpoint_url 등)
    """
    client_config = INVENTORY_CLIENT_CONFIG if config is None else INVENTORY_CLIENT_CONFIG.merge(config)
    return session.client(service_name, region_name=region_name, config=client_config, **kwargs)  # type: ignore[call-overload]
