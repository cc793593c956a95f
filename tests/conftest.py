"""
tests/conftest.py - pytest 공통 픽스처

Usage:
    def test_something(make_vm, fake_clock):
        # make_vm: 기본값이 채워진 VirtualMachine 팩토리
        # fake_clock: 직접 진행시키는 시계
        pass
"""

import os
import sys
from pathlib import Path
from typing import Any, Optional
from unittest.mock import MagicMock, patch

import pytest

# 프로젝트 루트를 path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from discovery.inventory.types import PowerState, VirtualMachine  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 - 호출자의 AWS/디스커버리 환경 변수 격리"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    for name in list(os.environ):
        if name.startswith("DISCOVERY_CLOUD_"):
            monkeypatch.delenv(name)
    yield


# =============================================================================
# 디스커버리 픽스처
# =============================================================================


class FakeClock:
    """직접 설정하는 시계 (epoch 초)"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_vm():
    """디스커버리 대상이 되는 기본값의 VirtualMachine 팩토리"""

    def _make_vm(
        name: str = "vm1",
        power_state: PowerState = PowerState.RUNNING,
        region: str = "us-east-1",
        group_name: str = "prod-east",
        private_ip: Optional[str] = "10.0.0.1",
        public_ip: Optional[str] = "54.0.0.1",
        **kwargs: Any,
    ) -> VirtualMachine:
        return VirtualMachine(
            name=name,
            power_state=power_state,
            region=region,
            group_name=group_name,
            private_ip=private_ip,
            public_ip=public_ip,
            **kwargs,
        )

    return _make_vm


# =============================================================================
# AWS 모킹
# =============================================================================


@pytest.fixture
def mock_boto3_session():
    """boto3.Session 모킹"""
    with patch("boto3.Session") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_session.client.return_value = MagicMock()
        mock_session.region_name = "us-east-1"

        yield mock_session


@pytest.fixture
def mock_ec2_client():
    """실행 중인 인스턴스 1개를 돌려주는 EC2 클라이언트 모킹"""
    mock_client = MagicMock()

    mock_client.describe_instances.return_value = {
        "Reservations": [
            {
                "Instances": [
                    {
                        "InstanceId": "i-1234567890abcdef0",
                        "InstanceType": "t3.micro",
                        "State": {"Name": "running"},
                        "Tags": [
                            {"Key": "Name", "Value": "search-1"},
                            {"Key": "aws:autoscaling:groupName", "Value": "search-prod"},
                        ],
                        "PrivateIpAddress": "10.0.0.1",
                        "PublicIpAddress": "54.123.45.67",
                    }
                ]
            }
        ]
    }

    # Paginator 모킹
    mock_paginator = MagicMock()
    mock_paginator.paginate.return_value = [mock_client.describe_instances.return_value]
    mock_client.get_paginator.return_value = mock_paginator

    yield mock_client


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto용 AWS 자격 증명"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def moto_ec2(aws_credentials):
    """VPC와 서브넷이 있는 moto EC2, (client, subnet_id) 반환"""
    moto = pytest.importorskip("moto")

    with moto.mock_aws():
        import boto3

        ec2 = boto3.client("ec2", region_name="us-east-1")

        vpc = ec2.create_vpc(CidrBlock="10.0.0.0/16")
        vpc_id = vpc["Vpc"]["VpcId"]

        subnet = ec2.create_subnet(VpcId=vpc_id, CidrBlock="10.0.1.0/24")
        subnet_id = subnet["Subnet"]["SubnetId"]

        yield ec2, subnet_id
