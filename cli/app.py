"""
cli/app.py - cloud-discovery CLI

실제 클라우드 계정을 대상으로 디스커버리를 실행하고 클러스터에 전달될
노드 목록을 출력합니다.

Usage:
    # DISCOVERY_CLOUD_* 환경 변수로 설정
    cloud-discovery resolve -r us-east-1

    # 설정 파일 + 옵션으로 덮어쓰기
    cloud-discovery resolve --config discovery.yaml --host-type public_ip --group-name "search-*"

    # 여러 사이클 실행 (갱신 주기 동작 확인)
    cloud-discovery resolve --refresh-interval 30s --cycles 3 --interval 10 -v
"""

import json
import logging
import time
from typing import Any

import click
from click import Context

from discovery.config import (
    DiscoverySettings,
    EnvSettingsSource,
    HostType,
    StaticSettingsSource,
    YamlSettingsSource,
    get_default_profile,
    get_version,
)
from discovery.exceptions import DiscoveryError, is_access_denied
from discovery.provider import CloudHostsProvider

from .console import console, nodes_table, omitted_table, print_error, print_success, print_warning, setup_logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

VERSION = get_version()


def load_settings(config_path: str | None, overrides: dict[str, Any]) -> DiscoverySettings:
    """파일(또는 환경 변수) 설정 위에 CLI 옵션 적용"""
    source = YamlSettingsSource(config_path) if config_path else EnvSettingsSource()
    settings = source.get()

    changes = {key: value for key, value in overrides.items() if value not in (None, ())}
    if changes:
        settings = settings.replace(**changes)
    return settings


def create_inventory(settings: DiscoverySettings, profile: str | None):
    import boto3

    from discovery.inventory import EC2InventoryProvider

    session = boto3.Session(profile_name=profile or get_default_profile())
    return EC2InventoryProvider(session, regions=settings.endpoint_regions, group_tag=settings.group_tag)


@click.group()
@click.version_option(VERSION, prog_name="cloud-discovery")
def cli() -> None:
    """Cloud-based cluster member discovery"""


@cli.command("resolve")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML 설정 파일")
@click.option("-p", "--profile", help="AWS 프로파일")
@click.option("-r", "--endpoint-region", "endpoint_regions", multiple=True, help="조회할 EC2 리전 (다중 가능)")
@click.option("--region", help="이 리전의 인스턴스만 포함")
@click.option("--group-name", help="그룹 이름 필터 (정확히 일치 또는 * ? 패턴)")
@click.option("--host-name", help="호스트 이름 필터 (정확히 일치 또는 * ? 패턴)")
@click.option("--host-type", type=click.Choice([h.value for h in HostType]), help="클러스터에 알릴 주소 종류")
@click.option("--refresh-interval", help="-1, 0 또는 30s / 5m 같은 시간 값")
@click.option("--cycles", default=1, show_default=True, type=click.IntRange(min=1), help="디스커버리 실행 횟수")
@click.option("--interval", default=0.0, show_default=True, type=click.FloatRange(min=0), help="사이클 간 대기 (초)")
@click.option("--show-omitted", is_flag=True, help="제외된 인스턴스와 사유도 출력")
@click.option("-f", "--format", "output_format", type=click.Choice(["table", "json"]), default="table", show_default=True)
@click.option("-v", "--verbose", is_flag=True, help="디버그 로그")
@click.pass_context
def resolve_command(
    ctx: Context,
    config_path: str | None,
    profile: str | None,
    endpoint_regions: tuple[str, ...],
    region: str | None,
    group_name: str | None,
    host_name: str | None,
    host_type: str | None,
    refresh_interval: str | None,
    cycles: int,
    interval: float,
    show_omitted: bool,
    output_format: str,
    verbose: bool,
) -> None:
    """클라우드 인벤토리에서 디스커버리 노드 조회"""
    logger = setup_logging(verbose)

    try:
        settings = load_settings(
            config_path,
            {
                "endpoint_regions": endpoint_regions,
                "region": region,
                "group_name": group_name,
                "host_name": host_name,
                "host_type": host_type,
                "refresh_interval": refresh_interval,
            },
        )
        inventory = ctx.obj.get("inventory") if ctx.obj else None
        provider = CloudHostsProvider(
            StaticSettingsSource(settings),
            inventory or create_inventory(settings, profile),
            logger=logger,
        )

        nodes = []
        for cycle in range(cycles):
            if cycle and interval:
                time.sleep(interval)
            nodes = provider.build_dynamic_nodes()
    except DiscoveryError as e:
        print_error(str(e))
        if is_access_denied(e):
            print_warning("check that the credentials allow ec2:DescribeInstances")
        ctx.exit(1)

    report = provider.last_report
    if output_format == "json":
        payload = {
            "nodes": [
                {"node_id": n.node_id, "address": str(n.address), "version": n.version}
                for n in nodes
            ],
            "omitted": [
                {"name": r.vm.name, "reason": r.omitted.value, "detail": r.detail}
                for r in (report.omitted() if report else [])
                if r.omitted is not None
            ],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console.print(nodes_table(nodes))
    if show_omitted and report is not None:
        console.print(omitted_table(report))
    print_success(f"{len(nodes)} node(s) resolved")
