"""
cli/console.py - Rich 콘솔 유틸리티

CLI 명령이 공유하는 콘솔 출력과 로깅 설정
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from discovery.config import LogConfig
from discovery.types import DiscoveryNode, DiscoveryReport

# botocore 로그 노이즈 억제
logging.getLogger("botocore.httpchecksum").setLevel(logging.WARNING)
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)
logging.getLogger("botocore.session").setLevel(logging.WARNING)


def get_console() -> Console:
    """CLI 출력용 rich Console 생성"""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


console = get_console()

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"


def setup_logging(verbose: bool = False, config: LogConfig | None = None) -> logging.Logger:
    """discovery 로그를 공유 콘솔의 RichHandler로 출력

    Args:
        verbose: DEBUG 레벨 강제 (필터 제외, 캐시 판단 로그)
        config: 로그 설정 (None이면 환경 변수 LOG_LEVEL 등 사용)

    Returns:
        ``discovery`` 패키지 로거
    """
    config = config or LogConfig.from_env()
    logger = logging.getLogger("discovery")
    logger.setLevel(logging.DEBUG if verbose else config.level.upper())

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt=config.date_format))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def print_success(message: str) -> None:
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def nodes_table(nodes: list[DiscoveryNode], title: str = "Discovery nodes") -> Table:
    table = Table(title=title)
    table.add_column("Node ID", style="cyan")
    table.add_column("Address")
    table.add_column("Version", style="dim")
    for node in nodes:
        table.add_row(node.node_id, str(node.address), node.version)
    return table


def omitted_table(report: DiscoveryReport) -> Table:
    table = Table(title="Skipped instances")
    table.add_column("Name", style="cyan")
    table.add_column("Instance ID")
    table.add_column("State")
    table.add_column("Reason", style="yellow")
    table.add_column("Detail", style="dim")
    for result in report.omitted():
        vm = result.vm
        reason = result.omitted.value if result.omitted else ""
        table.add_row(vm.name, vm.instance_id, vm.power_state.value, reason, escape(result.detail))
    return table
