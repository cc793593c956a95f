"""
discovery/filter.py - 인벤토리 필터 파이프라인

클러스터 멤버가 될 수 있는 VM을 골라냅니다. 조건은 아래 순서로 검사하며
처음 실패한 조건이 제외 사유가 됩니다.

    1. 전원 상태 (STARTING 또는 RUNNING)
    2. 리전 (설정된 경우, 정확히 일치)
    3. 그룹 이름 (설정된 경우, 패턴 또는 정확히 일치)
    4. 호스트 이름 (설정된 경우, 패턴 또는 정확히 일치)

값에 ``*`` 또는 ``?``가 있으면 패턴으로, 아니면 문자열 비교로 매칭합니다.
대소문자를 구분하며 ``[`` 같은 다른 문자는 그대로 비교합니다. EC2 태그
필터와 같은 규칙입니다.
"""

from __future__ import annotations

import functools
import logging
import re

from .config import DiscoverySettings
from .inventory.types import VirtualMachine
from .types import OmissionReason

logger = logging.getLogger(__name__)

_WILDCARDS = ("*", "?")


def is_simple_match_pattern(value: str) -> bool:
    return any(wildcard in value for wildcard in _WILDCARDS)


@functools.lru_cache(maxsize=128)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    # *, ? 만 와일드카드로 되돌림
    regex = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(regex, re.DOTALL)


def simple_match(pattern: str, value: str | None) -> bool:
    """``*``(0개 이상 문자), ``?``(문자 1개)만 지원하는 패턴 매칭"""
    if value is None:
        return False
    return _compile_pattern(pattern).fullmatch(value) is not None


def match_name(expected: str, actual: str | None) -> bool:
    """패턴이면 패턴 매칭, 아니면 정확히 일치"""
    if is_simple_match_pattern(expected):
        return simple_match(expected, actual)
    return expected == actual


def check_filters(
    vm: VirtualMachine,
    settings: DiscoverySettings,
    log: logging.Logger = logger,
) -> OmissionReason | None:
    """VM 하나에 필터 파이프라인 적용

    Returns:
        통과하면 None, 아니면 제외 사유
    """
    if not vm.power_state.is_discoverable:
        log.debug("[%s] status is [%s]. skipping...", vm.name, vm.power_state.value)
        return OmissionReason.POWER_STATE

    if settings.region is not None and settings.region != vm.region:
        log.debug("current region [%s] does not match [%s]. skipping...", vm.region, settings.region)
        return OmissionReason.REGION_MISMATCH

    if settings.group_name is not None and not match_name(settings.group_name, vm.group_name):
        log.debug(
            "current group name [%s] does not match [%s]. skipping...",
            vm.group_name,
            settings.group_name,
        )
        return OmissionReason.GROUP_MISMATCH

    if settings.host_name is not None and not match_name(settings.host_name, vm.name):
        log.debug("current name [%s] does not match [%s]. skipping...", vm.name, settings.host_name)
        return OmissionReason.HOST_NAME_MISMATCH

    return None
