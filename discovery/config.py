"""
discovery/config.py - 디스커버리 설정

클라우드 호스트 프로바이더가 사용하는 타입이 지정된 불변 설정과, 매 디스커버리
주기마다 설정을 읽어오는 소스들을 정의합니다.

설정 키 (``discovery.cloud`` 섹션 기준):

    refresh_interval   -1 (영구 캐시), 0 (캐시 안 함), 또는 "30s", "5m", ...
    host.type          private_ip | public_ip
    host.name          호스트 이름 필터, 정확히 일치 또는 패턴 (*, ?)
    host.group_name    그룹 이름 필터, 정확히 일치 또는 패턴 (*, ?)
    region             리전 필터, 정확히 일치
    group_tag          그룹 이름이 담긴 EC2 태그
    port_range         발견된 주소마다 시도할 전송 포트
    endpoint_regions   인스턴스를 조회할 EC2 리전 목록

Usage:
    from discovery.config import DiscoverySettings, StaticSettingsSource

    settings = DiscoverySettings.from_mapping(
        {"discovery": {"cloud": {"refresh_interval": "30s", "region": "us-east-1"}}}
    )
    source = StaticSettingsSource(settings)
    source.update(refresh_interval=timedelta(minutes=5))  # 다음 주기부터 적용
"""

from __future__ import annotations

import abc
import dataclasses
import enum
import os
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError
from .network import DEFAULT_PORT_RANGE, parse_port_range

VERSION = "1.0.0"

SETTINGS_SECTION = "discovery.cloud"
ENV_PREFIX = "DISCOVERY_CLOUD_"

DEFAULT_REGION = "us-east-1"
DEFAULT_GROUP_TAG = "aws:autoscaling:groupName"

_TIME_UNITS_SECONDS: dict[str, float] = {
    "nanos": 1e-9,
    "micros": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
}

_TIME_VALUE_RE = re.compile(r"^(-?\d+(?:\.\d+)?)\s*(nanos|micros|ms|s|m|h|d)?$")

_SMALLEST_INTERVAL = timedelta(microseconds=1)


def get_version() -> str:
    return VERSION


def minimum_compatibility_version(version: str = VERSION) -> str:
    """``version`` 노드와 클러스터를 구성할 수 있는 가장 오래된 버전

    메이저 버전이 같으면 통신 호환됩니다.
    """
    major = version.split(".", 1)[0]
    return f"{major}.0.0"


# =============================================================================
# 환경 변수 헬퍼
# =============================================================================


def get_default_region() -> str:
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION


def get_default_profile() -> str | None:
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE")


@dataclass
class LogConfig:
    """CLI 로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> "LogConfig":
        return cls(
            level=os.environ.get("LOG_LEVEL", cls.level),
            format=os.environ.get("LOG_FORMAT", cls.format),
            date_format=os.environ.get("LOG_DATE_FORMAT", cls.date_format),
        )


# =============================================================================
# 값 파싱
# =============================================================================


class HostType(str, enum.Enum):
    """클러스터에 알릴 인스턴스 주소 종류"""

    PRIVATE_IP = "private_ip"
    PUBLIC_IP = "public_ip"

    @classmethod
    def parse(cls, value: "str | HostType") -> "HostType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ConfigError("host.type", f"[{value}] is not one of {allowed}") from None


def _seconds_to_timedelta(seconds: float) -> timedelta:
    # 1µs 미만 값이 0으로 반올림되면 캐시 정책(0=캐시 안 함)이 바뀌므로 부호 유지
    value = timedelta(seconds=seconds)
    if value == timedelta(0) and seconds != 0:
        return _SMALLEST_INTERVAL if seconds > 0 else -_SMALLEST_INTERVAL
    return value


def parse_time_value(value: Any, key: str = "refresh_interval") -> timedelta:
    """시간 값 설정을 timedelta로 변환

    timedelta, 초 단위 숫자, "-1" (무한), 또는 숫자 뒤에 nanos, micros, ms,
    s, m, h, d 단위를 붙인 문자열을 받습니다. 0이 아닌 값은 최소 1µs로
    표현되어 부호가 유지됩니다.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ConfigError(key, f"[{value}] is not a time value")
    if isinstance(value, (int, float)):
        return _seconds_to_timedelta(value)

    text = str(value).strip().lower()
    match = _TIME_VALUE_RE.match(text)
    if match is None:
        raise ConfigError(key, f"failed to parse time value [{value}]")

    amount, unit = match.groups()
    factor = _TIME_UNITS_SECONDS[unit] if unit is not None else 1.0
    return _seconds_to_timedelta(float(amount) * factor)


def _optional_pattern(value: Any, key: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(key, f"expected a string, got {type(value).__name__}")
    if not value.strip():
        raise ConfigError(key, "must not be empty")
    return value


def _flatten(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in mapping.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = value
    return flat


def _regions(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(str(part) for part in value)


# =============================================================================
# 설정
# =============================================================================


@dataclass(frozen=True)
class DiscoverySettings:
    """디스커버리 설정 스냅샷

    선택 필터는 설정되지 않으면 None입니다.
    """

    refresh_interval: timedelta = timedelta(0)
    host_type: HostType = HostType.PRIVATE_IP
    host_name: str | None = None
    group_name: str | None = None
    region: str | None = None
    group_tag: str = DEFAULT_GROUP_TAG
    port_range: str = DEFAULT_PORT_RANGE
    endpoint_regions: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # 느슨한 입력값을 정규화
        object.__setattr__(self, "refresh_interval", parse_time_value(self.refresh_interval))
        object.__setattr__(self, "host_type", HostType.parse(self.host_type))
        object.__setattr__(self, "host_name", _optional_pattern(self.host_name, "host.name"))
        object.__setattr__(self, "group_name", _optional_pattern(self.group_name, "host.group_name"))
        object.__setattr__(self, "region", _optional_pattern(self.region, "region"))
        object.__setattr__(self, "endpoint_regions", _regions(self.endpoint_regions))

        if not self.group_tag:
            raise ConfigError("group_tag", "must not be empty")
        try:
            parse_port_range(self.port_range)
        except ValueError as e:
            raise ConfigError("port_range", str(e), cause=e) from e

    @property
    def caching_enabled(self) -> bool:
        return self.refresh_interval != timedelta(0)

    def replace(self, **changes: Any) -> "DiscoverySettings":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DiscoverySettings":
        """중첩 또는 점(.) 구분 매핑에서 생성

        ``{"discovery": {"cloud": {"host": {"type": "public_ip"}}}}``와
        ``{"discovery.cloud.host.type": "public_ip"}`` 모두 허용합니다.
        ``discovery.cloud`` 섹션 밖의 키는 무시합니다.
        """
        flat = _flatten(mapping)
        prefix = SETTINGS_SECTION + "."
        values = {key[len(prefix) :]: value for key, value in flat.items() if key.startswith(prefix)}

        kwargs: dict[str, Any] = {}
        for key, attr in _SETTING_KEYS.items():
            if key in values:
                kwargs[attr] = values.pop(key)

        if values:
            unknown = ", ".join(sorted(prefix + key for key in values))
            raise ConfigError(unknown, "unknown setting")
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DiscoverySettings":
        """DISCOVERY_CLOUD_* 환경 변수에서 생성

        ``host.group_name`` → ``DISCOVERY_CLOUD_HOST_GROUP_NAME`` 형식입니다.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        for key, attr in _SETTING_KEYS.items():
            env_name = ENV_PREFIX + key.replace(".", "_").upper()
            if env_name in env:
                kwargs[attr] = env[env_name]
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DiscoverySettings":
        """YAML 설정 파일에서 생성

        Raises:
            ConfigError: 파일을 읽을 수 없거나 YAML 문법 오류, 매핑이 아닌 경우
        """
        try:
            with Path(path).open(encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(str(path), "invalid YAML", cause=e) from e
        except OSError as e:
            raise ConfigError(str(path), "cannot read settings file", cause=e) from e

        if not isinstance(raw, Mapping):
            raise ConfigError(str(path), "settings file must contain a mapping")
        return cls.from_mapping(raw)


_SETTING_KEYS: dict[str, str] = {
    "refresh_interval": "refresh_interval",
    "host.type": "host_type",
    "host.name": "host_name",
    "host.group_name": "group_name",
    "region": "region",
    "group_tag": "group_tag",
    "port_range": "port_range",
    "endpoint_regions": "endpoint_regions",
}


# =============================================================================
# 설정 소스
# =============================================================================


class SettingsSource(abc.ABC):
    """현재 디스커버리 주기에 적용할 설정 제공자

    프로바이더가 주기마다 get()을 호출하므로 호출마다 다른 스냅샷을 반환할
    수 있습니다.
    """

    @abc.abstractmethod
    def get(self) -> DiscoverySettings: ...


class StaticSettingsSource(SettingsSource):
    """런타임에 교체 가능한 스냅샷 하나를 보관"""

    def __init__(self, settings: DiscoverySettings | None = None):
        self._settings = settings or DiscoverySettings()
        self._lock = threading.Lock()

    def get(self) -> DiscoverySettings:
        with self._lock:
            return self._settings

    def set(self, settings: DiscoverySettings) -> None:
        with self._lock:
            self._settings = settings

    def update(self, **changes: Any) -> DiscoverySettings:
        """필드 변경을 적용하고 새 스냅샷 반환"""
        with self._lock:
            self._settings = self._settings.replace(**changes)
            return self._settings


class EnvSettingsSource(SettingsSource):
    """주기마다 DISCOVERY_CLOUD_* 변수를 다시 읽음"""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = environ

    def get(self) -> DiscoverySettings:
        return DiscoverySettings.from_env(self._environ)


class YamlSettingsSource(SettingsSource):
    """주기마다 YAML 설정 파일을 다시 읽음"""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> DiscoverySettings:
        return DiscoverySettings.from_yaml(self._path)
