"""
discovery/network.py - 주소 파싱과 전송 엔드포인트 확장

클라우드 API가 보고한 IP 문자열을 클러스터가 접속할 수 있는 전송
엔드포인트로 변환합니다.

- parse_address: text -> ipaddress.IPv4Address / IPv6Address
- to_uri_string: IP -> "10.0.0.1" or "[2001:db8::1]"
- TransportAddressResolver: "host[:port[-port]]" -> list[TransportAddress]

Example:
    resolver = TransportAddressResolver(port_range="9300-9400")
    ip = parse_address("10.0.0.5")
    resolver.addresses_from_string(to_uri_string(ip), per_address_limit=1)
    # [TransportAddress(host="10.0.0.5", port=9300)]
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

DEFAULT_PORT_RANGE = "9300-9400"

_MIN_PORT = 0
_MAX_PORT = 65535


@dataclass(frozen=True)
class TransportAddress:
    """접속 가능한 호스트/포트 쌍"""

    host: str
    port: int

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def parse_address(text: str) -> IPAddress:
    """IPv4/IPv6 리터럴 주소 파싱

    호스트 이름은 거부합니다. 클라우드 API는 항상 IP 리터럴을 보고합니다.

    Raises:
        ValueError: IP 리터럴이 아닌 경우
    """
    return ipaddress.ip_address(text.strip())


def to_uri_string(ip: IPAddress) -> str:
    """host:port 문자열용 IP 표현 (IPv6는 대괄호로 감쌈)"""
    if ip.version == 6:
        return f"[{ip.compressed}]"
    return str(ip)


def parse_port_range(port_range: str) -> tuple[int, int]:
    """'9300' 또는 '9300-9400'을 (start, end) 튜플로 변환 (양 끝 포함)

    Raises:
        ValueError: 숫자가 아니거나 범위를 벗어나거나 start > end인 경우
    """
    text = port_range.strip()
    if not text:
        raise ValueError("empty port range")

    if "-" in text:
        start_text, end_text = text.split("-", 1)
    else:
        start_text = end_text = text

    try:
        start = int(start_text)
        end = int(end_text)
    except ValueError:
        raise ValueError(f"invalid port range [{port_range}]") from None

    if not (_MIN_PORT <= start <= _MAX_PORT and _MIN_PORT <= end <= _MAX_PORT):
        raise ValueError(f"port out of range in [{port_range}]")
    if start > end:
        raise ValueError(f"port range [{port_range}] starts after it ends")
    return start, end


class TransportAddressResolver:
    """호스트 문자열을 전송 주소 목록으로 확장

    Args:
        port_range: 주소에 포트가 없을 때 사용할 포트 범위
    """

    def __init__(self, port_range: str = DEFAULT_PORT_RANGE):
        self._default_ports = parse_port_range(port_range)

    @property
    def default_ports(self) -> tuple[int, int]:
        return self._default_ports

    def addresses_from_string(self, address: str, per_address_limit: int) -> list[TransportAddress]:
        """주소 하나를 최대 per_address_limit개의 엔드포인트로 확장

        허용 형식: host, host:port, host:start-end, [v6], [v6]:port,
        [v6]:start-end

        Raises:
            ValueError: 주소 또는 포트 부분이 잘못된 경우
        """
        if per_address_limit < 1:
            raise ValueError(f"per_address_limit must be positive, got {per_address_limit}")

        host, ports = self._split(address)
        start, end = parse_port_range(ports) if ports is not None else self._default_ports

        last = min(end, start + per_address_limit - 1)
        return [TransportAddress(host=host, port=port) for port in range(start, last + 1)]

    def _split(self, address: str) -> tuple[str, str | None]:
        text = address.strip()
        if not text:
            raise ValueError("empty address")

        if text.startswith("["):
            close = text.find("]")
            if close == -1:
                raise ValueError(f"unclosed bracket in [{address}]")
            host = text[1:close]
            rest = text[close + 1 :]
            if not host:
                raise ValueError(f"empty host in [{address}]")
            if not rest:
                return host, None
            if not rest.startswith(":"):
                raise ValueError(f"unexpected characters after host in [{address}]")
            return host, rest[1:]

        if text.count(":") > 1:
            # 대괄호 없는 IPv6 리터럴은 포트 없음
            return text, None

        host, sep, ports = text.partition(":")
        if not host:
            raise ValueError(f"empty host in [{address}]")
        return host, ports if sep else None
