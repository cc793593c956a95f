"""
discovery/exceptions.py - 예외 계층 구조

디스커버리 코어와 협력 객체가 발생시키는 예외 클래스들을 정의합니다.

예외 계층 구조:
    DiscoveryError (베이스)
    ├── ConfigError (잘못된 설정 값)
    └── InventoryFetchError (클라우드 인벤토리 API 호출 실패)

인스턴스 단위 문제(주소 없음, 잘못된 주소, 전송 주소 변환 실패)는 예외로
올리지 않고 해당 인스턴스의 ResolutionResult에 기록한 뒤 로그로 남깁니다.

Usage:
    from discovery.exceptions import InventoryFetchError, is_access_denied

    try:
        nodes = provider.build_dynamic_nodes()
    except InventoryFetchError as e:
        if is_access_denied(e):
            logger.error("ec2:DescribeInstances 권한 없음")
        raise
"""

from typing import Any, Dict, Optional

_ACCESS_DENIED_CODES = (
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedOperation",
    "UnauthorizedAccess",
)

_THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
}


class DiscoveryError(Exception):
    """모든 디스커버리 예외의 베이스 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (있는 경우)
        details: 추가 정보 딕셔너리
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


class ConfigError(DiscoveryError):
    """설정 값 오류"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"invalid setting [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


class InventoryFetchError(DiscoveryError):
    """클라우드 인벤토리 조회 실패

    botocore 예외를 감싸서, 호출자는 전송 오류와 권한 오류 모두 이 예외
    하나로 처리할 수 있습니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation} failed"
        if error_code:
            message = f"{message} ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> "InventoryFetchError":
        """botocore ClientError에서 생성"""
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


def _error_code(error: Exception) -> str:
    if isinstance(error, InventoryFetchError):
        return error.error_code or ""
    if hasattr(error, "response"):
        return error.response.get("Error", {}).get("Code", "")
    return ""


def is_access_denied(error: Exception) -> bool:
    """AWS 권한 오류 여부"""
    return _error_code(error) in _ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    """AWS 스로틀링 오류 여부"""
    return _error_code(error) in _THROTTLING_CODES
