"""
nat_router/core/exceptions.py - 예외 계층 구조

시작 시점에 치명적인 오류와 사이클 단위로 복구되는 오류를 구분합니다.

    NatRouterError
    ├── ConfigError     시작 시 치명적 (exit 1)
    ├── IdentityError   인스턴스 메타데이터 조회 실패
    ├── DiscoveryError  인스턴스/라우팅 테이블 조회 실패 → 사이클 중단
    └── ApplyError      라우트/속성 변경 실패 → 수집 후 계속

Usage:
    try:
        ec2.replace_route(**params)
    except ClientError as e:
        raise ApplyError.from_client_error("replace_route", table.id, e) from e
"""

from __future__ import annotations

from typing import Any

NOT_FOUND_CODES = frozenset(
    {
        "InvalidRoute.NotFound",
        "InvalidRouteTableID.NotFound",
        "InvalidInstanceID.NotFound",
        "ResourceNotFoundException",
    }
)
THROTTLING_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RateExceeded",
    }
)
ACCESS_DENIED_CODES = frozenset({"AccessDenied", "AccessDeniedException", "UnauthorizedOperation"})

# EC2 에러 코드별 안내 문구
FRIENDLY_MESSAGES = {
    "UnauthorizedOperation": "권한이 없습니다. IAM 정책을 확인하세요.",
    "AuthFailure": "잘못된 자격 증명입니다.",
    "ExpiredToken": "인증 토큰이 만료되었습니다.",
    "RequestLimitExceeded": "요청이 너무 많습니다. 다음 사이클에서 다시 시도합니다.",
}


class NatRouterError(Exception):
    """nat-router 예외 베이스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외
        details: 구조화된 부가 정보 (로깅용)
    """

    def __init__(self, message: str, cause: Exception | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details: dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return self.message if self.cause is None else f"{self.message}: {self.cause}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": None if self.cause is None else str(self.cause),
            "details": self.details,
        }


class ConfigError(NatRouterError):
    """잘못된 설정 (발생 시 제어 루프에 진입하지 않음)"""

    def __init__(self, key: str, message: str, cause: Exception | None = None):
        super().__init__(f"설정 오류 [{key}]: {message}", cause, {"config_key": key})
        self.config_key = key


class IdentityError(NatRouterError):
    """현재 프로세스의 인스턴스 ID를 확인할 수 없음"""


class DiscoveryError(NatRouterError):
    """NAT 인스턴스 또는 라우팅 테이블 조회 실패"""

    def __init__(self, resource: str, message: str, cause: Exception | None = None):
        super().__init__(f"조회 실패 [{resource}]: {message}", cause, {"resource": resource})
        self.resource = resource


class ApplyError(NatRouterError):
    """EC2 변경 API 실패

    한 건의 실패가 같은 사이클의 나머지 변경을 막지 않으며,
    반영되지 않은 변경은 다음 사이클의 diff에서 다시 드러납니다.
    """

    def __init__(
        self,
        operation: str,
        resource_id: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        text = f"ec2.{operation} [{resource_id}]"
        if error_code:
            text += f" 실패 ({error_code})"
        if error_message:
            text += f": {error_message}"
        super().__init__(
            text,
            cause,
            {"operation": operation, "resource_id": resource_id, "error_code": error_code},
        )
        self.operation = operation
        self.resource_id = resource_id
        self.error_code = error_code
        self.error_message = error_message

    @classmethod
    def from_client_error(cls, operation: str, resource_id: str, client_error: Exception) -> ApplyError:
        """botocore ClientError의 응답에서 코드/메시지를 꺼내 래핑"""
        code, message = _client_error_info(client_error)
        return cls(operation, resource_id, error_code=code, error_message=message, cause=client_error)


def _client_error_info(error: Exception) -> tuple[str | None, str | None]:
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return None, None
    info = response.get("Error", {})
    return info.get("Code"), info.get("Message")


def _error_code(error: Exception) -> str | None:
    if isinstance(error, ApplyError):
        return error.error_code
    return _client_error_info(error)[0]


def is_access_denied(error: Exception) -> bool:
    return _error_code(error) in ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    return _error_code(error) in THROTTLING_CODES


def is_not_found(error: Exception) -> bool:
    """대상 리소스가 없는 오류인지 확인 (replace_route의 InvalidRoute.NotFound 포함)"""
    return _error_code(error) in NOT_FOUND_CODES


def format_error_for_user(error: Exception) -> str:
    """콘솔에 출력할 에러 메시지"""
    if isinstance(error, NatRouterError):
        return str(error)

    code, message = _client_error_info(error)
    if code is None:
        return str(error)
    return FRIENDLY_MESSAGES.get(code, f"{code}: {message or error}")
