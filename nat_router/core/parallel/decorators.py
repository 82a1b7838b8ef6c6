"""
nat_router/core/parallel/decorators.py - 에러 코드 추출 및 분류

재시도 데코레이터는 두지 않습니다. 실패한 변경은 다음 사이클의 diff에서
다시 드러나 자동으로 재적용됩니다.
"""

from nat_router.core.exceptions import ApplyError, is_access_denied, is_not_found, is_throttling

from .types import ErrorCategory

EXPIRED_TOKEN_CODES = ("ExpiredToken", "ExpiredTokenException")


def get_error_code(error: Exception) -> str:
    """AWS 에러 코드, 없으면 예외 클래스 이름"""
    if isinstance(error, ApplyError) and error.error_code:
        return error.error_code
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Code", "Unknown")
    return type(error).__name__


def categorize_error(error: Exception) -> ErrorCategory:
    """예외를 ErrorCategory로 분류

    AWS 에러(ClientError, 이를 래핑한 ApplyError)는 코드로,
    그 외는 예외 타입으로 판단합니다.
    """
    for predicate, category in (
        (is_throttling, ErrorCategory.THROTTLING),
        (is_access_denied, ErrorCategory.ACCESS_DENIED),
        (is_not_found, ErrorCategory.NOT_FOUND),
    ):
        if predicate(error):
            return category

    code = get_error_code(error)
    if code in EXPIRED_TOKEN_CODES:
        return ErrorCategory.EXPIRED_TOKEN
    if "Timeout" in code or isinstance(error, TimeoutError):
        return ErrorCategory.TIMEOUT
    if isinstance(error, OSError):
        return ErrorCategory.NETWORK
    return ErrorCategory.UNKNOWN
