"""
nat_router/core/parallel/types.py - 병렬 실행 결과 타입
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCategory(Enum):
    """에러 카테고리 분류"""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    THROTTLING = "throttling"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    EXPIRED_TOKEN = "expired_token"
    NETWORK = "network"
    UNKNOWN = "unknown"


@dataclass
class TaskError:
    """개별 작업 실패 정보

    Attributes:
        identifier: 작업 대상 식별자 (인스턴스 ID 등)
        category: 에러 카테고리
        error_code: 에러 코드 문자열
        message: 에러 메시지
        original_exception: 원본 예외 (있는 경우)
    """

    identifier: str
    category: ErrorCategory
    error_code: str
    message: str
    original_exception: Exception | None = None

    def __str__(self) -> str:
        return f"[{self.identifier}] {self.error_code}: {self.message}"


@dataclass
class TaskResult(Generic[T]):
    """개별 작업 실행 결과

    Attributes:
        identifier: 작업 대상 식별자
        success: 성공 여부
        data: 성공 시 반환값
        error: 실패 시 에러 정보
        duration_ms: 실행 시간 (밀리초)
    """

    identifier: str
    success: bool
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0


@dataclass
class ParallelExecutionResult(Generic[T]):
    """전체 병렬 실행 결과

    results는 입력 순서를 유지합니다.
    """

    results: tuple[TaskResult[T], ...] = ()

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def errors(self) -> list[TaskError]:
        return [r.error for r in self.results if r.error is not None]

    def get_data(self) -> list[T]:
        """성공한 작업의 데이터만 입력 순서대로 반환"""
        return [r.data for r in self.results if r.success and r.data is not None]
