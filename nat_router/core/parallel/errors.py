"""
nat_router/core/parallel/errors.py - 사이클 에러 수집

사이클 도중 발생한 조회/적용 실패를 중단 없이 모아 두고, 사이클 종료 시
작업별 건수로 요약합니다. 수집 시점에 심각도에 맞는 레벨로 바로 로깅합니다.

Example:
    errors = ErrorCollector("ec2")
    for table in tables:
        try:
            router.upsert_nat_route(cidr, instance, table)
        except ApplyError as e:
            errors.collect(e, "upsert_nat_route", resource_id=table.id)
    logger.warning(errors.get_summary())
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from enum import Enum

from .decorators import categorize_error, get_error_code
from .types import ErrorCategory

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """심각도 (값은 로깅 레벨)"""

    CRITICAL = logging.ERROR
    WARNING = logging.WARNING  # 기본값: 보고 후 계속
    INFO = logging.INFO
    DEBUG = logging.DEBUG


@dataclass(frozen=True)
class CollectedError:
    """수집된 실패 한 건"""

    service: str
    operation: str
    error_code: str
    error_message: str
    category: ErrorCategory
    severity: ErrorSeverity = ErrorSeverity.WARNING
    resource_id: str | None = None

    def __str__(self) -> str:
        target = f" [{self.resource_id}]" if self.resource_id else ""
        return f"[{self.severity.name}] {self.service}.{self.operation}{target}: {self.error_code}"


class ErrorCollector:
    """스레드 세이프 에러 수집기"""

    def __init__(self, service: str):
        self.service = service
        self._items: list[CollectedError] = []
        self._lock = threading.Lock()

    def collect(
        self,
        error: Exception,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
        resource_id: str | None = None,
    ) -> CollectedError:
        """예외 한 건을 분류해 저장하고 로깅

        Args:
            error: 발생한 예외 (ApplyError, DiscoveryError 등)
            operation: 실패한 작업 이름
            severity: 심각도
            resource_id: 대상 리소스 ID

        Returns:
            저장된 CollectedError
        """
        item = CollectedError(
            service=self.service,
            operation=operation,
            error_code=get_error_code(error),
            error_message=str(error),
            category=categorize_error(error),
            severity=severity,
            resource_id=resource_id,
        )
        with self._lock:
            self._items.append(item)

        logger.log(severity.value, f"{item} - {item.error_message}")
        return item

    @property
    def errors(self) -> list[CollectedError]:
        with self._lock:
            return list(self._items)

    @property
    def has_errors(self) -> bool:
        with self._lock:
            return bool(self._items)

    def count_by_operation(self) -> dict[str, int]:
        with self._lock:
            return dict(sorted(Counter(item.operation for item in self._items).items()))

    def get_summary(self) -> str:
        """예: "에러 3건 (prevent_source_dest_check: 1건, upsert_nat_route: 2건)" """
        counts = self.count_by_operation()
        if not counts:
            return "에러 없음"
        parts = ", ".join(f"{op}: {n}건" for op, n in counts.items())
        return f"에러 {sum(counts.values())}건 ({parts})"
