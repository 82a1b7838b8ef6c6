"""
nat_router/core/parallel/executor.py - 고정 크기 병렬 실행기

독립적인 작업(NAT 인스턴스별 헬스체크 등)을 ThreadPoolExecutor로 동시에
실행하고, 모든 작업이 끝난 뒤 입력 순서대로 결과를 돌려줍니다.
부분 결과는 반환하지 않습니다.

Example:
    from nat_router.core.parallel import parallel_map

    result = parallel_map(check, instances, key=lambda ni: ni.id, max_workers=10)
    statuses = result.get_data()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Generic, TypeVar

from .decorators import categorize_error, get_error_code
from .types import ParallelExecutionResult, TaskError, TaskResult

logger = logging.getLogger(__name__)

T = TypeVar("T")
ItemT = TypeVar("ItemT")

MAX_WORKERS_LIMIT = 100


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 동시 스레드 수 상한 (1 이상, 100으로 제한)
    """

    max_workers: int = 10

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        self.max_workers = min(self.max_workers, MAX_WORKERS_LIMIT)


@dataclass
class _Task(Generic[ItemT, T]):
    index: int
    identifier: str
    item: ItemT

    def run(self, func: Callable[[ItemT], T]) -> TaskResult[T]:
        started = time.monotonic()
        try:
            data = func(self.item)
        except Exception as e:
            error = TaskError(
                identifier=self.identifier,
                category=categorize_error(e),
                error_code=get_error_code(e),
                message=str(e),
                original_exception=e,
            )
            # 워커 프레임 참조 해제
            e.__traceback__ = None
            return TaskResult(self.identifier, False, error=error, duration_ms=_elapsed_ms(started))
        return TaskResult(self.identifier, True, data=data, duration_ms=_elapsed_ms(started))


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000


class ParallelExecutor:
    """입력 순서를 보존하는 고정 크기 병렬 실행기

    작업 함수에서 발생한 예외는 전파하지 않고 실패한 TaskResult로 변환합니다.
    """

    def __init__(self, config: ParallelConfig | None = None):
        self.config = config or ParallelConfig()

    def execute(
        self,
        func: Callable[[ItemT], T],
        items: Sequence[ItemT],
        key: Callable[[ItemT], str] = str,
    ) -> ParallelExecutionResult[T]:
        """func를 모든 항목에 병렬 적용

        Args:
            func: 항목 하나를 처리하는 함수
            items: 작업 대상
            key: 결과/로그에 쓰일 식별자 함수

        Returns:
            입력 순서대로 정렬된 ParallelExecutionResult
        """
        if not items:
            return ParallelExecutionResult()

        tasks = [_Task(i, key(item), item) for i, item in enumerate(items)]
        workers = min(self.config.max_workers, len(tasks))
        ordered: list[TaskResult[T]] = [None] * len(tasks)  # type: ignore[list-item]
        started = time.monotonic()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as pool:
            pending = {pool.submit(task.run, func): task for task in tasks}
            for future in as_completed(pending):
                ordered[pending[future].index] = future.result()

        result = ParallelExecutionResult(results=tuple(ordered))
        logger.debug(
            f"병렬 실행 완료 ({workers} workers): 성공 {result.success_count}, "
            f"실패 {result.error_count}, {_elapsed_ms(started):.0f}ms"
        )
        return result


def parallel_map(
    func: Callable[[ItemT], T],
    items: Sequence[ItemT],
    key: Callable[[ItemT], str] = str,
    max_workers: int = 10,
) -> ParallelExecutionResult[T]:
    """ParallelExecutor(ParallelConfig(max_workers)).execute 단축 함수"""
    return ParallelExecutor(ParallelConfig(max_workers=max_workers)).execute(func, items, key)
