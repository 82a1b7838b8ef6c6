"""
nat_router/core/parallel - 병렬 처리 및 에러 수집 모듈

주요 구성 요소:
- ParallelExecutor / parallel_map: 고정 크기 병렬 실행 (헬스체크 fan-out)
- ErrorCollector: 사이클 중 조회/적용 에러 수집

Example:
    from nat_router.core.parallel import parallel_map

    result = parallel_map(check, instances, key=lambda ni: ni.id, max_workers=10)
    print(f"성공: {result.success_count}, 실패: {result.error_count}")
"""

from .decorators import categorize_error, get_error_code
from .errors import CollectedError, ErrorCollector, ErrorSeverity
from .executor import ParallelConfig, ParallelExecutor, parallel_map
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "ParallelExecutor",
    "ParallelConfig",
    "parallel_map",
    # Error handling
    "ErrorCollector",
    "ErrorSeverity",
    "CollectedError",
    "categorize_error",
    "get_error_code",
    # Types
    "ErrorCategory",
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]
