"""
core/parallel - 병렬 처리 모듈

독립적인 AWS 수집 작업을 병렬로 안전하게 처리합니다.

주요 구성 요소:
- ParallelTaskExecutor: 이름 붙은 작업 묶음 실행기 (submit/join)
- run_with_retry: 지수 백오프 재시도 실행 (에러 분류는 retry.py)
- get_client / ClientSettings: retry/timeout이 적용된 boto3 client

Example:
    from core.parallel import ParallelTaskExecutor, run_with_retry

    pending = ParallelTaskExecutor(region=region).submit(
        {"iam_roles": collect_roles, "log_groups": collect_log_groups}
    )
    stacks = run_with_retry(walker.list_root_stacks, "root_stacks", region=region)
    result = pending.join()

    for error in result.get_errors():
        print(error)
"""

from .client import ClientSettings, get_client
from .executor import ParallelConfig, ParallelTaskExecutor, PendingTasks, run_with_retry
from .retry import RetryConfig, categorize_error, get_error_code, is_retryable
from .types import RETRYABLE_CATEGORIES, ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "ParallelTaskExecutor",
    "ParallelConfig",
    "PendingTasks",
    "run_with_retry",
    # Client (retry 적용)
    "ClientSettings",
    "get_client",
    # Retry
    "RetryConfig",
    "categorize_error",
    "get_error_code",
    "is_retryable",
    # Types
    "ErrorCategory",
    "RETRYABLE_CATEGORIES",
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]
