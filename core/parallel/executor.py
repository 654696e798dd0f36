"""
core/parallel/executor.py - 병렬 작업 실행기

서로 독립적인 I/O 작업(예: IAM Role 수집, Log Group 수집)을
ThreadPoolExecutor로 동시에 실행하고, 지수 백오프 재시도를 적용합니다.

submit()은 즉시 반환하므로 호출 스레드는 그 사이 다른 작업(Stack 목록 조회)을
수행할 수 있고, join()이 모든 작업 완료를 기다리는 배리어 역할을 합니다.
각 작업의 결과는 Future 하나에 한 번만 기록되고 join()에서 한 번만 읽힙니다.

주요 구성 요소:
- ParallelConfig: 병렬 실행 설정 (워커 수, 재시도)
- ParallelTaskExecutor: 이름 붙은 작업 묶음 실행기
- PendingTasks: 제출된 작업 묶음 (join 배리어)
- run_with_retry: 단일 작업 재시도 실행 (호출 스레드에서도 사용)

Example:
    executor = ParallelTaskExecutor(ParallelConfig(max_workers=2), region="us-east-1")
    pending = executor.submit({"iam_roles": collect_roles, "log_groups": collect_logs})

    stacks = run_with_retry(list_root_stacks, "root_stacks", region="us-east-1")

    result = pending.join()
    roles = result.get("iam_roles")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Generic, TypeVar

from .retry import RetryConfig, categorize_error, get_error_code, is_retryable
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _clear_exception_chain(e: BaseException) -> None:
    """traceback + chained exception 메모리 누수 방지"""
    e.__traceback__ = None
    if e.__context__ is not None:
        e.__context__.__traceback__ = None
    if e.__cause__ is not None:
        e.__cause__.__traceback__ = None


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 최대 동시 스레드 수 (1~100)
        retry_config: 재시도 설정
    """

    max_workers: int = 4
    retry_config: RetryConfig | None = None

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > 100:
            self.max_workers = 100


def _failed(
    identifier: str,
    region: str,
    error: Exception,
    *,
    category: ErrorCategory,
    error_code: str,
    retries: int = 0,
    started: float | None = None,
) -> TaskResult:
    _clear_exception_chain(error)
    return TaskResult(
        identifier=identifier,
        region=region,
        success=False,
        error=TaskError(identifier, region, category, error_code, str(error), retries, error),
        duration_ms=0.0 if started is None else (time.monotonic() - started) * 1000,
    )


def run_with_retry(
    func: Callable[[], T],
    identifier: str,
    region: str = "",
    retry_config: RetryConfig | None = None,
) -> TaskResult[T]:
    """func를 실행하고 결과를 TaskResult로 반환 (예외를 던지지 않음)

    is_retryable()인 실패는 retry_config.max_retries회까지 백오프 후 다시 시도하고,
    그 외 실패나 마지막 시도의 실패는 TaskError로 담아 반환합니다.

    Args:
        func: 인자 없는 작업 함수
        identifier: 결과 조회/로그용 식별자 ("iam_roles" 등)
        region: 로그/결과 표시용 리전
        retry_config: None이면 RetryConfig()
    """
    config = retry_config or RetryConfig()
    started = time.monotonic()
    attempt = 0

    while True:
        try:
            data = func()
        except Exception as e:
            if attempt < config.max_retries and is_retryable(e):
                delay = config.get_delay(attempt)
                logger.debug(f"[{identifier}/{region}] {attempt + 1}번째 시도 실패, {delay:.2f}초 후 재시도: {e}")
                attempt += 1
                time.sleep(delay)
                continue

            logger.debug(f"[{identifier}/{region}] 실패 (재시도 {attempt}회): {e}")
            return _failed(
                identifier,
                region,
                e,
                category=categorize_error(e),
                error_code=get_error_code(e),
                retries=attempt,
                started=started,
            )

        return TaskResult(
            identifier=identifier,
            region=region,
            success=True,
            data=data,
            duration_ms=(time.monotonic() - started) * 1000,
        )


class PendingTasks(Generic[T]):
    """제출된 작업 묶음

    join()을 호출하기 전까지 작업들은 워커 스레드에서 계속 실행됩니다.
    """

    def __init__(
        self,
        pool: ThreadPoolExecutor,
        futures: dict[str, Future[TaskResult[T]]],
        region: str,
    ):
        self._pool = pool
        self._futures = futures
        self._region = region
        self._result: ParallelExecutionResult[T] | None = None

    def join(self) -> ParallelExecutionResult[T]:
        """모든 작업 완료까지 대기 후 결과 반환

        결과는 제출 순서를 따릅니다. 두 번째 호출부터는 같은 결과를 반환합니다.

        Returns:
            ParallelExecutionResult[T]
        """
        if self._result is not None:
            return self._result

        results: list[TaskResult[T]] = []
        try:
            for identifier, future in self._futures.items():
                try:
                    results.append(future.result())
                except Exception as e:
                    # run_with_retry는 예외를 던지지 않으므로 executor 자체 에러
                    logger.error(f"작업 실행 중 예외 [{identifier}/{self._region}]: {e}")
                    results.append(
                        _failed(identifier, self._region, e, category=ErrorCategory.UNKNOWN, error_code="ExecutorError")
                    )
        finally:
            self._pool.shutdown(wait=True)

        self._result = ParallelExecutionResult(results=tuple(results))
        logger.info(
            f"병렬 실행 완료: 성공 {self._result.success_count}, 실패 {self._result.error_count}, "
            f"총 {self._result.total_duration_ms:.0f}ms"
        )
        return self._result


class ParallelTaskExecutor:
    """병렬 작업 실행기

    이름 붙은 작업 묶음을 워커 스레드에 제출합니다. 작업 간에는 공유 가변
    상태가 없어야 하며, 각 작업은 자신의 결과 객체만 만들어 반환합니다.

    Example:
        result = ParallelTaskExecutor().submit({"iam_roles": collect_roles}).join()
        for error in result.get_errors():
            print(error)
    """

    def __init__(self, config: ParallelConfig | None = None, region: str = ""):
        """초기화

        Args:
            config: 병렬 실행 설정 (None이면 기본값)
            region: 결과/로그에 표시할 리전
        """
        self.config = config or ParallelConfig()
        self.region = region
        self._retry_config = self.config.retry_config or RetryConfig()

    def submit(self, tasks: Mapping[str, Callable[[], T]]) -> PendingTasks[T]:
        """작업들을 워커 스레드에 제출하고 즉시 반환

        Args:
            tasks: {식별자: 인자 없는 작업 함수}

        Returns:
            PendingTasks[T]: join()으로 결과를 받는 작업 묶음
        """
        workers = max(1, min(self.config.max_workers, len(tasks)))
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="collector")

        logger.info(f"병렬 실행 시작: {len(tasks)}개 작업, max_workers={workers}")

        futures: dict[str, Future[TaskResult[T]]] = {}
        for identifier, func in tasks.items():
            futures[identifier] = pool.submit(
                run_with_retry,
                func,
                identifier,
                self.region,
                self._retry_config,
            )

        return PendingTasks(pool, futures, self.region)
