"""
core/parallel/types.py - 병렬 실행 결과 타입

수집 작업의 성공/실패를 예외 대신 값으로 전달하기 위한 타입들입니다.
최상위 실행기(HeadlessRunner)만이 이 값을 보고 중단 여부를 결정합니다.

주요 구성 요소:
- ErrorCategory: 에러 분류 (RETRYABLE_CATEGORIES: 재시도 대상)
- TaskError: 단일 작업 실패 정보
- TaskResult: 단일 작업 결과 (성공 데이터 또는 TaskError)
- ParallelExecutionResult: 전체 작업 결과 집합
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCategory(Enum):
    """에러 카테고리"""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


RETRYABLE_CATEGORIES: frozenset[ErrorCategory] = frozenset(
    {
        ErrorCategory.THROTTLING,
        ErrorCategory.NETWORK,
        ErrorCategory.TIMEOUT,
        ErrorCategory.SERVICE_ERROR,
    }
)


@dataclass
class TaskError:
    """단일 작업 실패 정보

    Attributes:
        identifier: 작업 식별자 (소스 이름: "iam_roles", "log_groups", "root_stacks")
        region: AWS 리전
        category: 에러 카테고리
        error_code: AWS 에러 코드 또는 예외 클래스명
        message: 에러 메시지
        retries: 실패 전까지 수행한 재시도 횟수
        original_exception: 원본 예외
        timestamp: 실패 시각
    """

    identifier: str
    region: str
    category: ErrorCategory
    error_code: str
    message: str
    retries: int = 0
    original_exception: BaseException | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.identifier}/{self.region}] {self.error_code}: {self.message}"


@dataclass
class TaskResult(Generic[T]):
    """단일 작업 결과

    Attributes:
        identifier: 작업 식별자
        region: AWS 리전
        success: 성공 여부
        data: 성공 시 결과 데이터
        error: 실패 시 에러 정보
        duration_ms: 소요 시간 (밀리초)
    """

    identifier: str
    region: str
    success: bool
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0

    def __str__(self) -> str:
        status = "OK" if self.success else "FAIL"
        return f"[{self.identifier}/{self.region}] {status} ({self.duration_ms:.0f}ms)"


@dataclass
class ParallelExecutionResult(Generic[T]):
    """전체 실행 결과

    Attributes:
        results: 개별 작업 결과 (완료 순서)
    """

    results: tuple[TaskResult[T], ...] = ()

    @property
    def successful(self) -> list[TaskResult[T]]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[TaskResult[T]]:
        return [r for r in self.results if not r.success]

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def error_count(self) -> int:
        return len(self.failed)

    @property
    def total_duration_ms(self) -> float:
        return sum(r.duration_ms for r in self.results)

    def get(self, identifier: str) -> TaskResult[T] | None:
        """식별자로 개별 결과 조회"""
        for r in self.results:
            if r.identifier == identifier:
                return r
        return None

    def get_errors(self) -> list[TaskError]:
        """실패한 작업의 에러 목록"""
        return [r.error for r in self.results if r.error is not None]
