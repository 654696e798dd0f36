"""
core/parallel/retry.py - 에러 분류와 재시도 정책

수집 작업이 실패했을 때 다시 시도할지, 실패를 어떤 카테고리로 보고할지를 정합니다.
재시도 여부는 카테고리에서 파생되므로 분류 테이블 하나만 관리하면 됩니다.

- RetryConfig: 지수 백오프 + full jitter 대기 시간
- categorize_error: 예외 -> ErrorCategory
- get_error_code: 보고용 에러 코드 (AWS 코드 또는 예외 클래스명)
- is_retryable: categorize_error 결과가 RETRYABLE_CATEGORIES에 속하는지
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from botocore.exceptions import ConnectionError as BotocoreConnectionError
from botocore.exceptions import ConnectTimeoutError, ReadTimeoutError

from core.exceptions import aws_error_code

from .types import RETRYABLE_CATEGORIES, ErrorCategory

# AWS 에러 코드 -> 카테고리
_CODE_CATEGORIES: dict[str, ErrorCategory] = {
    **dict.fromkeys(
        (
            "Throttling",
            "ThrottlingException",
            "RequestLimitExceeded",
            "TooManyRequestsException",
            "RateExceeded",
        ),
        ErrorCategory.THROTTLING,
    ),
    **dict.fromkeys(
        ("AccessDenied", "AccessDeniedException", "UnauthorizedAccess", "UnauthorizedOperation"),
        ErrorCategory.ACCESS_DENIED,
    ),
    **dict.fromkeys(
        ("ResourceNotFoundException", "NotFoundException", "NoSuchEntity", "StackNotFoundException"),
        ErrorCategory.NOT_FOUND,
    ),
    **dict.fromkeys(("ExpiredToken", "ExpiredTokenException"), ErrorCategory.EXPIRED_TOKEN),
    **dict.fromkeys(
        (
            "ServiceUnavailable",
            "ServiceUnavailableException",
            "InternalError",
            "InternalFailure",
            "InternalServiceError",
        ),
        ErrorCategory.SERVICE_ERROR,
    ),
    "ValidationError": ErrorCategory.INVALID_REQUEST,
}


@dataclass
class RetryConfig:
    """재시도 설정

    Attributes:
        max_retries: 첫 시도 이후 추가 시도 횟수 (0이면 재시도 없음)
        base_delay: 첫 재시도 전 대기 시간 상한 (초)
        max_delay: 대기 시간 상한 (초)
        exponential_base: 시도마다 곱해지는 배수
        jitter: True면 [0, delay] 구간에서 무작위 대기 (full jitter)
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    def get_delay(self, attempt: int) -> float:
        """attempt번째(0부터) 실패 후 대기할 시간"""
        ceiling = min(self.max_delay, self.base_delay * self.exponential_base**attempt)
        return random.uniform(0, ceiling) if self.jitter else ceiling


def categorize_error(error: BaseException) -> ErrorCategory:
    """예외를 ErrorCategory로 분류

    AWS 에러 코드가 있으면 코드 테이블로, 없으면 예외 타입으로 분류합니다.
    """
    code = aws_error_code(error)
    if code:
        category = _CODE_CATEGORIES.get(code)
        if category is not None:
            return category
        return ErrorCategory.TIMEOUT if "Timeout" in code else ErrorCategory.UNKNOWN

    # TimeoutError는 OSError 하위 클래스, ConnectTimeoutError는 botocore ConnectionError 하위 클래스
    if isinstance(error, (TimeoutError, ConnectTimeoutError, ReadTimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(error, (ConnectionError, OSError, BotocoreConnectionError)):
        return ErrorCategory.NETWORK
    return ErrorCategory.UNKNOWN


def get_error_code(error: BaseException) -> str:
    return aws_error_code(error) or type(error).__name__


def is_retryable(error: BaseException) -> bool:
    return categorize_error(error) in RETRYABLE_CATEGORIES
