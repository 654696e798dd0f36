"""
core/exceptions.py - 재조정 도구 예외

예외 계층:
    ReconError
    ├── ConfigError                 실행 전 설정 문제 (프로파일/리전/CSV 경로)
    ├── ValidationError             옵션 값 범위 위반
    ├── ReconcileRunError           실행 단계(stage) 실패
    │   ├── APICallError            AWS API 호출 실패 (ClientError 래핑)
    │   ├── CollectionError         수집 단계 실패, 소스별 TaskError 목록 포함
    │   └── StackTraversalError     Stack 트리 순회 한계 초과 또는 순환
    └── RecordAlreadyConsumedError  이미 소비된 레코드 재삭제

ConfigError/ValidationError는 AWS 호출 전에, ReconcileRunError 계열은
수집 또는 병합 도중에 발생합니다. 둘 다 CLI에서 종료 코드 1로 끝납니다.

Usage:
    from core.exceptions import APICallError

    try:
        cfn.describe_stack_resources(StackName=stack_id)
    except ClientError as e:
        raise APICallError.from_client_error("cloudformation", "describe_stack_resources", e) from e
"""

from __future__ import annotations

from typing import Any, Sequence


class ReconError(Exception):
    """모든 도구 예외의 베이스

    Attributes:
        message: 사용자에게 보여줄 메시지
        cause: 원인 예외
        details: 로그/JSON 출력용 부가 정보
    """

    def __init__(self, message: str, cause: Exception | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details: dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}" if self.cause else self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": None if self.cause is None else str(self.cause),
            "details": self.details,
        }


class ConfigError(ReconError):
    """실행 전 설정 오류. 어떤 AWS 호출보다도 먼저 발생합니다."""

    def __init__(self, key: str, message: str, cause: Exception | None = None):
        super().__init__(f"설정 오류 [{key}]: {message}", cause, {"config_key": key})
        self.config_key = key


class ValidationError(ReconError):
    """옵션 값이 허용 범위를 벗어난 경우"""

    def __init__(self, field: str, value: Any, expected: str, cause: Exception | None = None):
        super().__init__(
            f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'",
            cause,
            {"field": field, "value": str(value), "expected": expected},
        )
        self.field = field
        self.value = value
        self.expected = expected


# =============================================================================
# 실행 단계 예외
# =============================================================================


class ReconcileRunError(ReconError):
    """재조정 실행 중 특정 단계(stage)의 실패

    stage는 "cloudformation", "iam", "logs"처럼 실패한 서비스나
    "collect"처럼 실패한 단계 이름입니다.
    """

    def __init__(self, stage: str, message: str, cause: Exception | None = None):
        super().__init__(f"[{stage}] {message}", cause, {"stage": stage})
        self.stage = stage


class APICallError(ReconcileRunError):
    """AWS API 호출 실패

    botocore ClientError의 에러 코드/메시지를 보존합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        text = f"{service}.{operation} 호출 실패"
        if error_code:
            text += f" ({error_code})"
        if error_message:
            text += f": {error_message}"
        super().__init__(service, text, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(operation=operation, error_code=error_code)

    @classmethod
    def from_client_error(cls, service: str, operation: str, client_error: Exception) -> APICallError:
        """ClientError(또는 .response를 가진 예외)에서 코드/메시지를 꺼내 생성"""
        info = _error_info(client_error)
        return cls(service, operation, info.get("Code"), info.get("Message"), cause=client_error)


class CollectionError(ReconcileRunError):
    """리소스 수집 단계 실패

    root Stack 목록, IAM Role, Log Group 중 하나라도 실패하면 발생합니다.
    이 경우 보고서 파일은 만들지 않습니다.

    Attributes:
        errors: 실패한 소스별 TaskError 목록
    """

    def __init__(self, errors: Sequence[Any]):
        sources = [str(getattr(e, "identifier", e)) for e in errors]
        super().__init__("collect", f"수집 실패 소스: {', '.join(sources)}")
        self.errors = list(errors)
        self.details["sources"] = sources


class StackTraversalError(ReconcileRunError):
    """Stack 트리 순회 실패 (깊이/페이지 한계 초과, 순환 참조, 리소스 조회 실패)"""

    def __init__(self, stack_id: str, message: str, cause: Exception | None = None):
        super().__init__("cloudformation", f"{message} ({stack_id})", cause)
        self.stack_id = stack_id
        self.details["stack_id"] = stack_id


class RecordAlreadyConsumedError(ReconError):
    """이미 소비(삭제)된 레코드를 다시 삭제하려는 경우"""

    def __init__(self, table: str, position: int):
        super().__init__(f"이미 소비된 레코드입니다 [{table}#{position}]", details={"table": table, "position": position})
        self.table = table
        self.position = position


# =============================================================================
# AWS 에러 코드 헬퍼
# =============================================================================


def _error_info(error: BaseException) -> dict[str, Any]:
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return {}
    info = response.get("Error")
    return info if isinstance(info, dict) else {}


def aws_error_code(error: BaseException) -> str | None:
    """예외에서 AWS 에러 코드 추출

    APICallError는 보존된 코드를, ClientError는 response의 Error.Code를 반환합니다.
    AWS 에러가 아니면 None.
    """
    if isinstance(error, APICallError):
        return error.error_code
    return _error_info(error).get("Code") or None


# 에러 코드별 안내 메시지. 권한 문제는 이 도구가 호출하는 API를 알려준다.
_USER_HINTS: dict[str, str] = {
    "AccessDenied": (
        "권한이 없습니다. cloudformation:ListStacks, cloudformation:DescribeStackResources, "
        "iam:ListRoles, logs:DescribeLogGroups 권한을 확인하세요."
    ),
    "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
    "InvalidClientTokenId": "잘못된 자격 증명입니다. 프로파일을 확인하세요.",
    "Throttling": "요청이 너무 많습니다. 잠시 후 다시 시도하거나 --retries 값을 늘리세요.",
}
_HINT_ALIASES = {
    "AccessDeniedException": "AccessDenied",
    "UnauthorizedOperation": "AccessDenied",
    "ExpiredTokenException": "ExpiredToken",
    "ThrottlingException": "Throttling",
    "TooManyRequestsException": "Throttling",
}


def format_error_for_user(error: BaseException) -> str:
    """CLI에 출력할 에러 메시지

    도구 예외는 그대로 문자열화하고, 도구 예외로 감싸지 않은 ClientError는
    알려진 코드면 안내 메시지를, 아니면 "코드: 메시지"를 반환합니다.
    """
    if isinstance(error, ReconError):
        return str(error)

    info = _error_info(error)
    if not info:
        return str(error)

    code = info.get("Code") or "UnknownError"
    hint = _USER_HINTS.get(_HINT_ALIASES.get(code, code))
    return hint or f"{code}: {info.get('Message') or error}"
