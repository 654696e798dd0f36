"""
core/auth - boto3 Session

프로파일 이름 또는 기본 자격 증명 체인(환경 변수, 인스턴스 역할 등)으로 Session을 만들고
사용할 리전을 결정합니다. 실패는 모두 ConfigError입니다.

    session = get_session("dev", None)
    region = resolve_region(session, None)
"""

from .session import get_session, resolve_region

__all__ = ["get_session", "resolve_region"]
