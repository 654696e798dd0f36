"""
core/parallel/client.py - boto3 client 생성

모든 수집기는 여기서 client를 만듭니다. 원격 호출이 멈춰도 실행 전체가
무기한 대기하지 않도록 botocore 수준의 재시도(adaptive)와 타임아웃이 항상 걸립니다.
run_with_retry의 작업 단위 재시도는 이 위에 한 번 더 적용됩니다.

Example:
    from core.parallel import ClientSettings, get_client

    cfn = get_client(session, "cloudformation", region_name="us-east-1")
    iam = get_client(session, "iam", settings=ClientSettings(read_timeout=60))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from botocore.config import Config

if TYPE_CHECKING:
    import boto3


@dataclass(frozen=True)
class ClientSettings:
    """botocore client 설정

    Attributes:
        max_attempts: botocore 최대 시도 횟수 (첫 시도 포함)
        retry_mode: botocore 재시도 모드
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 응답 대기 타임아웃 (초)
        max_pool_connections: HTTP 연결 풀 크기
    """

    max_attempts: int = 5
    retry_mode: Literal["legacy", "standard", "adaptive"] = "adaptive"
    connect_timeout: int = 10
    read_timeout: int = 30
    max_pool_connections: int = 10

    def to_botocore(self) -> Config:
        return Config(
            retries={"max_attempts": self.max_attempts, "mode": self.retry_mode},
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_pool_connections=self.max_pool_connections,
        )


DEFAULT_CLIENT_SETTINGS = ClientSettings()


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    settings: ClientSettings | None = None,
    config: Config | None = None,
) -> Any:
    """재시도/타임아웃이 적용된 boto3 client

    Args:
        session: boto3 Session
        service_name: "cloudformation", "iam", "logs" 등
        region_name: None이면 세션 기본 리전
        settings: None이면 DEFAULT_CLIENT_SETTINGS
        config: 추가 botocore Config. 같은 항목은 이 값이 우선합니다.
    """
    merged = (settings or DEFAULT_CLIENT_SETTINGS).to_botocore()
    if config is not None:
        merged = merged.merge(config)
    return session.client(service_name, region_name=region_name, config=merged)
