"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    from conftest import FakeRoleSource, FakeStackSource, stack

    def test_something(make_client_error):
        stacks = FakeStackSource(pages=[[stack("Net")]])
        roles = FakeRoleSource(error=make_client_error("Throttling"))
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock, patch

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from analyzers.cloudformation.reconcile.types import StackNode  # noqa: E402

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def fake_aws_env(monkeypatch):
    """실제 계정으로 호출이 나가지 않도록 더미 자격 증명/리전 설정"""
    for name in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SECURITY_TOKEN", "AWS_SESSION_TOKEN"):
        monkeypatch.setenv(name, "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


# =============================================================================
# 헬퍼
# =============================================================================


def stack_arn(name: str, suffix: str = "abc", region: str = REGION) -> str:
    """CloudFormation Stack ARN 생성"""
    return f"arn:aws:cloudformation:{region}:{ACCOUNT_ID}:stack/{name}/{suffix}"


def stack(
    name: str,
    suffix: str = "abc",
    status: str = "CREATE_COMPLETE",
    parent_id: Optional[str] = None,
) -> StackNode:
    """list_stacks 항목 생성"""
    return StackNode(stack_id=stack_arn(name, suffix), parent_id=parent_id, stack_name=name, status=status)


def resource(physical_id: str, logical_id: str, resource_type: str = "") -> Dict[str, str]:
    """describe_stack_resources 항목 생성"""
    return {"physical_id": physical_id, "logical_id": logical_id, "resource_type": resource_type}


class FakeStackSource:
    """페이지/리소스를 미리 정해 둔 Stack 소스

    page_token은 다음 페이지 인덱스 문자열입니다.
    """

    def __init__(
        self,
        pages: Optional[List[List[StackNode]]] = None,
        resources: Optional[Dict[str, List[Dict[str, str]]]] = None,
    ):
        self.pages = pages if pages is not None else [[]]
        self.resources = resources or {}
        self.page_calls: List[Optional[str]] = []
        self.resource_calls: List[str] = []

    def list_root_stacks(self, page_token: Optional[str] = None):
        self.page_calls.append(page_token)
        index = int(page_token) if page_token else 0
        next_token = str(index + 1) if index + 1 < len(self.pages) else None
        return list(self.pages[index]), next_token

    def list_stack_resources(self, stack_id: str) -> List[Dict[str, str]]:
        self.resource_calls.append(stack_id)
        return [dict(r) for r in self.resources.get(stack_id, [])]


class FakeRoleSource:
    def __init__(self, roles: Optional[List[Dict[str, str]]] = None, error: Optional[Exception] = None):
        self.roles = roles or []
        self.error = error

    def list_roles(self) -> List[Dict[str, str]]:
        if self.error:
            raise self.error
        return list(self.roles)


class FakeLogGroupSource:
    def __init__(self, groups: Optional[List[Dict[str, str]]] = None, error: Optional[Exception] = None):
        self.groups = groups or []
        self.error = error

    def list_log_groups(self) -> List[Dict[str, str]]:
        if self.error:
            raise self.error
        return list(self.groups)


def client_error(code: str, message: str = "Test error", operation: str = "TestOperation") -> Exception:
    from botocore.exceptions import ClientError

    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def write_catalog(path: Path, rows: List[List[str]], encoding: str = "utf-8") -> Path:
    """카탈로그 CSV 작성"""
    import csv

    with open(path, "w", encoding=encoding, newline="") as f:
        writer = csv.writer(f)
        for row in rows:
            writer.writerow(row)
    return path


# =============================================================================
# 픽스처
# =============================================================================


@pytest.fixture
def make_client_error():
    """ClientError 팩토리"""
    return client_error


@pytest.fixture
def catalog_csv(tmp_path):
    """카탈로그 CSV 팩토리 (tmp_path에 작성)"""

    def _make(rows: List[List[str]], name: str = "catalog.csv", encoding: str = "utf-8") -> Path:
        return write_catalog(tmp_path / name, rows, encoding=encoding)

    return _make


@pytest.fixture
def mock_boto3_session():
    """core.auth.session의 boto3.Session 모킹"""
    with patch("core.auth.session.boto3.Session") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        mock_session.client.return_value = MagicMock()
        mock_session.region_name = REGION
        mock_session.get_credentials.return_value = MagicMock()

        yield mock_session_class


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def moto_session() -> Any:
    """moto로 모킹된 boto3 Session"""
    import boto3
    import moto

    with moto.mock_aws():
        yield boto3.Session(region_name=REGION)
