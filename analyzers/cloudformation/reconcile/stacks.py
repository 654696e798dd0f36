"""
analyzers/cloudformation/reconcile/stacks.py - Stack 트리 탐색

루트 Stack 목록을 페이지 단위로 조회하고, 각 Stack의 리소스를
중첩 Stack을 따라 깊이 우선으로 펼칩니다.

중첩 Stack 판별:
    Physical ID가 CloudFormation Stack ARN 형식(arn:aws*:cloudformation:)이면
    중첩 Stack으로 보고 재귀적으로 펼칩니다. 펼친 결과에서 중첩 Stack은
    리소스 항목으로 한 번 나온 뒤 바로 하위 리소스들이 이어집니다.

순회 한계:
    - max_pages: list_stacks 페이지 수 한계
    - max_depth: 중첩 Stack 깊이 한계
    - 현재 경로에 이미 있는 Stack을 다시 만나면 순환으로 판단
    한계를 넘으면 StackTraversalError가 발생합니다.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from botocore.exceptions import ClientError

from core.config import DEFAULT_MAX_DEPTH, DEFAULT_MAX_PAGES
from core.exceptions import APICallError, StackTraversalError
from core.parallel import RetryConfig, get_client, run_with_retry

from .types import (
    ACTIVE_STACK_STATUSES,
    DiscoveredResource,
    Leaf,
    NestedStack,
    StackNode,
    StackTreeNode,
    flatten_tree,
)

logger = logging.getLogger(__name__)

# type/..., stackset/... 등 Stack이 아닌 CloudFormation ARN은 제외
_NESTED_STACK_ARN = re.compile(r"^arn:aws[-a-z]*:cloudformation:[^:]*:[^:]*:stack/")


def is_nested_stack_arn(physical_id: str) -> bool:
    """Physical ID가 CloudFormation Stack ARN인지 확인

    Examples:
        >>> is_nested_stack_arn("arn:aws:cloudformation:us-east-1:123456789012:stack/child/abc")
        True
        >>> is_nested_stack_arn("arn:aws-cn:cloudformation:cn-north-1:123456789012:stack/child/abc")
        True
        >>> is_nested_stack_arn("my-bucket")
        False
        >>> is_nested_stack_arn("arn:aws:cloudformation:us-east-1:123456789012:type/resource/Acme-Foo-Bar")
        False
    """
    return bool(physical_id) and _NESTED_STACK_ARN.match(physical_id) is not None


class CloudFormationStackSource:
    """CloudFormation API 어댑터

    API 에러(ClientError)는 변환하지 않고 그대로 전파합니다.
    """

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_session(cls, session, region: str | None = None) -> CloudFormationStackSource:
        return cls(get_client(session, "cloudformation", region_name=region))

    def list_root_stacks(self, page_token: str | None = None) -> tuple[list[StackNode], str | None]:
        """list_stacks 한 페이지 조회

        상태 필터는 매 페이지 요청에 포함합니다.

        Returns:
            (Stack 목록, 다음 페이지 토큰 또는 None)
        """
        kwargs: dict[str, Any] = {"StackStatusFilter": list(ACTIVE_STACK_STATUSES)}
        if page_token:
            kwargs["NextToken"] = page_token

        response = self.client.list_stacks(**kwargs)
        items = [
            StackNode(
                stack_id=summary.get("StackId", ""),
                parent_id=summary.get("ParentId") or None,
                stack_name=summary.get("StackName", ""),
                status=summary.get("StackStatus", ""),
            )
            for summary in response.get("StackSummaries", [])
        ]
        return items, response.get("NextToken") or None

    def list_stack_resources(self, stack_id: str) -> list[dict[str, str]]:
        """Stack의 리소스 목록 조회

        Returns:
            [{"physical_id", "logical_id", "resource_type"}, ...]
        """
        response = self.client.describe_stack_resources(StackName=stack_id)
        return [
            {
                "physical_id": resource.get("PhysicalResourceId", ""),
                "logical_id": resource.get("LogicalResourceId", ""),
                "resource_type": resource.get("ResourceType", ""),
            }
            for resource in response.get("StackResources", [])
        ]


class StackTreeWalker:
    """Stack 트리 탐색기

    Args:
        source: list_root_stacks / list_stack_resources를 제공하는 소스
        max_depth: 중첩 Stack 최대 깊이 (루트 Stack의 리소스가 깊이 0)
        max_pages: list_stacks 최대 페이지 수
        retry_config: describe_stack_resources 재시도 설정
        region: 로그 표시용 리전
    """

    def __init__(
        self,
        source: Any,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_pages: int = DEFAULT_MAX_PAGES,
        retry_config: RetryConfig | None = None,
        region: str = "",
    ):
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        if max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {max_pages}")
        self.source = source
        self.max_depth = max_depth
        self.max_pages = max_pages
        self.retry_config = retry_config or RetryConfig()
        self.region = region

    def list_root_stacks(self) -> list[StackNode]:
        """루트 Stack 목록 (페이지 순서, 페이지 내 순서 유지)

        Raises:
            StackTraversalError: max_pages를 넘는 경우
        """
        roots: list[StackNode] = []
        token: str | None = None
        pages = 0

        while True:
            if pages >= self.max_pages:
                raise StackTraversalError(
                    token or "list_stacks",
                    f"list_stacks 페이지 수가 한계({self.max_pages})를 넘었습니다",
                )
            items, token = self.source.list_root_stacks(token)
            pages += 1

            for node in items:
                if node.status not in ACTIVE_STACK_STATUSES or not node.is_root:
                    continue
                roots.append(node)

            if not token:
                break

        logger.info(f"루트 Stack {len(roots)}개 조회 ({pages}페이지)")
        return roots

    def expand(self, stack_id: str) -> tuple[StackTreeNode, ...]:
        """Stack 리소스를 트리로 펼침

        Raises:
            StackTraversalError: 깊이 한계 초과, 순환 참조, 리소스 조회 실패
            APICallError: describe_stack_resources API 에러
        """
        return self._expand(stack_id, depth=0, path=(stack_id,))

    def list_stack_resources(self, stack_id: str) -> list[DiscoveredResource]:
        """Stack 리소스 목록 (중첩 Stack 리소스 포함, 깊이 우선 순서)"""
        return flatten_tree(self.expand(stack_id))

    def _expand(self, stack_id: str, depth: int, path: tuple[str, ...]) -> tuple[StackTreeNode, ...]:
        if depth > self.max_depth:
            raise StackTraversalError(stack_id, f"중첩 Stack 깊이가 한계({self.max_depth})를 넘었습니다")

        nodes: list[StackTreeNode] = []
        for item in self._fetch_resources(stack_id):
            resource = DiscoveredResource(
                physical_id=item.get("physical_id", ""),
                logical_id=item.get("logical_id", ""),
                stack_id=stack_id,
                resource_type=item.get("resource_type", ""),
            )

            if not is_nested_stack_arn(resource.physical_id):
                nodes.append(Leaf(resource))
                continue

            child_id = resource.physical_id
            if child_id in path:
                raise StackTraversalError(child_id, "중첩 Stack 순환 참조가 발견되었습니다")

            logger.debug(f"중첩 Stack 탐색 (깊이 {depth + 1}): {child_id}")
            children = self._expand(child_id, depth + 1, (*path, child_id))
            nodes.append(NestedStack(resource, children))

        return tuple(nodes)

    def _fetch_resources(self, stack_id: str) -> list[dict[str, str]]:
        result = run_with_retry(
            lambda: self.source.list_stack_resources(stack_id),
            "stack_resources",
            region=self.region,
            retry_config=self.retry_config,
        )
        if result.success:
            return result.data or []

        error = result.error
        cause = error.original_exception if error else None
        if isinstance(cause, ClientError):
            raise APICallError.from_client_error("cloudformation", "describe_stack_resources", cause) from cause
        message = error.message if error else "알 수 없는 오류"
        raise StackTraversalError(stack_id, f"Stack 리소스 조회 실패: {message}", cause=cause)
