"""
analyzers/cloudformation/reconcile/types.py - 재조정 데이터 모델

카탈로그(CSV) 레코드, 보조 인벤토리(IAM Role / Log Group) 레코드,
CloudFormation에서 발견한 리소스, Stack 트리 노드 및 리포트 상수를 정의합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# =============================================================================
# 리포트 상수
# =============================================================================

REPORT_HEADER: tuple[str, ...] = (
    "Sl.No.",
    "ARN/Resource ID",
    "LogicalID",
    "Name",
    "Service",
    "Type",
    "Region",
)

SECTION_STACKS = "a"
SECTION_CATALOG = "b"
SECTION_ROLES = "c"
SECTION_LOG_GROUPS = "d"

SECTION_TITLES: dict[str, str] = {
    SECTION_STACKS: "Resource list from Cloudformation template",
    SECTION_CATALOG: "Non cloudformation linked resource list from CSV file",
    SECTION_ROLES: "Non cloudformation linked IAM roles",
    SECTION_LOG_GROUPS: "Non cloudformation linked Cloudwatch logs",
}

# 보조 인벤토리 고정 태그
IAM_SERVICE = "IAM"
IAM_ROLE_TYPE = "Role"
LOGS_SERVICE = "CloudWatchLogs"
LOGS_GROUP_TYPE = "LogGroup"

# 루트 Stack으로 인정하는 상태
ACTIVE_STACK_STATUSES: tuple[str, ...] = (
    "CREATE_COMPLETE",
    "UPDATE_COMPLETE",
    "UPDATE_ROLLBACK_COMPLETE",
)


# =============================================================================
# 레코드
# =============================================================================


@dataclass(frozen=True)
class CatalogRecord:
    """카탈로그 CSV의 한 행

    Attributes:
        identifier: ARN 또는 리소스 ID (0번 컬럼, 매칭 키)
        name: 이름 (1번 컬럼)
        service: 서비스 (2번 컬럼)
        resource_type: 리소스 타입 (3번 컬럼)
        region: 리전 (4번 컬럼)
        extra: 5번 이후 컬럼 (그대로 보존)
    """

    identifier: str
    name: str = ""
    service: str = ""
    resource_type: str = ""
    region: str = ""
    extra: tuple[str, ...] = ()

    @classmethod
    def from_row(cls, row: list[str]) -> CatalogRecord:
        """CSV 행에서 생성. 5컬럼보다 짧으면 빈 문자열로 채움"""
        cells = [c.strip() for c in row]
        cells += [""] * (5 - len(cells))
        return cls(
            identifier=cells[0],
            name=cells[1],
            service=cells[2],
            resource_type=cells[3],
            region=cells[4],
            extra=tuple(cells[5:]),
        )

    def descriptive_fields(self) -> list[str]:
        """리포트 Name/Service/Type/Region 컬럼 값"""
        return [self.name, self.service, self.resource_type, self.region]

    def residual_row(self, number: int) -> list[str]:
        return [str(number), self.identifier, "", *self.descriptive_fields(), *self.extra]


@dataclass(frozen=True)
class AuxiliaryRecord:
    """보조 인벤토리(IAM Role / CloudWatch Log Group) 레코드

    CloudFormation은 Role/Log Group의 Physical ID로 이름을 보고하므로
    identifier는 이름입니다.

    Attributes:
        identifier: Role 이름 또는 Log Group 이름 (매칭 키)
        name: 표시 이름
        service: 고정 서비스 태그 (IAM / CloudWatchLogs)
        resource_type: 고정 타입 태그 (Role / LogGroup)
        region: 항상 빈 문자열
        arn: ARN
        resource_id: Role ID (Log Group은 빈 문자열)
    """

    identifier: str
    name: str
    service: str
    resource_type: str
    region: str = ""
    arn: str = ""
    resource_id: str = ""

    def descriptive_fields(self) -> list[str]:
        return [self.name, self.service, self.resource_type, self.region]

    def residual_row(self, number: int) -> list[str]:
        return [str(number), self.arn or self.identifier, self.resource_id, *self.descriptive_fields()]


Record = Union[CatalogRecord, AuxiliaryRecord]


# =============================================================================
# Stack 트리
# =============================================================================


@dataclass(frozen=True)
class StackNode:
    """루트 또는 중첩 Stack 식별 정보

    parent_id가 없으면 루트 Stack입니다.
    """

    stack_id: str
    parent_id: str | None = None
    stack_name: str = ""
    status: str = ""

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class DiscoveredResource:
    """Stack 트리에서 발견한 리소스 (불변)"""

    physical_id: str
    logical_id: str
    stack_id: str
    resource_type: str = ""


@dataclass(frozen=True)
class Leaf:
    """일반 리소스 노드"""

    resource: DiscoveredResource


@dataclass(frozen=True)
class NestedStack:
    """중첩 Stack 노드

    중첩 Stack은 리소스 항목(resource)으로 한 번, 하위 트리의 루트로
    한 번 나타납니다. flatten 시 [resource, *children...] 순서가 됩니다.
    """

    resource: DiscoveredResource
    children: tuple[StackTreeNode, ...] = ()


StackTreeNode = Union[Leaf, NestedStack]


def flatten_tree(nodes: tuple[StackTreeNode, ...] | list[StackTreeNode]) -> list[DiscoveredResource]:
    """Stack 트리를 깊이 우선 순서의 리소스 목록으로 평탄화"""
    flat: list[DiscoveredResource] = []
    stack: list[StackTreeNode] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        flat.append(node.resource)
        if isinstance(node, NestedStack):
            stack.extend(reversed(node.children))
    return flat


# =============================================================================
# 결과
# =============================================================================


@dataclass
class TableStats:
    """테이블별 매칭 통계"""

    total: int = 0
    matched: int = 0

    @property
    def residual(self) -> int:
        return self.total - self.matched


@dataclass
class ReconcileStats:
    """재조정 실행 통계"""

    stacks: int = 0
    discovered: int = 0
    unmatched: int = 0
    stacks_in_catalog: int = 0
    catalog: TableStats = field(default_factory=TableStats)
    roles: TableStats = field(default_factory=TableStats)
    log_groups: TableStats = field(default_factory=TableStats)


@dataclass
class ReportSection:
    """리포트 섹션 (마커 + 데이터 행)"""

    key: str
    title: str
    rows: list[list[str]] = field(default_factory=list)

    def marker_row(self) -> list[str]:
        return [self.key, self.title]


@dataclass
class ReportSections:
    """재조정 결과 전체

    iter_rows()는 헤더, 각 섹션의 마커 행과 데이터 행을 출력 순서대로 반환합니다.
    """

    sections: list[ReportSection] = field(default_factory=list)
    stats: ReconcileStats = field(default_factory=ReconcileStats)
    header: tuple[str, ...] = REPORT_HEADER

    def section(self, key: str) -> ReportSection:
        for s in self.sections:
            if s.key == key:
                return s
        raise KeyError(key)

    def iter_rows(self):
        yield list(self.header)
        for s in self.sections:
            yield s.marker_row()
            yield from s.rows
