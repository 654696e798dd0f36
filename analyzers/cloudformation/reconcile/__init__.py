"""
analyzers/cloudformation/reconcile - CloudFormation 인벤토리 재조정

라이브 AWS 리소스(CloudFormation Stack 트리, IAM Role, CloudWatch Log Group)를
Tag Editor 등에서 내보낸 카탈로그 CSV와 대조하여, 각 카탈로그 항목이 어느
Stack에 속하는지와 어디에도 속하지 않는 항목을 보고합니다.

구성 요소:
- catalog: 레코드 테이블 (검색 + 위치 기반 소비)
- collectors: IAM Role / Log Group 수집기
- stacks: 루트 Stack 조회 및 중첩 Stack 트리 확장
- engine: 재조정 엔진 (카탈로그 → Role → Log Group 순서)
- tool: 전체 실행 (병렬 수집 → join → 재조정 → 출력)
"""

from .catalog import CatalogIndex, Match, RecordTable, identifier_matches, load_catalog, normalize_identifier
from .collectors import IamRoleSource, LogGroupSource, collect_log_groups, collect_roles
from .engine import ReconciliationEngine
from .stacks import CloudFormationStackSource, StackTreeWalker, is_nested_stack_arn
from .tool import ReconcileConfig, ReconcileRun, ReconcileSources, build_sink, run_reconciliation
from .types import (
    REPORT_HEADER,
    SECTION_TITLES,
    AuxiliaryRecord,
    CatalogRecord,
    DiscoveredResource,
    Leaf,
    NestedStack,
    ReconcileStats,
    ReportSections,
    StackNode,
    flatten_tree,
)

__all__: list[str] = [
    # Catalog
    "CatalogIndex",
    "Match",
    "RecordTable",
    "identifier_matches",
    "load_catalog",
    "normalize_identifier",
    # Collectors
    "IamRoleSource",
    "LogGroupSource",
    "collect_roles",
    "collect_log_groups",
    # Stacks
    "CloudFormationStackSource",
    "StackTreeWalker",
    "is_nested_stack_arn",
    # Engine
    "ReconciliationEngine",
    # Tool
    "ReconcileConfig",
    "ReconcileRun",
    "ReconcileSources",
    "build_sink",
    "run_reconciliation",
    # Types
    "REPORT_HEADER",
    "SECTION_TITLES",
    "AuxiliaryRecord",
    "CatalogRecord",
    "DiscoveredResource",
    "Leaf",
    "NestedStack",
    "ReconcileStats",
    "ReportSections",
    "StackNode",
    "flatten_tree",
]
