"""
analyzers/cloudformation/reconcile/engine.py - 재조정 엔진

발견한 리소스마다 카탈로그 → IAM Role → Log Group 순서로 검색하고,
처음 일치한 레코드를 즉시 소비(삭제)합니다. 한 레코드는 최대 한 번만
리소스에 연결되며, 끝까지 남은 레코드는 잔여 섹션(b/c/d)으로 출력됩니다.

번호 규칙:
    - 루트 Stack: s (1부터)
    - 일치한 리소스: "s.n" (n은 해당 Stack에서 일치한 순서, 일치할 때만 증가)
    - 일치하지 않은 리소스: "s.p" (p는 Stack 트리 내 위치, 1부터)
    - 잔여 섹션: 섹션마다 1부터

엔진은 단일 스레드에서 동작하며, 입력 테이블의 소유권을 넘겨받습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from shared.io.output import ReportSink

from .catalog import Match, RecordTable
from .types import (
    REPORT_HEADER,
    SECTION_CATALOG,
    SECTION_LOG_GROUPS,
    SECTION_ROLES,
    SECTION_STACKS,
    SECTION_TITLES,
    AuxiliaryRecord,
    CatalogRecord,
    DiscoveredResource,
    ReconcileStats,
    Record,
    ReportSection,
    ReportSections,
    StackNode,
    TableStats,
    flatten_tree,
)

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """카탈로그/보조 인벤토리 재조정 엔진

    Args:
        walker: expand(stack_id)를 제공하는 Stack 트리 탐색기
        sink: 행 단위 출력기 (None이면 메모리에만 보관)

    Example:
        engine = ReconciliationEngine(walker, sink=writer)
        report = engine.reconcile(stacks, catalog, roles, log_groups)
        print(report.stats.catalog.matched)
    """

    def __init__(self, walker: Any, sink: ReportSink | None = None):
        self.walker = walker
        self.sink = sink
        self._report = ReportSections()

    def reconcile(
        self,
        stacks: Sequence[StackNode],
        catalog: RecordTable[CatalogRecord],
        roles: RecordTable[AuxiliaryRecord],
        log_groups: RecordTable[AuxiliaryRecord],
    ) -> ReportSections:
        """재조정 실행

        Args:
            stacks: 루트 Stack 목록 (조회 순서)
            catalog: 카탈로그 테이블
            roles: IAM Role 테이블
            log_groups: Log Group 테이블

        Returns:
            ReportSections: 섹션별 행과 통계
        """
        self._report = ReportSections(header=REPORT_HEADER)
        stats = self._report.stats
        stats.catalog = TableStats(total=len(catalog))
        stats.roles = TableStats(total=len(roles))
        stats.log_groups = TableStats(total=len(log_groups))
        stats.stacks = len(stacks)

        # 우선순위: 카탈로그 > IAM Role > Log Group
        tables: list[tuple[RecordTable[Any], TableStats]] = [
            (catalog, stats.catalog),
            (roles, stats.roles),
            (log_groups, stats.log_groups),
        ]

        self._begin(SECTION_STACKS)
        for s, stack in enumerate(stacks, start=1):
            self._reconcile_stack(s, stack, catalog, tables)

        self._emit_residual(SECTION_CATALOG, catalog)
        self._emit_residual(SECTION_ROLES, roles)
        self._emit_residual(SECTION_LOG_GROUPS, log_groups)

        logger.info(
            f"재조정 완료: Stack {stats.stacks}개, 리소스 {stats.discovered}개 "
            f"(미일치 {stats.unmatched}개), 잔여 카탈로그 {stats.catalog.residual}개, "
            f"잔여 Role {stats.roles.residual}개, 잔여 Log Group {stats.log_groups.residual}개"
        )
        return self._report

    def _reconcile_stack(
        self,
        s: int,
        stack: StackNode,
        catalog: RecordTable[CatalogRecord],
        tables: list[tuple[RecordTable[Any], TableStats]],
    ) -> None:
        stats = self._report.stats

        # 루트 Stack 자체는 카탈로그에서만 찾음
        match = catalog.search(stack.stack_id)
        if match is not None:
            record = match.consume()
            stats.catalog.matched += 1
            stats.stacks_in_catalog += 1
            self._write([str(s), stack.stack_id, "", *record.descriptive_fields()])
        else:
            self._write([str(s), stack.stack_id, "", "", "", "", ""])

        resources = flatten_tree(self.walker.expand(stack.stack_id))
        logger.debug(f"[{s}] {stack.stack_name or stack.stack_id}: 리소스 {len(resources)}개")

        n = 1
        for p, resource in enumerate(resources, start=1):
            stats.discovered += 1
            found = self._lookup(resource, tables)
            if found is None:
                stats.unmatched += 1
                self._write([f"{s}.{p}", resource.physical_id, resource.logical_id, "", "", "", ""])
                continue

            record = found.consume()
            self._write([f"{s}.{n}", resource.physical_id, resource.logical_id, *record.descriptive_fields()])
            n += 1

    @staticmethod
    def _lookup(
        resource: DiscoveredResource,
        tables: list[tuple[RecordTable[Any], TableStats]],
    ) -> Match[Record] | None:
        for table, table_stats in tables:
            match = table.search(resource.physical_id)
            if match is not None:
                table_stats.matched += 1
                return match
        return None

    def _emit_residual(self, key: str, table: RecordTable[Any]) -> None:
        self._begin(key)
        for i, record in enumerate(table.remaining(), start=1):
            self._write(record.residual_row(i))

    def _begin(self, key: str) -> None:
        section = ReportSection(key=key, title=SECTION_TITLES[key])
        self._report.sections.append(section)
        if self.sink is not None:
            self.sink.begin_section(section.key, section.title)

    def _write(self, row: list[str]) -> None:
        self._report.sections[-1].rows.append(row)
        if self.sink is not None:
            self.sink.write_row(row)
