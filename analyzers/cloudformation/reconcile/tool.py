"""
analyzers/cloudformation/reconcile/tool.py - 재조정 실행

실행 순서:
    1. 카탈로그 CSV 로드 (실패 시 API 호출 전에 중단)
    2. IAM Role / Log Group 수집을 워커 스레드에 제출
    3. 호출 스레드에서 루트 Stack 목록 조회
    4. join 배리어: 세 작업 중 하나라도 실패하면 CollectionError
    5. 재조정 + 출력 (섹션 a → b → c → d)

출력 도중 실패하면 CSV 파일이 잘린 채로 남을 수 있습니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.console import Console

from core.config import DEFAULT_MAX_DEPTH, DEFAULT_MAX_PAGES, DEFAULT_MAX_RETRIES
from core.exceptions import CollectionError, ValidationError
from core.parallel import ParallelConfig, ParallelTaskExecutor, RetryConfig, run_with_retry
from shared.io import OutputConfig, OutputFormat
from shared.io.output import ConsoleReportWriter, CsvReportWriter, JsonReportWriter, MultiSink, ReportSink

from .catalog import load_catalog
from .collectors import IamRoleSource, LogGroupSource, collect_log_groups, collect_roles
from .engine import ReconciliationEngine
from .stacks import CloudFormationStackSource, StackTreeWalker
from .types import REPORT_HEADER, ReportSections

logger = logging.getLogger(__name__)

ROLES_TASK = "iam_roles"
LOG_GROUPS_TASK = "log_groups"
ROOT_STACKS_TASK = "root_stacks"


@dataclass
class ReconcileConfig:
    """순회 한계 및 재시도 설정

    Attributes:
        max_depth: 중첩 Stack 최대 깊이
        max_pages: list_stacks 최대 페이지 수
        max_retries: 수집 작업 재시도 횟수 (0이면 재시도 안함)
        max_workers: 수집기 워커 스레드 수
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages: int = DEFAULT_MAX_PAGES
    max_retries: int = DEFAULT_MAX_RETRIES
    max_workers: int = 2

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValidationError("max_depth", self.max_depth, ">= 0")
        if self.max_pages < 1:
            raise ValidationError("max_pages", self.max_pages, ">= 1")
        if self.max_retries < 0:
            raise ValidationError("max_retries", self.max_retries, ">= 0")
        if self.max_workers < 1:
            raise ValidationError("max_workers", self.max_workers, ">= 1")

    @property
    def retry_config(self) -> RetryConfig:
        return RetryConfig(max_retries=self.max_retries)


@dataclass
class ReconcileSources:
    """API 어댑터 묶음 (테스트에서 교체 가능)"""

    stacks: Any
    roles: Any
    log_groups: Any

    @classmethod
    def from_session(cls, session, region: str) -> ReconcileSources:
        return cls(
            stacks=CloudFormationStackSource.from_session(session, region),
            roles=IamRoleSource.from_session(session, region),
            log_groups=LogGroupSource.from_session(session, region),
        )


@dataclass
class ReconcileRun:
    """실행 결과

    Attributes:
        report: 섹션별 행과 통계
        outputs: 생성된 출력 파일 경로
    """

    report: ReportSections
    outputs: list[str] = field(default_factory=list)


def build_sink(output: OutputConfig, console: Console | None = None) -> tuple[ReportSink, list[str]]:
    """출력 설정에 맞는 출력기 생성

    Returns:
        (출력기, 출력 파일 경로 목록)
    """
    sinks: list[ReportSink] = []
    paths: list[str] = []

    try:
        if output.should_output_csv():
            path = output.path_for(OutputFormat.CSV)
            sinks.append(CsvReportWriter(path, REPORT_HEADER))
            paths.append(path)
        if output.should_output_json():
            path = output.path_for(OutputFormat.JSON)
            sinks.append(JsonReportWriter(path, REPORT_HEADER))
            paths.append(path)
        if output.should_output_console():
            sinks.append(ConsoleReportWriter(console or Console(), REPORT_HEADER))
    except OSError:
        # 이미 연 파일은 닫고 전파
        MultiSink(sinks).close()
        raise

    if len(sinks) == 1:
        return sinks[0], paths
    return MultiSink(sinks), paths


def run_reconciliation(
    sources: ReconcileSources,
    csvfile: str | Path,
    output: OutputConfig,
    config: ReconcileConfig | None = None,
    region: str = "",
    console: Console | None = None,
) -> ReconcileRun:
    """재조정 전체 실행

    Args:
        sources: CloudFormation / IAM / Logs 어댑터
        csvfile: 카탈로그 CSV 경로
        output: 출력 설정
        config: 순회 한계/재시도 설정
        region: 로그 표시용 리전
        console: 콘솔 출력용 Rich Console

    Returns:
        ReconcileRun

    Raises:
        ConfigError: 카탈로그를 읽을 수 없는 경우
        CollectionError: 수집 단계 실패
        StackTraversalError / APICallError: Stack 리소스 확장 실패
    """
    config = config or ReconcileConfig()
    retry = config.retry_config

    catalog = load_catalog(csvfile)

    walker = StackTreeWalker(
        sources.stacks,
        max_depth=config.max_depth,
        max_pages=config.max_pages,
        retry_config=retry,
        region=region,
    )

    executor = ParallelTaskExecutor(ParallelConfig(max_workers=config.max_workers, retry_config=retry), region=region)
    pending = executor.submit(
        {
            ROLES_TASK: lambda: collect_roles(sources.roles),
            LOG_GROUPS_TASK: lambda: collect_log_groups(sources.log_groups),
        }
    )
    try:
        stacks_result = run_with_retry(walker.list_root_stacks, ROOT_STACKS_TASK, region=region, retry_config=retry)
    finally:
        collected = pending.join()

    errors = collected.get_errors()
    if stacks_result.error is not None:
        errors.append(stacks_result.error)
    if errors:
        for error in errors:
            logger.error(f"수집 실패: {error}")
        raise CollectionError(errors)

    tables = {name: collected.get(name).data for name in (ROLES_TASK, LOG_GROUPS_TASK)}
    stacks = stacks_result.data or []
    logger.info(
        f"수집 완료: 루트 Stack {len(stacks)}개, Role {len(tables[ROLES_TASK])}개, "
        f"Log Group {len(tables[LOG_GROUPS_TASK])}개, 카탈로그 {len(catalog)}개"
    )

    sink, paths = build_sink(output, console)
    engine = ReconciliationEngine(walker, sink=sink)
    try:
        report = engine.reconcile(stacks, catalog, tables[ROLES_TASK], tables[LOG_GROUPS_TASK])
    except Exception:
        if paths:
            logger.warning(f"재조정 중 오류 발생. 출력 파일이 불완전할 수 있습니다: {', '.join(paths)}")
        raise
    finally:
        sink.close()

    return ReconcileRun(report=report, outputs=paths)
