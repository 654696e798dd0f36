"""
cli/headless.py - Headless Runner

비대화형 실행 모드입니다. 하위 구성 요소는 에러를 값(TaskResult)이나
타입이 있는 예외로 돌려주고, 실행 중단 여부는 여기서만 결정합니다.

Usage:
    awsrecon -p my-profile -c resources.csv
    awsrecon -r us-east-1 -c resources.csv report.csv
    awsrecon -p my-profile -c resources.csv -f json report.json

종료 코드:
    0: 성공
    1: 설정 오류, 수집 실패, 재조정/출력 실패
    130: Ctrl+C
"""

from __future__ import annotations

import logging
import time
import traceback
from collections.abc import Callable
from dataclasses import dataclass

from cli.i18n import set_lang, t
from cli.ui.console import (
    console,
    print_error,
    print_error_tree,
    print_execution_summary,
    print_info,
    print_reconcile_stats,
    print_success,
    print_tool_complete,
    print_warning,
)
from core.auth import get_session, resolve_region
from core.config import DEFAULT_MAX_DEPTH, DEFAULT_MAX_PAGES, DEFAULT_MAX_RETRIES, DEFAULT_OUTPUT_FILE
from core.exceptions import CollectionError, ConfigError, ReconError, format_error_for_user
from shared.io import OutputConfig

logger = logging.getLogger(__name__)


@dataclass
class HeadlessConfig:
    """Headless 실행 설정"""

    # 인증 (profile 또는 region 중 하나 이상)
    profile: str | None = None
    region: str | None = None

    # 입력
    csvfile: str | None = None

    # 출력
    output: str = DEFAULT_OUTPUT_FILE
    format: str = "csv"  # csv, json, console, all

    # 순회 한계 / 재시도
    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages: int = DEFAULT_MAX_PAGES
    max_retries: int = DEFAULT_MAX_RETRIES

    quiet: bool = False
    debug: bool = False
    lang: str = "ko"


class HeadlessRunner:
    """Headless Runner

    Args:
        config: 실행 설정
        sources_factory: (session, region) -> ReconcileSources. None이면 boto3 어댑터 사용
    """

    def __init__(self, config: HeadlessConfig, sources_factory: Callable | None = None):
        self.config = config
        self._sources_factory = sources_factory

    def run(self) -> int:
        """Headless 실행

        Returns:
            0: 성공, 1: 실패, 130: 취소
        """
        set_lang(self.config.lang)
        try:
            return self._execute()

        except KeyboardInterrupt:
            if not self.config.quiet:
                console.print(f"\n[dim]{t('cli.cancelled')}[/dim]")
            return 130
        except CollectionError as e:
            print_error(format_error_for_user(e))
            print_error_tree(e.errors)
            return 1
        except ReconError as e:
            logger.debug(f"실행 실패: {e.to_dict()}")
            print_error(format_error_for_user(e))
            self._print_traceback()
            return 1
        except Exception as e:
            print_error(t("cli.error_label", message=format_error_for_user(e)))
            self._print_traceback()
            return 1

    def _execute(self) -> int:
        from analyzers.cloudformation.reconcile import ReconcileConfig, ReconcileSources, run_reconciliation

        cfg = self.config
        if not cfg.csvfile:
            raise ConfigError("csvfile", t("cli.csvfile_required"))

        reconcile_config = ReconcileConfig(
            max_depth=cfg.max_depth,
            max_pages=cfg.max_pages,
            max_retries=cfg.max_retries,
        )
        output = OutputConfig.from_string(cfg.format, output_path=cfg.output, lang=cfg.lang)

        session = get_session(cfg.profile, cfg.region)
        region = resolve_region(session, cfg.region)

        if not cfg.quiet:
            print_execution_summary(cfg.profile, region, cfg.csvfile, cfg.output)
            print_info(t("cli.collecting"))

        factory = self._sources_factory or ReconcileSources.from_session
        sources = factory(session, region)

        start = time.monotonic()
        run = run_reconciliation(
            sources,
            cfg.csvfile,
            output,
            reconcile_config,
            region=region,
            console=console,
        )
        elapsed = time.monotonic() - start
        logger.debug(f"재조정 실행 시간: {elapsed:.2f}s")

        if run.report.stats.stacks == 0:
            print_warning(t("cli.no_stacks"))
        if not cfg.quiet:
            print_reconcile_stats(run.report.stats)
        for path in run.outputs:
            print_success(t("cli.saved", path=path))
        if not cfg.quiet:
            print_tool_complete(elapsed=elapsed)

        return 0

    def _print_traceback(self) -> None:
        if self.config.debug:
            console.print(traceback.format_exc(), markup=False, highlight=False)


def run_headless(config: HeadlessConfig) -> int:
    """Headless 실행 진입점

    Returns:
        종료 코드
    """
    return HeadlessRunner(config).run()
