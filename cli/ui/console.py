"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 프로세스 단위 로깅 설정을 위한 함수들
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.tree import Tree

from cli.i18n import t

if TYPE_CHECKING:
    from analyzers.cloudformation.reconcile.types import ReconcileStats
    from core.parallel import TaskError

# botocore 노이즈 로그 제한
_NOISY_LOGGERS = (
    "botocore",
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "urllib3",
)


def get_console() -> Console:
    """프로세스 공용 Console 생성 (Windows 콘솔은 이모지 코드 해석 끔)"""
    return Console(soft_wrap=True, emoji=platform.system() != "Windows")


console = get_console()


def setup_logging(debug: bool = False, quiet: bool = False) -> RichHandler:
    """프로세스 전체 로깅 설정 (CLI 시작 시 한 번)

    기본은 WARNING, --debug이면 DEBUG, --quiet이면 ERROR만 출력합니다.

    Returns:
        루트 logger에 연결된 RichHandler
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(console=console, rich_tracebacks=True, show_path=debug)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler


@contextmanager
def logging_session(debug: bool = False, quiet: bool = False) -> Iterator[RichHandler]:
    """로깅 설정 후 종료 시 핸들러를 flush하고 분리"""
    handler = setup_logging(debug=debug, quiet=quiet)
    try:
        yield handler
    finally:
        handler.flush()
        logging.getLogger().removeHandler(handler)
        handler.close()


# =============================================================================
# 상태 메시지 (기호 + 색상, 이모지 없음)
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"


def _status(style: str, symbol: str, message: str) -> None:
    console.print(f"{symbol} {escape(message)}", style=style)


def print_success(message: str) -> None:
    _status("green", SYMBOL_SUCCESS, message)


def print_error(message: str) -> None:
    _status("red", SYMBOL_ERROR, message)


def print_warning(message: str) -> None:
    _status("yellow", SYMBOL_WARNING, message)


def print_info(message: str) -> None:
    _status("blue", SYMBOL_INFO, message)


# =============================================================================
# 도구 실행 UI 컴포넌트
# =============================================================================


def print_execution_summary(profile: str | None, region: str, csvfile: str, output: str) -> None:
    """실행 요약 박스 출력

    Args:
        profile: 프로파일 이름 (없으면 기본 자격 증명 체인)
        region: 리전
        csvfile: 카탈로그 CSV 경로
        output: 출력 파일 경로
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", width=12)
    table.add_column()
    table.add_row(t("cli.summary_profile"), profile or t("cli.summary_default_chain"))
    table.add_row(t("cli.summary_region"), region)
    table.add_row(t("cli.summary_catalog"), csvfile)
    table.add_row(t("cli.summary_output"), output)
    console.print(Panel(table, title=t("cli.summary_title"), border_style="#FF9900"))


def print_tool_complete(message: str | None = None, elapsed: float | None = None) -> None:
    """구분선 아래에 완료 메시지와 (있으면) 소요 시간(초) 출력"""
    suffix = f" [dim]({elapsed:.1f}s)[/dim]" if elapsed else ""
    console.print()
    console.print(Rule(style="dim"))
    console.print(f"[green]* {escape(message or t('cli.completed'))}[/green]{suffix}")


def print_reconcile_stats(stats: ReconcileStats) -> None:
    """재조정 통계를 트리로 출력"""
    tree = Tree(f"[bold]{t('cli.stats_title')}[/bold]")

    stacks = tree.add(f"[cyan]{t('cli.stats_stacks')}[/cyan]")
    stacks.add(f"{t('cli.stats_root_stacks')}: {stats.stacks}")
    stacks.add(f"{t('cli.stats_discovered')}: {stats.discovered}")
    stacks.add(f"[yellow]{t('cli.stats_unmatched')}: {stats.unmatched}[/yellow]")

    for label, table_stats in (
        (t("cli.stats_catalog"), stats.catalog),
        (t("cli.stats_roles"), stats.roles),
        (t("cli.stats_log_groups"), stats.log_groups),
    ):
        branch = tree.add(f"[cyan]{label}[/cyan]")
        branch.add(f"[green]{t('cli.stats_matched')}: {table_stats.matched}[/green]")
        branch.add(f"[red]{t('cli.stats_residual')}: {table_stats.residual}[/red]")

    console.print(tree)


def print_error_tree(errors: list[TaskError], title: str | None = None) -> None:
    """수집 실패를 소스별 트리로 출력

    Example:
        print_error_tree(collection_error.errors)
    """
    tree = Tree(f"[bold yellow]{title or t('cli.error_summary')}[/bold yellow]")
    for error in errors:
        branch = tree.add(f"[red]{error.identifier}[/red] ({escape(error.error_code)})")
        branch.add(f"[dim]{escape(error.message)}[/dim]")
    console.print(tree)
