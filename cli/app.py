"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 awsrecon 명령입니다.

명령어 구조:
    awsrecon -p <profile> -c <catalog.csv> [OUTPUT]
    awsrecon -r <region> -c <catalog.csv> [OUTPUT]
    awsrecon --version

    인자 없이 실행하면 사용법을 출력하고 종료 코드 1로 끝납니다.

Usage:
    $ awsrecon -p my-profile -c resources.csv
    $ awsrecon -p my-profile -r us-east-1 -c resources.csv report.csv
    $ awsrecon -p my-profile -c resources.csv -f all report

    # 모듈로 실행
    $ python -m cli.app
"""

from __future__ import annotations

import click
from click import Context

from cli.i18n import t
from core.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PAGES,
    DEFAULT_MAX_RETRIES,
    DEFAULT_OUTPUT_FILE,
    get_version,
)

VERSION = get_version()


class ReconcileCommand(click.Command):
    """인자가 없으면 사용법 출력 후 종료 코드 1로 끝나는 명령"""

    def parse_args(self, ctx: Context, args: list[str]) -> list[str]:
        if not args:
            click.echo(self.get_usage(ctx), err=True)
            click.echo(t("cli.no_args_hint"), err=True)
            ctx.exit(1)
        return super().parse_args(ctx, args)


@click.command(cls=ReconcileCommand, help=t("cli.help_intro"))
@click.version_option(VERSION, prog_name="awsrecon")
@click.option("-p", "--profile", default=None, help=t("cli.help_profile"))
@click.option("-r", "--region", default=None, help=t("cli.help_region"))
@click.option("-c", "--csvfile", default=None, help=t("cli.help_csvfile"))
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["csv", "json", "console", "all"]),
    default="csv",
    show_default=True,
    help=t("cli.help_format"),
)
@click.option(
    "--max-depth", type=click.IntRange(min=0), default=DEFAULT_MAX_DEPTH, show_default=True, help=t("cli.help_max_depth")
)
@click.option(
    "--max-pages", type=click.IntRange(min=1), default=DEFAULT_MAX_PAGES, show_default=True, help=t("cli.help_max_pages")
)
@click.option(
    "--retries", type=click.IntRange(min=0), default=DEFAULT_MAX_RETRIES, show_default=True, help=t("cli.help_retries")
)
@click.option("--debug", is_flag=True, help=t("cli.help_debug"))
@click.option("-q", "--quiet", is_flag=True, help=t("cli.help_quiet"))
@click.option(
    "--lang",
    type=click.Choice(["ko", "en"]),
    default="ko",
    help=t("cli.help_lang"),
)
@click.argument("output", required=False, default=DEFAULT_OUTPUT_FILE)
def cli(
    profile: str | None,
    region: str | None,
    csvfile: str | None,
    output_format: str,
    max_depth: int,
    max_pages: int,
    retries: int,
    debug: bool,
    quiet: bool,
    lang: str,
    output: str,
) -> None:
    """awsrecon - CloudFormation 인벤토리 재조정"""
    from cli.headless import HeadlessConfig, run_headless
    from cli.ui.console import logging_session

    config = HeadlessConfig(
        profile=profile,
        region=region,
        csvfile=csvfile,
        output=output,
        format=output_format,
        max_depth=max_depth,
        max_pages=max_pages,
        max_retries=retries,
        quiet=quiet,
        debug=debug,
        lang=lang,
    )

    with logging_session(debug=debug, quiet=quiet):
        exit_code = run_headless(config)

    raise SystemExit(exit_code)


if __name__ == "__main__":
    cli()
