"""awsrecon 콘솔 스크립트 진입점"""

from __future__ import annotations

from cli.app import cli


def main(argv: list[str] | None = None) -> None:
    """awsrecon 실행. 종료 코드는 SystemExit으로 전달됩니다."""
    cli.main(args=argv, prog_name="awsrecon")


if __name__ == "__main__":
    main()
