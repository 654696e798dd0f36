"""
shared/io/output - 리포트 출력기

CSV(행 단위 flush), JSON, Rich 콘솔 테이블 출력을 같은
섹션 인터페이스(ReportSink)로 제공합니다.
"""

from .writers import (
    ConsoleReportWriter,
    CsvReportWriter,
    JsonReportWriter,
    MultiSink,
    ReportSink,
)

__all__: list[str] = [
    "ReportSink",
    "CsvReportWriter",
    "JsonReportWriter",
    "ConsoleReportWriter",
    "MultiSink",
]
