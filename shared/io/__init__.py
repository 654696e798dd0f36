"""보고서 입출력

- shared.io.csv: 카탈로그 CSV 읽기 (인코딩 추정, 빈 행 제외)
- shared.io.output: 보고서 섹션 출력기 (CsvReportWriter, JsonReportWriter, ConsoleReportWriter, MultiSink)
- shared.io.config: 출력 형식/경로 (OutputConfig, OutputFormat)
"""

from .config import OutputConfig, OutputFormat

__all__ = ["OutputConfig", "OutputFormat"]
