"""섹션 단위 리포트 출력기

리포트는 헤더 행 1개와 여러 섹션으로 구성됩니다. 각 섹션은
마커 행 [key, title]로 시작하고 그 뒤에 데이터 행들이 이어집니다.

출력기는 모두 같은 인터페이스(ReportSink)를 구현합니다:
    - begin_section(key, title): 새 섹션 시작
    - write_row(row): 현재 섹션에 데이터 행 추가
    - close(): 남은 내용 기록 및 자원 해제

CsvReportWriter는 행마다 flush하므로 실행이 중간에 실패하면
잘린 파일이 남을 수 있습니다. 비정상 종료 시의 파일은 신뢰하지 마세요.

Usage:
    with CsvReportWriter("out.csv", header=HEADER) as writer:
        writer.begin_section("a", "Resources")
        writer.write_row(["1", "arn:...", "", "name", "svc", "type", "region"])
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

logger = logging.getLogger(__name__)


class ReportSink(Protocol):
    """섹션 단위 리포트 출력 인터페이스"""

    def begin_section(self, key: str, title: str) -> None: ...

    def write_row(self, row: Sequence[str]) -> None: ...

    def close(self) -> None: ...


class _SinkBase:
    """컨텍스트 매니저 지원 공통 베이스"""

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class CsvReportWriter(_SinkBase):
    """CSV 출력기 (행마다 flush)"""

    def __init__(self, path: str | Path, header: Sequence[str], encoding: str = "utf-8"):
        self.path = Path(path)
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", encoding=encoding, newline="")
        self._writer = csv.writer(self._file)
        self._rows_written = 0
        self._emit(header)

    @property
    def rows_written(self) -> int:
        """기록된 전체 행 수 (헤더/마커 포함)"""
        return self._rows_written

    def _emit(self, row: Sequence[str]) -> None:
        self._writer.writerow(list(row))
        self._file.flush()
        self._rows_written += 1

    def begin_section(self, key: str, title: str) -> None:
        self._emit([key, title])

    def write_row(self, row: Sequence[str]) -> None:
        self._emit(row)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
            logger.info(f"CSV 저장 완료: {self.path} ({self._rows_written}행)")


class _BufferedSink(_SinkBase):
    """섹션을 메모리에 모았다가 close()에서 한 번에 기록하는 출력기 베이스"""

    def __init__(self, header: Sequence[str]):
        self.header = list(header)
        self.sections: list[dict[str, Any]] = []
        self._closed = False

    def begin_section(self, key: str, title: str) -> None:
        self.sections.append({"key": key, "title": title, "rows": []})

    def write_row(self, row: Sequence[str]) -> None:
        if not self.sections:
            raise RuntimeError("begin_section() must be called before write_row()")
        self.sections[-1]["rows"].append(list(row))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._flush()

    def _flush(self) -> None:
        raise NotImplementedError


class JsonReportWriter(_BufferedSink):
    """JSON 출력기

    각 행은 헤더를 키로 하는 객체로 변환됩니다. 헤더보다 긴 행의
    초과 컬럼은 "extra" 배열에 담깁니다.
    """

    def __init__(self, path: str | Path, header: Sequence[str]):
        super().__init__(header)
        self.path = Path(path)

    def _row_to_dict(self, row: list[str]) -> dict[str, Any]:
        item: dict[str, Any] = dict(zip(self.header, row))
        if len(row) > len(self.header):
            item["extra"] = row[len(self.header) :]
        return item

    def _flush(self) -> None:
        payload = {
            "header": self.header,
            "sections": [
                {
                    "key": s["key"],
                    "title": s["title"],
                    "rows": [self._row_to_dict(r) for r in s["rows"]],
                }
                for s in self.sections
            ],
        }
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info(f"JSON 저장 완료: {self.path}")


class ConsoleReportWriter(_BufferedSink):
    """Rich 테이블 콘솔 출력기"""

    def __init__(self, console: Console, header: Sequence[str]):
        super().__init__(header)
        self.console = console

    def _flush(self) -> None:
        for section in self.sections:
            table = Table(title=escape(f"[{section['key']}] {section['title']}"), show_lines=False)
            for column in self.header:
                table.add_column(column, overflow="fold")
            for row in section["rows"]:
                cells = list(row[: len(self.header)])
                cells += [""] * (len(self.header) - len(cells))
                table.add_row(*(escape(c) for c in cells))
            self.console.print(table)


class MultiSink(_SinkBase):
    """여러 출력기에 같은 내용을 전달"""

    def __init__(self, sinks: Sequence[ReportSink]):
        self.sinks = list(sinks)

    def begin_section(self, key: str, title: str) -> None:
        for sink in self.sinks:
            sink.begin_section(key, title)

    def write_row(self, row: Sequence[str]) -> None:
        for sink in self.sinks:
            sink.write_row(row)

    def close(self) -> None:
        # 하나가 실패해도 나머지는 닫음
        first_error: Exception | None = None
        for sink in self.sinks:
            try:
                sink.close()
            except Exception as e:
                logger.error(f"출력기 종료 실패 ({type(sink).__name__}): {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
