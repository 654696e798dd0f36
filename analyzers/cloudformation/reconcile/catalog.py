"""
analyzers/cloudformation/reconcile/catalog.py - 레코드 테이블 (카탈로그 인덱스)

레코드를 삽입 순서대로 보관하는 arena와 생존(live) 플래그로 구성됩니다.
삭제는 위치 기반으로 플래그만 내리므로 O(1)이며, 순회 중 삭제해도
인덱스가 어긋나지 않습니다.

매칭 규칙:
    1. 검색 키가 ARN 형식이면 접두부(arn:partition:service:region:account:)를
       제거하고 리소스 경로만 남깁니다.
    2. 남은 경로가 stack/<name>/<suffix> 형식이면 <name>/<suffix>로 줄입니다.
    3. 레코드 identifier가 키와 같거나, 키를 정규식으로 보고 identifier 안에서
       찾아지면 일치합니다.
    4. 삽입 순서상 첫 번째 생존 레코드를 반환합니다 (위치 기준 tie-break).

Usage:
    catalog = load_catalog("resources.csv")
    match = catalog.search("arn:aws:cloudformation:us-east-1:123456789012:stack/net/abc")
    if match:
        catalog.remove(match)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Generic, TypeVar

from core.exceptions import ConfigError, RecordAlreadyConsumedError
from shared.io.csv import read_csv_rows

from .types import CatalogRecord

logger = logging.getLogger(__name__)

R = TypeVar("R")

_ARN_PATTERN = re.compile(r"^arn:.+$")
_ARN_PREFIX = re.compile(r"^arn:[^:]*:[^:]*:[^:]*:[^:]*:(?P<resource>.*)$", re.DOTALL)
_STACK_PATH = re.compile(r"^stack/")

# 헤더 행으로 간주하는 0번 컬럼 값 (대소문자 무시)
_HEADER_CELLS = frozenset({"identifier", "arn", "resource id", "arn/resource id", "resource arn", "id"})


def normalize_identifier(key: str) -> str:
    """검색 키 정규화

    Examples:
        >>> normalize_identifier("arn:aws:cloudformation:us-east-1:123456789012:stack/my-stack/abcdef")
        'my-stack/abcdef'
        >>> normalize_identifier("my-stack/abcdef")
        'my-stack/abcdef'
        >>> normalize_identifier("arn:aws:iam::123456789012:role/app-role")
        'role/app-role'
    """
    if not _ARN_PATTERN.match(key):
        return key

    m = _ARN_PREFIX.match(key)
    # 필드가 모자란 ARN은 마지막 콜론 뒤 조각만 사용
    resource = m.group("resource") if m else key.rsplit(":", 1)[-1]

    if _STACK_PATH.match(resource):
        parts = resource.split("/")
        if len(parts) >= 3:
            resource = f"{parts[-2]}/{parts[-1]}"

    return resource


@lru_cache(maxsize=4096)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def identifier_matches(key: str, identifier: str) -> bool:
    """정규화된 키가 identifier와 일치하는지 확인

    정확히 같거나, 키를 정규식으로 보고 identifier 안에서 찾아지면 True.
    잘못된 정규식은 일치 없음으로 처리합니다.
    """
    if identifier == key:
        return True
    if not key:
        return False
    pattern = _compile(key)
    if pattern is None:
        # 캐시된 컴파일 실패도 조회마다 기록
        logger.debug(f"정규식으로 사용할 수 없는 키 (일치 없음 처리): {key!r}")
        return False
    return pattern.search(identifier) is not None


@dataclass(frozen=True)
class Match(Generic[R]):
    """검색 결과

    Attributes:
        record: 일치한 레코드
        table: 레코드를 소유한 테이블
        position: 테이블 arena 내 위치
    """

    record: R
    table: RecordTable[R]
    position: int

    def consume(self) -> R:
        """레코드를 소유 테이블에서 제거하고 반환"""
        self.table.remove(self)
        return self.record


class RecordTable(Generic[R]):
    """삽입 순서를 유지하는 가변 레코드 테이블

    Attributes:
        name: 테이블 이름 (로그/리포트용)
    """

    def __init__(self, name: str, records: Iterable[R] = ()):
        self.name = name
        self._records: list[R] = list(records)
        self._live: list[bool] = [True] * len(self._records)
        self._live_count = len(self._records)

    def __len__(self) -> int:
        """생존 레코드 수"""
        return self._live_count

    def __iter__(self) -> Iterator[R]:
        return self.remaining()

    def __repr__(self) -> str:
        return f"RecordTable({self.name!r}, live={self._live_count}, size={self.size})"

    @property
    def size(self) -> int:
        """생성 시점 전체 레코드 수"""
        return len(self._records)

    def append(self, record: R) -> None:
        self._records.append(record)
        self._live.append(True)
        self._live_count += 1

    def search(self, key: str) -> Match[R] | None:
        """첫 번째 일치 생존 레코드 검색

        Args:
            key: ARN 또는 리소스 식별자 (정규화 전)

        Returns:
            Match 또는 None
        """
        normalized = normalize_identifier(key)
        for position, record in enumerate(self._records):
            if not self._live[position]:
                continue
            if identifier_matches(normalized, self._identifier_of(record)):
                logger.debug(f"[{self.name}] 일치: {normalized} -> #{position}")
                return Match(record=record, table=self, position=position)

        logger.debug(f"[{self.name}] 일치 없음: {normalized}")
        return None

    def remove(self, match: Match[R]) -> None:
        """검색 결과 위치의 레코드 제거 (재검색 없음)

        Raises:
            ValueError: 다른 테이블의 Match인 경우
            RecordAlreadyConsumedError: 이미 제거된 위치인 경우
        """
        if match.table is not self:
            raise ValueError(f"Match belongs to table {match.table.name!r}, not {self.name!r}")
        if not self._live[match.position]:
            raise RecordAlreadyConsumedError(self.name, match.position)
        self._live[match.position] = False
        self._live_count -= 1
        logger.debug(f"[{self.name}] 레코드 소비: #{match.position}")

    def remaining(self) -> Iterator[R]:
        """생존 레코드 (삽입 순서)"""
        for position, record in enumerate(self._records):
            if self._live[position]:
                yield record

    @staticmethod
    def _identifier_of(record: R) -> str:
        return getattr(record, "identifier", "")


class CatalogIndex(RecordTable[CatalogRecord]):
    """CSV 카탈로그 인덱스"""

    def __init__(self, records: Iterable[CatalogRecord] = ()):
        super().__init__("catalog", records)

    @classmethod
    def from_rows(cls, rows: Iterable[list[str]], skip_header: bool = True) -> CatalogIndex:
        """CSV 행 목록에서 생성

        Args:
            rows: CSV 행 목록
            skip_header: True이면 첫 행이 헤더처럼 보일 때 건너뜀
        """
        records: list[CatalogRecord] = []
        for i, row in enumerate(rows):
            if not row or not row[0].strip():
                continue
            if i == 0 and skip_header and row[0].strip().lower() in _HEADER_CELLS:
                logger.debug(f"카탈로그 헤더 행 건너뜀: {row}")
                continue
            records.append(CatalogRecord.from_row(row))
        return cls(records)


def load_catalog(path: str | Path, encoding: str | None = None) -> CatalogIndex:
    """카탈로그 CSV 로드

    Args:
        path: CSV 파일 경로
        encoding: 인코딩 (None이면 자동 감지)

    Returns:
        CatalogIndex

    Raises:
        ConfigError: 파일을 읽을 수 없는 경우
    """
    file_path = Path(path)
    if file_path.is_file() and file_path.stat().st_size == 0:
        logger.warning(f"카탈로그 파일이 비어 있습니다: {path}")
        return CatalogIndex()

    rows, detected, error = read_csv_rows(file_path, encoding=encoding)
    if error or rows is None:
        raise ConfigError("csvfile", error or f"CSV 파일을 읽을 수 없습니다: {path}")

    catalog = CatalogIndex.from_rows(rows)
    logger.info(f"카탈로그 로드 완료: {len(catalog)}개 레코드 ({path}, {detected})")
    return catalog
