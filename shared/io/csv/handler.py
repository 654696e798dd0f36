"""CSV 파일 처리 (인코딩 자동 감지)

Resource Groups / Tag Editor에서 내보낸 CSV는 환경에 따라
UTF-8(BOM 포함), CP949 등 인코딩이 제각각이므로 우선순위대로 시도합니다.

읽기 규칙:
    - 필드 앞 공백 제거 (skipinitialspace)
    - 행마다 컬럼 수가 달라도 허용
    - 빈 행은 건너뜀

Usage:
    from shared.io.csv import read_csv_rows

    rows, encoding, error = read_csv_rows("resources.csv")
    if error:
        print(error)
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# 시도할 인코딩 우선순위 (latin-1은 항상 성공하므로 마지막)
ENCODING_PRIORITIES: list[str] = ["utf-8-sig", "utf-8", "cp949", "euc-kr", "latin-1"]

# 인코딩 감지에 사용할 최대 바이트 수
_SAMPLE_SIZE = 64 * 1024


def _check_path(file_path: str | Path) -> str | None:
    """파일 경로 검증. 문제가 있으면 에러 메시지 반환"""
    path = Path(file_path)
    if not path.exists():
        return f"파일을 찾을 수 없습니다: {file_path}"
    if path.is_dir():
        return f"파일이 아니라 디렉토리입니다: {file_path}"
    return None


def detect_csv_encoding(file_path: str | Path) -> tuple[str | None, str | None]:
    """CSV 파일 인코딩 감지

    Args:
        file_path: CSV 파일 경로

    Returns:
        (encoding, error) 튜플. 성공 시 error는 None
    """
    path_error = _check_path(file_path)
    if path_error:
        return None, path_error

    try:
        with open(file_path, "rb") as f:
            sample = f.read(_SAMPLE_SIZE)
    except PermissionError:
        return None, f"파일 읽기 권한이 없습니다: {file_path}"
    except OSError as e:
        return None, f"파일을 읽을 수 없습니다: {e}"

    if not sample:
        return None, f"빈 파일입니다: {file_path}"

    for encoding in ENCODING_PRIORITIES:
        try:
            sample.decode(encoding)
        except UnicodeDecodeError:
            # 샘플 끝에서 멀티바이트 문자가 잘린 경우는 허용
            if len(sample) == _SAMPLE_SIZE and encoding != "latin-1":
                try:
                    sample[:-3].decode(encoding)
                except UnicodeDecodeError:
                    continue
            else:
                continue
        except LookupError:
            continue
        logger.debug(f"인코딩 감지: {encoding} ({file_path})")
        return encoding, None

    return None, f"인코딩을 감지할 수 없습니다: {file_path}"


def read_csv_rows(
    file_path: str | Path,
    encoding: str | None = None,
    delimiter: str = ",",
) -> tuple[list[list[str]] | None, str | None, str | None]:
    """CSV 파일을 행 목록으로 읽기

    Args:
        file_path: CSV 파일 경로
        encoding: 인코딩 (None이면 자동 감지)
        delimiter: 구분자

    Returns:
        (rows, encoding, error) 튜플. 실패 시 rows와 encoding은 None
    """
    if encoding is None:
        encoding, error = detect_csv_encoding(file_path)
        if error:
            return None, None, error

    try:
        with open(file_path, encoding=encoding, newline="") as f:
            reader = csv.reader(f, delimiter=delimiter, skipinitialspace=True)
            rows = [row for row in reader if row and any(cell.strip() for cell in row)]
    except PermissionError:
        return None, None, f"파일 읽기 권한이 없습니다: {file_path}"
    except FileNotFoundError:
        return None, None, f"파일을 찾을 수 없습니다: {file_path}"
    except LookupError:
        return None, None, f"지원하지 않는 인코딩입니다: {encoding}"
    except (UnicodeDecodeError, csv.Error) as e:
        return None, None, f"CSV 파싱 실패 ({encoding}): {e}"

    logger.debug(f"CSV 로드: {len(rows)}행 ({file_path}, {encoding})")
    return rows, encoding, None
