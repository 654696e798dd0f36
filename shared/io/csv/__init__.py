"""CSV 입력 처리 (인코딩 자동 감지)"""

from .handler import ENCODING_PRIORITIES, detect_csv_encoding, read_csv_rows

__all__: list[str] = [
    "ENCODING_PRIORITIES",
    "detect_csv_encoding",
    "read_csv_rows",
]
