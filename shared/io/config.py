"""출력 설정 모듈

리포트 출력 형식 및 옵션 설정

Usage:
    from shared.io.config import OutputConfig, OutputFormat

    config = OutputConfig.from_string("csv", output_path="result.csv")

    if config.should_output_csv():
        ...
"""

from dataclasses import dataclass, field
from enum import Flag, auto


class OutputFormat(Flag):
    """출력 형식 플래그

    Flag 타입으로 여러 형식을 조합하여 사용 가능

    Usage:
        fmt = OutputFormat.CSV | OutputFormat.CONSOLE

        if OutputFormat.CSV in fmt:
            ...
    """

    NONE = 0
    CSV = auto()
    JSON = auto()
    CONSOLE = auto()


# 파일 형식별 기본 확장자
_EXTENSIONS = {
    OutputFormat.CSV: ".csv",
    OutputFormat.JSON: ".json",
}


@dataclass
class OutputConfig:
    """출력 설정

    Attributes:
        formats: 출력 형식 플래그 (기본: CSV)
        output_path: 출력 파일 경로 (파일 형식이 여러 개면 확장자만 바꿔 사용)
        lang: 언어 설정 ("ko" 또는 "en")
    """

    formats: OutputFormat = field(default=OutputFormat.CSV)
    output_path: str = "output-resources.csv"
    lang: str = "ko"

    def should_output_csv(self) -> bool:
        """CSV 출력 여부"""
        return OutputFormat.CSV in self.formats

    def should_output_json(self) -> bool:
        """JSON 출력 여부"""
        return OutputFormat.JSON in self.formats

    def should_output_console(self) -> bool:
        """Console 출력 여부"""
        return OutputFormat.CONSOLE in self.formats

    def path_for(self, fmt: OutputFormat) -> str:
        """형식별 출력 경로

        output_path의 확장자가 형식과 다르면 형식의 확장자로 바꿉니다.
        단일 파일 형식만 선택된 경우에는 output_path를 그대로 사용합니다.
        """
        file_formats = [f for f in _EXTENSIONS if f in self.formats]
        if len(file_formats) <= 1:
            return self.output_path

        from pathlib import Path

        return str(Path(self.output_path).with_suffix(_EXTENSIONS[fmt]))

    @classmethod
    def from_string(cls, format_str: str, output_path: str | None = None, lang: str = "ko") -> "OutputConfig":
        """문자열에서 OutputConfig 생성

        Args:
            format_str: 형식 문자열 ("csv", "json", "console", "all")
            output_path: 출력 파일 경로
            lang: 언어

        Returns:
            OutputConfig 인스턴스
        """
        format_map = {
            "csv": OutputFormat.CSV,
            "json": OutputFormat.JSON,
            "console": OutputFormat.CONSOLE,
            "all": OutputFormat.CSV | OutputFormat.JSON | OutputFormat.CONSOLE,
        }

        formats = format_map.get(format_str.lower(), OutputFormat.CSV)
        if output_path:
            return cls(formats=formats, output_path=output_path, lang=lang)
        return cls(formats=formats, lang=lang)
