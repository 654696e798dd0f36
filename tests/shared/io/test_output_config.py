"""
tests/shared/io/test_output_config.py - OutputConfig / OutputFormat 테스트
"""

import pytest

from shared.io import OutputConfig, OutputFormat


class TestOutputFormat:
    def test_combination(self):
        fmt = OutputFormat.CSV | OutputFormat.CONSOLE

        assert OutputFormat.CSV in fmt
        assert OutputFormat.CONSOLE in fmt
        assert OutputFormat.JSON not in fmt


class TestOutputConfig:
    """OutputConfig 테스트"""

    def test_defaults(self):
        config = OutputConfig()

        assert config.should_output_csv() is True
        assert config.should_output_json() is False
        assert config.should_output_console() is False
        assert config.output_path == "output-resources.csv"
        assert config.lang == "ko"

    @pytest.mark.parametrize(
        "format_str, csv_, json_, console_",
        [
            ("csv", True, False, False),
            ("json", False, True, False),
            ("console", False, False, True),
            ("all", True, True, True),
            ("JSON", False, True, False),
            ("unknown", True, False, False),
        ],
    )
    def test_from_string(self, format_str, csv_, json_, console_):
        config = OutputConfig.from_string(format_str)

        assert config.should_output_csv() is csv_
        assert config.should_output_json() is json_
        assert config.should_output_console() is console_

    def test_from_string_keeps_path_and_lang(self):
        config = OutputConfig.from_string("json", output_path="report.json", lang="en")

        assert config.output_path == "report.json"
        assert config.lang == "en"

    def test_path_for_single_format(self):
        """파일 형식이 하나면 경로 그대로 사용"""
        config = OutputConfig.from_string("json", output_path="report.csv")

        assert config.path_for(OutputFormat.JSON) == "report.csv"

    def test_path_for_multiple_formats(self):
        """여러 파일 형식이면 확장자만 교체"""
        config = OutputConfig.from_string("all", output_path="out/report.csv")

        assert config.path_for(OutputFormat.CSV) == "out/report.csv"
        assert config.path_for(OutputFormat.JSON) == "out/report.json"
