"""
core/config.py - 중앙 설정

버전 정보와 실행 기본값을 한 곳에서 관리합니다.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

PACKAGE_NAME = "aws-resource-reconciler"
FALLBACK_VERSION = "0.1.0"

# 기본 실행 설정
DEFAULT_OUTPUT_FILE = "output-resources.csv"
DEFAULT_MAX_DEPTH = 16  # 중첩 Stack 최대 깊이
DEFAULT_MAX_PAGES = 500  # list_stacks 최대 페이지 수
DEFAULT_MAX_RETRIES = 3


def get_version() -> str:
    """설치된 패키지 메타데이터에서 버전 반환

    editable 설치 전(소스 트리 직접 실행)에는 FALLBACK_VERSION을 사용합니다.
    """
    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION
