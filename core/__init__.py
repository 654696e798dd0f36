# core/__init__.py
"""
core - 재조정 도구 인프라

CLI 아래에서 공통으로 쓰이는 인프라 패키지입니다.

아키텍처:
    core/
    ├── auth/           # boto3 Session 생성 (프로파일/리전)
    ├── parallel/       # 병렬 수집 실행기, 재시도, boto3 client 헬퍼
    ├── config.py       # 버전 및 기본 설정
    └── exceptions.py   # 통합 예외 계층

Usage:
    from core.exceptions import ReconError, format_error_for_user

    try:
        stats = run_reconciliation(config, sources, sink)
    except ReconError as e:
        print_error(format_error_for_user(e))
"""

from core import auth, config, exceptions, parallel

__all__: list[str] = [
    # 서브패키지
    "auth",
    "parallel",
    # 모듈
    "config",
    "exceptions",
]
