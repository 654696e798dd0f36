"""
cli/i18n/messages/cli_commands.py - CLI Command Messages

Contains translations for the awsrecon command, run summary, and error messages.
"""

from __future__ import annotations

CLI_MESSAGES = {
    # =========================================================================
    # CLI Help Text
    # =========================================================================
    "help_intro": {
        "ko": "CloudFormation Stack 트리, IAM Role, CloudWatch Log Group을\n카탈로그 CSV와 대조하여 리소스 귀속 보고서를 만듭니다.",
        "en": "Reconciles CloudFormation stack trees, IAM roles and CloudWatch\nlog groups against a catalog CSV and writes an attribution report.",
    },
    "help_profile": {
        "ko": "AWS 프로파일 이름",
        "en": "AWS profile name",
    },
    "help_region": {
        "ko": "AWS 리전 (기본: 프로파일의 region)",
        "en": "AWS region (default: profile region)",
    },
    "help_csvfile": {
        "ko": "카탈로그 CSV 파일 (Tag Editor 내보내기 등)",
        "en": "Catalog CSV file (e.g. Tag Editor export)",
    },
    "help_format": {
        "ko": "출력 형식",
        "en": "Output format",
    },
    "help_max_depth": {
        "ko": "중첩 Stack 최대 깊이",
        "en": "Maximum nested stack depth",
    },
    "help_max_pages": {
        "ko": "list_stacks 최대 페이지 수",
        "en": "Maximum list_stacks pages",
    },
    "help_retries": {
        "ko": "수집 작업 재시도 횟수",
        "en": "Retry count for collection tasks",
    },
    "help_debug": {
        "ko": "디버그 로그 출력",
        "en": "Enable debug logging",
    },
    "help_quiet": {
        "ko": "최소 출력 모드",
        "en": "Minimal output mode",
    },
    "help_lang": {
        "ko": "UI 언어 설정 / UI language (ko: 한국어, en: English)",
        "en": "UI language (ko: Korean, en: English)",
    },
    "no_args_hint": {
        "ko": "자세한 사용법은 'awsrecon --help'를 참고하세요.",
        "en": "Try 'awsrecon --help' for more information.",
    },
    # =========================================================================
    # Run Messages
    # =========================================================================
    "csvfile_required": {
        "ko": "카탈로그 CSV 파일을 지정해야 합니다 (-c/--csvfile)",
        "en": "A catalog CSV file is required (-c/--csvfile)",
    },
    "collecting": {
        "ko": "Stack / IAM Role / Log Group 수집 중...",
        "en": "Collecting stacks, IAM roles and log groups...",
    },
    "saved": {
        "ko": "저장 완료: {path}",
        "en": "Saved: {path}",
    },
    "completed": {
        "ko": "완료",
        "en": "Completed",
    },
    "cancelled": {
        "ko": "취소되었습니다",
        "en": "Cancelled",
    },
    "error_label": {
        "ko": "오류: {message}",
        "en": "Error: {message}",
    },
    "error_summary": {
        "ko": "수집 실패 요약",
        "en": "Collection failures",
    },
    "no_stacks": {
        "ko": "조건에 맞는 루트 Stack이 없습니다 (CREATE_COMPLETE, UPDATE_COMPLETE, UPDATE_ROLLBACK_COMPLETE)",
        "en": "No root stacks in CREATE_COMPLETE, UPDATE_COMPLETE or UPDATE_ROLLBACK_COMPLETE state",
    },
    # =========================================================================
    # Summary
    # =========================================================================
    "summary_title": {
        "ko": "실행 요약",
        "en": "Run Summary",
    },
    "summary_profile": {
        "ko": "프로필",
        "en": "Profile",
    },
    "summary_default_chain": {
        "ko": "(기본 자격 증명)",
        "en": "(default credentials)",
    },
    "summary_region": {
        "ko": "리전",
        "en": "Region",
    },
    "summary_catalog": {
        "ko": "카탈로그",
        "en": "Catalog",
    },
    "summary_output": {
        "ko": "출력",
        "en": "Output",
    },
    "stats_title": {
        "ko": "재조정 결과",
        "en": "Reconciliation Result",
    },
    "stats_stacks": {
        "ko": "CloudFormation",
        "en": "CloudFormation",
    },
    "stats_root_stacks": {
        "ko": "루트 Stack",
        "en": "Root stacks",
    },
    "stats_discovered": {
        "ko": "발견 리소스",
        "en": "Discovered resources",
    },
    "stats_unmatched": {
        "ko": "미일치 리소스",
        "en": "Unmatched resources",
    },
    "stats_catalog": {
        "ko": "카탈로그",
        "en": "Catalog",
    },
    "stats_roles": {
        "ko": "IAM Role",
        "en": "IAM roles",
    },
    "stats_log_groups": {
        "ko": "Log Group",
        "en": "Log groups",
    },
    "stats_matched": {
        "ko": "일치",
        "en": "Matched",
    },
    "stats_residual": {
        "ko": "잔여",
        "en": "Residual",
    },
}
