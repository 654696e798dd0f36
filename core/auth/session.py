# core/auth/session.py
"""
core/auth/session.py - boto3 Session 생성

지원하는 조합:
    - profile만: 프로파일의 자격 증명과 기본 리전 사용
    - profile + region: 프로파일 자격 증명, 리전은 명시값으로 덮어씀
    - region만: 기본 자격 증명 체인(환경 변수, 인스턴스 역할 등) 사용
    - 둘 다 없음: ConfigError

자격 증명이나 리전을 확인할 수 없으면 재조정 작업을 시작하기 전에
ConfigError를 발생시킵니다.
"""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ProfileNotFound

from core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def resolve_region(session: boto3.Session, region: str | None = None) -> str:
    """세션에 적용될 리전 결정

    Args:
        session: boto3 Session
        region: 명시적으로 지정된 리전 (우선)

    Returns:
        리전 이름

    Raises:
        ConfigError: 리전을 결정할 수 없는 경우
    """
    resolved = region or session.region_name
    if not resolved:
        raise ConfigError("region", "리전을 확인할 수 없습니다. --region 옵션 또는 프로파일의 region을 설정하세요")
    return resolved


def get_session(
    profile: str | None = None,
    region: str | None = None,
    verify_credentials: bool = True,
) -> boto3.Session:
    """boto3 Session 생성

    Args:
        profile: AWS 프로파일 이름 (~/.aws/config)
        region: AWS 리전
        verify_credentials: True이면 자격 증명 존재 여부를 미리 확인

    Returns:
        boto3.Session (region_name이 항상 설정됨)

    Raises:
        ConfigError: 프로파일/리전이 모두 없거나, 프로파일을 찾을 수 없거나,
            자격 증명이 없는 경우
    """
    if not profile and not region:
        raise ConfigError("profile", "프로파일 또는 리전을 지정해야 합니다")

    try:
        if profile:
            logger.debug(f"프로파일 사용: {profile}")
            session = boto3.Session(profile_name=profile, region_name=region)
        else:
            logger.debug("기본 자격 증명 체인 사용")
            session = boto3.Session(region_name=region)
    except ProfileNotFound as e:
        raise ConfigError("profile", f"프로파일을 찾을 수 없습니다: {profile}", cause=e) from e

    # 프로파일에 region이 없고 --region도 없으면 여기서 중단
    resolve_region(session, region)

    if verify_credentials:
        try:
            credentials = session.get_credentials()
        except BotoCoreError as e:
            raise ConfigError("credentials", "자격 증명을 불러오지 못했습니다", cause=e) from e
        if credentials is None:
            raise ConfigError("credentials", "AWS 자격 증명을 찾을 수 없습니다")

    return session
