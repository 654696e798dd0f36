"""
analyzers/cloudformation/reconcile/collectors.py - 보조 인벤토리 수집기

CloudFormation이 리소스의 Physical ID로 이름만 보고하는 IAM Role과
CloudWatch Log Group을 따로 수집해 카탈로그와 같은 형태의 테이블로 만듭니다.

두 수집기는 서로 독립적이며 워커 스레드에서 동시에 실행됩니다.
각 수집기는 자신의 테이블만 만들어 반환하고, 공유 상태는 없습니다.
API 에러는 그대로 전파되어 run_with_retry가 재시도/실패 값으로 변환합니다.
"""

from __future__ import annotations

import logging
from typing import Any

from core.parallel import get_client

from .catalog import RecordTable
from .types import IAM_ROLE_TYPE, IAM_SERVICE, LOGS_GROUP_TYPE, LOGS_SERVICE, AuxiliaryRecord

logger = logging.getLogger(__name__)


class IamRoleSource:
    """IAM list_roles 어댑터"""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_session(cls, session, region: str | None = None) -> IamRoleSource:
        return cls(get_client(session, "iam", region_name=region))

    def list_roles(self) -> list[dict[str, str]]:
        """모든 Role 조회 (페이지네이션)

        Returns:
            [{"name", "id", "arn"}, ...]
        """
        roles: list[dict[str, str]] = []
        paginator = self.client.get_paginator("list_roles")
        for page in paginator.paginate():
            for role in page.get("Roles", []):
                roles.append(
                    {
                        "name": role.get("RoleName", ""),
                        "id": role.get("RoleId", ""),
                        "arn": role.get("Arn", ""),
                    }
                )
        return roles


class LogGroupSource:
    """CloudWatch Logs describe_log_groups 어댑터"""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_session(cls, session, region: str | None = None) -> LogGroupSource:
        return cls(get_client(session, "logs", region_name=region))

    def list_log_groups(self) -> list[dict[str, str]]:
        """모든 Log Group 조회 (페이지네이션)

        Returns:
            [{"name", "arn"}, ...]
        """
        groups: list[dict[str, str]] = []
        paginator = self.client.get_paginator("describe_log_groups")
        for page in paginator.paginate():
            for group in page.get("logGroups", []):
                arn = group.get("arn", "")
                # ARN에서 :* 제거 (CloudWatch Logs ARN 형식)
                if arn.endswith(":*"):
                    arn = arn[:-2]
                groups.append({"name": group.get("logGroupName", ""), "arn": arn})
        return groups


def collect_roles(source: IamRoleSource) -> RecordTable[AuxiliaryRecord]:
    """IAM Role 테이블 생성

    identifier는 Role 이름입니다 (CloudFormation이 보고하는 Physical ID).
    """
    table: RecordTable[AuxiliaryRecord] = RecordTable("roles")
    for role in source.list_roles():
        table.append(
            AuxiliaryRecord(
                identifier=role["name"],
                name=role["name"],
                service=IAM_SERVICE,
                resource_type=IAM_ROLE_TYPE,
                arn=role.get("arn", ""),
                resource_id=role.get("id", ""),
            )
        )
    logger.info(f"IAM Role 수집 완료: {len(table)}개")
    return table


def collect_log_groups(source: LogGroupSource) -> RecordTable[AuxiliaryRecord]:
    """Log Group 테이블 생성"""
    table: RecordTable[AuxiliaryRecord] = RecordTable("log_groups")
    for group in source.list_log_groups():
        table.append(
            AuxiliaryRecord(
                identifier=group["name"],
                name=group["name"],
                service=LOGS_SERVICE,
                resource_type=LOGS_GROUP_TYPE,
                arn=group.get("arn", ""),
            )
        )
    logger.info(f"Log Group 수집 완료: {len(table)}개")
    return table
