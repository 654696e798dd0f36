"""
cli/i18n/messages - 메시지 레지스트리

네임스페이스별 메시지 모듈을 "namespace.key" 평탄 키로 모읍니다.
현재는 "cli" 네임스페이스(cli_commands.py) 하나뿐입니다.
"""

from __future__ import annotations

from typing import TypedDict

from cli.i18n.messages.cli_commands import CLI_MESSAGES


class MessageDict(TypedDict):
    ko: str
    en: str


MESSAGES: dict[str, MessageDict] = {}


def register_messages(namespace: str, messages: dict[str, MessageDict]) -> None:
    """namespace 접두사를 붙여 MESSAGES에 등록 (같은 키는 덮어씀)"""
    MESSAGES.update({f"{namespace}.{key}": value for key, value in messages.items()})


register_messages("cli", CLI_MESSAGES)

__all__ = ["MESSAGES", "MessageDict", "register_messages"]
