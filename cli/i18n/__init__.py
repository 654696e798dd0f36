"""
cli/i18n - CLI 메시지 번역

메시지는 "namespace.key" 키로 등록되며 한국어가 기본, 영어가 보조 언어입니다.
현재 언어는 ContextVar에 저장되므로 실행 단위(HeadlessRunner.run)마다 바꿀 수 있습니다.

    set_lang("en")
    t("cli.saved", path="output-resources.csv")  # "Saved: output-resources.csv"
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any

SUPPORTED_LANGS = ("ko", "en")
DEFAULT_LANG = "ko"

_lang: ContextVar[str] = ContextVar("awsrecon_lang", default=DEFAULT_LANG)


def _supported(lang: str | None) -> str:
    return lang if lang in SUPPORTED_LANGS else DEFAULT_LANG


def get_lang() -> str:
    return _lang.get()


def set_lang(lang: str) -> None:
    """현재 언어 변경. 지원하지 않는 코드는 기본 언어(ko)"""
    _lang.set(_supported(lang))


def t(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """메시지 번역

    해당 언어 번역이 비어 있으면 한국어로, 키가 없으면 키 문자열 자체로 대체합니다.
    포맷 인자가 템플릿과 맞지 않으면 포맷하지 않은 템플릿을 반환합니다.
    """
    from cli.i18n.messages import MESSAGES

    entry = MESSAGES.get(key)
    if entry is None:
        return key

    template = entry.get(_supported(lang or get_lang())) or entry[DEFAULT_LANG]
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template


__all__ = ["DEFAULT_LANG", "SUPPORTED_LANGS", "get_lang", "set_lang", "t"]
