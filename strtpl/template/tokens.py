"""
Лексические типы и конфигурация разделителей.

Определяет типы токенов лексера и неизменяемые конфигурации
разделителей для именованного и одиночного вариантов шаблона.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..errors import InvalidConfigurationError

DEFAULT_ESCAPE = "\\"
DEFAULT_PREFIX = "{"
DEFAULT_SUFFIX = "}"
DEFAULT_PLACEHOLDER = "{}"


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""
    TEXT = "TEXT"
    PLACEHOLDER = "PLACEHOLDER"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для диагностики.

    Для PLACEHOLDER в value хранится имя переменной (уже без экранирования),
    а в raw — исходный фрагмент шаблона целиком.
    """
    type: TokenType
    value: str
    position: int        # Позиция в исходном тексте
    line: int           # Номер строки (начиная с 1)
    column: int         # Номер колонки (начиная с 1)
    raw: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


def _check_escape(escape: str) -> None:
    if not isinstance(escape, str) or len(escape) != 1:
        raise InvalidConfigurationError(f"Escape must be a single character, got {escape!r}")


@dataclass(frozen=True)
class DelimiterConfig:
    """
    Разделители именованного плейсхолдера: prefix + имя + suffix.

    Например "{name}", "#[id]", "${user}".
    """
    prefix: str = DEFAULT_PREFIX
    suffix: str = DEFAULT_SUFFIX
    escape: str = DEFAULT_ESCAPE

    def __post_init__(self) -> None:
        if not self.prefix:
            raise InvalidConfigurationError("Placeholder prefix must not be empty")
        if not self.suffix:
            raise InvalidConfigurationError("Placeholder suffix must not be empty")
        _check_escape(self.escape)


@dataclass(frozen=True)
class SinglePlaceholderConfig:
    """Одиночный плейсхолдер без имени: "{}", "?", "$$$"."""
    placeholder: str = DEFAULT_PLACEHOLDER
    escape: str = DEFAULT_ESCAPE

    def __post_init__(self) -> None:
        if not self.placeholder:
            raise InvalidConfigurationError("Placeholder must not be empty")
        _check_escape(self.escape)


__all__ = [
    "TokenType",
    "Token",
    "DelimiterConfig",
    "SinglePlaceholderConfig",
    "DEFAULT_ESCAPE",
    "DEFAULT_PREFIX",
    "DEFAULT_SUFFIX",
    "DEFAULT_PLACEHOLDER",
]
