"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from StrTemplateError.

Programming errors and bugs should NOT inherit from StrTemplateError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class StrTemplateError(Exception):
    """
    Base class for all user-facing errors of the template engine.

    These errors indicate problems that the caller can fix:
    bad delimiters, missing values, broken preset files, etc.
    """
    pass


class InvalidConfigurationError(StrTemplateError, ValueError):
    """Некорректные параметры билдера (пустой префикс/суффикс, escape не из одного символа)."""
    pass


class MissingKeyError(StrTemplateError, KeyError):
    """Для плейсхолдера не нашлось значения, а политика требует ошибку."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        self.message = message or f"There is no value associated with key: '{key}'"
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError по умолчанию оборачивает сообщение в кавычки
        return self.message


class MissingDefaultValueError(StrTemplateError, LookupError):
    """Политика требует значение по умолчанию, но шаблону оно не задано."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"There is no default value for key: '{key}'. "
            f"Define 'default_value' on the builder or a global default value handler."
        )


class AmbiguousTemplateError(StrTemplateError):
    """Два плейсхолдера стоят вплотную, значения между ними нельзя разделить при разборе."""
    pass


__all__ = [
    "StrTemplateError",
    "InvalidConfigurationError",
    "MissingKeyError",
    "MissingDefaultValueError",
    "AmbiguousTemplateError",
]
