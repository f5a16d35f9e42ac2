"""
Форматирование шаблона: подстановка значений вместо плейсхолдеров.
"""

from __future__ import annotations

from typing import Any, Callable, List, Sequence

from ..errors import MissingKeyError, StrTemplateError
from .features import Feature, FeatureGroup, FeatureSet
from .nodes import LiteralSegment, PlaceholderSegment, Segment
from .values import MISSING, ValueSource, to_text

# Значение по умолчанию для плейсхолдера; бросает MissingDefaultValueError, если его нет
DefaultProvider = Callable[[PlaceholderSegment], str]


class TemplateFormatter:
    """
    Собирает строку из сегментов, применяя стратегии форматирования.

    Не хранит состояния между вызовами, один экземпляр можно
    использовать из нескольких потоков.
    """

    def __init__(self, segments: Sequence[Segment], features: FeatureSet, default_provider: DefaultProvider):
        self.segments = segments
        self.features = features
        self.default_provider = default_provider

    def format(self, source: ValueSource) -> str:
        """Форматирует шаблон значениями из источника с учётом стратегий."""
        return self.format_raw(lambda segment, position: self._resolve(source, segment, position))

    def format_raw(self, supplier: Callable[[PlaceholderSegment, int], Any]) -> str:
        """
        Форматирует шаблон без применения стратегий.

        supplier возвращает значение для каждого плейсхолдера;
        None выводится как "null".
        """
        parts: List[str] = []
        position = 0
        for segment in self.segments:
            if isinstance(segment, LiteralSegment):
                parts.append(segment.text)
                continue
            value = supplier(segment, position)
            position += 1
            parts.append("null" if value is None else to_text(value))
        return "".join(parts)

    def _resolve(self, source: ValueSource, segment: PlaceholderSegment, position: int) -> str:
        value = source.lookup(segment, position)
        if value is MISSING:
            return self.missing_key_value(segment)
        if value is None:
            return self.null_value(segment)
        return to_text(value)

    def missing_key_value(self, segment: PlaceholderSegment) -> str:
        """Что подставить, если для плейсхолдера нет значения."""
        feature = self.features.get(FeatureGroup.FORMAT_MISSING_KEY)
        if feature is Feature.FORMAT_MISSING_KEY_PRINT_WHOLE_PLACEHOLDER:
            return segment.text
        if feature is Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE:
            return self.default_provider(segment)
        if feature is Feature.FORMAT_MISSING_KEY_PRINT_NULL:
            return "null"
        if feature is Feature.FORMAT_MISSING_KEY_PRINT_EMPTY:
            return ""
        if feature is Feature.FORMAT_MISSING_KEY_PRINT_VARIABLE_NAME:
            # У безымянного плейсхолдера имени нет, печатаем его целиком
            return segment.key or segment.text
        if feature is Feature.FORMAT_MISSING_KEY_THROWS:
            raise MissingKeyError(segment.key)
        raise MissingKeyError(
            segment.key,
            f"There is no value associated with key: '{segment.key}'. "
            f"Define a feature for missing keys when building the template.",
        )

    def null_value(self, segment: PlaceholderSegment) -> str:
        """Что подставить, если значение плейсхолдера равно None."""
        feature = self.features.get(FeatureGroup.FORMAT_NULL_VALUE)
        if feature is Feature.FORMAT_NULL_VALUE_TO_EMPTY:
            return ""
        if feature is Feature.FORMAT_NULL_VALUE_TO_WHOLE_PLACEHOLDER:
            return segment.text
        if feature is Feature.FORMAT_NULL_VALUE_TO_DEFAULT_VALUE:
            return self.default_provider(segment)
        if feature is Feature.FORMAT_NULL_VALUE_TO_STR:
            return "null"
        raise StrTemplateError(
            f"Value of key '{segment.key}' is None. "
            f"Define a feature for None values when building the template."
        )


__all__ = ["TemplateFormatter", "DefaultProvider"]
