"""
Обратный разбор: извлечение значений плейсхолдеров из готовой строки.

Фиксированный текст шаблона служит якорями. Первый фрагмент текста
должен стоять в начале строки, последний — в конце, промежуточные
ищутся первым вхождением от текущей позиции. Всё, что между якорями,
становится значением соответствующего плейсхолдера.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..errors import AmbiguousTemplateError
from .features import Feature, FeatureGroup, FeatureSet
from .nodes import LiteralSegment, PlaceholderSegment, Segment

logger = logging.getLogger(__name__)

# Плейсхолдер и разобранное для него значение
Capture = Tuple[PlaceholderSegment, Optional[str]]

# Значение по умолчанию для плейсхолдера при нормализации
DefaultSupplier = Callable[[PlaceholderSegment], Optional[str]]

# Маркер значения, которое стратегии исключают из результата
DROP: Any = object()


class TemplateMatcher:
    """
    Разбирает строки по сегментам шаблона.

    Не хранит состояния между вызовами.
    """

    def __init__(self, segments: Sequence[Segment], features: FeatureSet):
        self.segments = segments
        self.features = features
        self.placeholder_count = sum(1 for s in segments if isinstance(s, PlaceholderSegment))
        self.literal_text = "".join(s.text for s in segments if isinstance(s, LiteralSegment))
        self._adjacent = self._find_adjacent_placeholders(segments)

    @staticmethod
    def _find_adjacent_placeholders(segments: Sequence[Segment]) -> Optional[Tuple[PlaceholderSegment, PlaceholderSegment]]:
        for left, right in zip(segments, segments[1:]):
            if isinstance(left, PlaceholderSegment) and isinstance(right, PlaceholderSegment):
                return left, right
        return None

    def _ensure_splittable(self) -> None:
        if self._adjacent is not None:
            left, right = self._adjacent
            raise AmbiguousTemplateError(
                f"Placeholders {left.text!r} and {right.text!r} are adjacent, "
                f"their values cannot be split when matching"
            )

    def match_raw(self, text: Optional[str]) -> Optional[List[Tuple[PlaceholderSegment, str]]]:
        """
        Сопоставляет строку с шаблоном без применения стратегий.

        Returns:
            Пары (плейсхолдер, значение) в порядке шаблона или None, если строка не подходит

        Raises:
            AmbiguousTemplateError: В шаблоне есть плейсхолдеры вплотную друг к другу
        """
        self._ensure_splittable()
        if text is None:
            return None

        if self.placeholder_count == 0:
            return [] if text == self.literal_text else None

        if not text:
            return None

        captures: List[Tuple[PlaceholderSegment, str]] = []
        pending: Optional[PlaceholderSegment] = None
        pos = 0
        last = len(self.segments) - 1

        for i, segment in enumerate(self.segments):
            if isinstance(segment, PlaceholderSegment):
                pending = segment
                continue

            anchor = segment.text
            if pending is None:
                # Текст в начале шаблона
                if not text.startswith(anchor, pos):
                    logger.debug("Leading text %r not found at %d", anchor, pos)
                    return None
                pos += len(anchor)
                continue

            if i == last:
                # Текст в конце шаблона должен завершать строку
                end = len(text) - len(anchor)
                if end < pos or not text.endswith(anchor):
                    logger.debug("Trailing text %r not found after %d", anchor, pos)
                    return None
            else:
                end = text.find(anchor, pos)
                if end == -1:
                    logger.debug("Text %r not found after %d", anchor, pos)
                    return None

            captures.append((pending, text[pos:end]))
            pending = None
            pos = end + len(anchor)

        if pending is not None:
            captures.append((pending, text[pos:]))
            pos = len(text)

        if pos != len(text):
            logger.debug("Unmatched tail %r", text[pos:])
            return None
        return captures

    def is_match(self, text: Optional[str]) -> bool:
        """Подходит ли строка; шаблон с плейсхолдерами вплотную не подходит ни к чему."""
        if self._adjacent is not None:
            logger.debug("Template has adjacent placeholders, nothing matches")
            return False
        return self.match_raw(text) is not None

    def match(self, text: Optional[str], default_supplier: Optional[DefaultSupplier] = None) -> Optional[List[Capture]]:
        """
        Сопоставляет строку с шаблоном и нормализует значения по стратегиям.

        Значения, которые стратегии велят пропустить, в результат не попадают.

        Args:
            text: Разбираемая строка
            default_supplier: Значение по умолчанию для плейсхолдера, если оно есть у шаблона

        Returns:
            Пары (плейсхолдер, значение) или None, если строка не подходит
        """
        raw = self.match_raw(text)
        if raw is None:
            return None

        result: List[Capture] = []
        for segment, value in raw:
            normalized = self.normalize(segment, value, default_supplier)
            if normalized is not DROP:
                result.append((segment, normalized))
        return result

    def normalize(self, segment: PlaceholderSegment, value: str, default_supplier: Optional[DefaultSupplier]) -> Any:
        """
        Применяет стратегии разбора к одному значению.

        Порядок проверки: значение по умолчанию, пустая строка, строка "null".

        Returns:
            Итоговое значение (строка или None) либо DROP
        """
        features = self.features

        if default_supplier is not None and Feature.MATCH_KEEP_DEFAULT_VALUE not in features:
            if value == default_supplier(segment):
                if Feature.MATCH_IGNORE_DEFAULT_VALUE in features:
                    return DROP
                if Feature.MATCH_DEFAULT_VALUE_TO_NULL in features:
                    return None

        if value == "":
            empty = features.get(FeatureGroup.MATCH_EMPTY_VALUE)
            if empty is Feature.MATCH_EMPTY_VALUE_TO_NULL:
                return None
            if empty is Feature.MATCH_EMPTY_VALUE_TO_DEFAULT_VALUE:
                return default_supplier(segment) if default_supplier is not None else None
            if empty is Feature.MATCH_KEEP_VALUE_EMPTY:
                return value
            return DROP

        if value == "null":
            null_str = features.get(FeatureGroup.MATCH_NULL_STR)
            if null_str is Feature.MATCH_NULL_STR_TO_NULL:
                return None
            if null_str is Feature.MATCH_KEEP_NULL_STR:
                return value
            return DROP

        return value


def try_match(segments: Sequence[Segment], text: Optional[str]) -> Optional[List[str]]:
    """Сырые значения плейсхолдеров по порядку или None, если строка не подходит."""
    captures = TemplateMatcher(segments, FeatureSet()).match_raw(text)
    return None if captures is None else [value for _, value in captures]


__all__ = ["TemplateMatcher", "Capture", "DefaultSupplier", "DROP", "try_match"]
