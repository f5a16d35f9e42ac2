"""
Сегменты шаблона.

Разобранный шаблон — это неизменяемая последовательность сегментов:
фиксированный текст и плейсхолдеры трёх видов.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class LiteralSegment:
    """
    Фиксированный текст шаблона.

    При форматировании выводится как есть, при разборе строки
    служит якорем для поиска границ значений.
    """
    text: str


@dataclass(frozen=True)
class PlaceholderSegment:
    """Базовый класс для всех плейсхолдеров."""
    key: str     # Имя переменной без разделителей, например "name" или "1"
    text: str    # Плейсхолдер целиком, например "{name}" или "?"


@dataclass(frozen=True)
class PositionalPlaceholder(PlaceholderSegment):
    """Безымянный плейсхолдер; ordinal — его номер среди безымянных (с 0)."""
    ordinal: int = 0


@dataclass(frozen=True)
class IndexedPlaceholder(PlaceholderSegment):
    """Плейсхолдер с числовым ключом, индекс отсчитывается с 0."""
    index: int = 0


@dataclass(frozen=True)
class NamedPlaceholder(PlaceholderSegment):
    """Плейсхолдер с именем переменной."""
    pass


Segment = Union[LiteralSegment, PlaceholderSegment]

# Алиас для разобранного шаблона
SegmentList = List[Segment]


__all__ = [
    "LiteralSegment",
    "PlaceholderSegment",
    "PositionalPlaceholder",
    "IndexedPlaceholder",
    "NamedPlaceholder",
    "Segment",
    "SegmentList",
]
