"""
Источники значений для форматирования.

Каждый источник по плейсхолдеру возвращает значение либо MISSING,
если значения для него нет совсем (в отличие от значения None).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Sequence

from .nodes import IndexedPlaceholder, PlaceholderSegment, PositionalPlaceholder
from .records import has_field, read_field


class _Missing:
    """Маркер отсутствующего значения."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class ValueSource(ABC):
    """Базовый интерфейс источника значений."""

    @abstractmethod
    def lookup(self, segment: PlaceholderSegment, position: int) -> Any:
        """
        Значение для плейсхолдера.

        Args:
            segment: Плейсхолдер
            position: Порядковый номер плейсхолдера в шаблоне (с 0)

        Returns:
            Значение (возможно None) или MISSING
        """
        pass


class SequenceSource(ValueSource):
    """N-й плейсхолдер по порядку получает N-е значение; лишние значения игнорируются."""

    def __init__(self, values: Iterable[Any]):
        self.values = list(values)

    def lookup(self, segment: PlaceholderSegment, position: int) -> Any:
        if position < len(self.values):
            return self.values[position]
        return MISSING


class IndexedSource(ValueSource):
    """
    Значения по индексу плейсхолдера.

    Индексированные плейсхолдеры берут значение по своему индексу,
    безымянные — по своему порядковому номеру среди безымянных.
    Отрицательный индекс отсчитывается с конца. Для индекса вне диапазона
    вызывается missing_index_handler, если он задан.
    """

    def __init__(self, values: Sequence[Any], missing_index_handler: Optional[Callable[[int], Any]] = None):
        self.values = values if isinstance(values, Sequence) else list(values)
        self.missing_index_handler = missing_index_handler

    def lookup(self, segment: PlaceholderSegment, position: int) -> Any:
        if isinstance(segment, IndexedPlaceholder):
            index = segment.index
        elif isinstance(segment, PositionalPlaceholder):
            index = segment.ordinal
        else:
            return MISSING

        size = len(self.values)
        if index < 0:
            index += size
        if 0 <= index < size:
            return self.values[index]
        if self.missing_index_handler is not None:
            return self.missing_index_handler(index)
        return MISSING


class MappingSource(ValueSource):
    """Значения по имени; ключ есть в словаре — значение найдено, даже если оно None."""

    def __init__(self, mapping: Mapping[str, Any]):
        self.mapping = mapping

    def lookup(self, segment: PlaceholderSegment, position: int) -> Any:
        if segment.key in self.mapping:
            return self.mapping[segment.key]
        return MISSING


class RecordSource(ValueSource):
    """
    Значения через функцию доступа по имени поля.

    Если задан contains и он отвечает False, значение считается отсутствующим;
    иначе результат accessor (в том числе None) считается найденным.
    """

    def __init__(self, accessor: Callable[[str], Any], contains: Optional[Callable[[str], bool]] = None):
        self.accessor = accessor
        self.contains = contains

    def lookup(self, segment: PlaceholderSegment, position: int) -> Any:
        if self.contains is not None and not self.contains(segment.key):
            return MISSING
        return self.accessor(segment.key)


def value_source_for(obj: Any) -> ValueSource:
    """
    Подбирает источник значений для объекта.

    - ValueSource → как есть
    - Mapping     → MappingSource
    - callable    → RecordSource(obj)
    - иначе       → RecordSource по атрибутам объекта (dataclass, pydantic, обычный объект)
    """
    if isinstance(obj, ValueSource):
        return obj
    if isinstance(obj, Mapping):
        return MappingSource(obj)
    if callable(obj) and not isinstance(obj, type):
        return RecordSource(obj)
    return RecordSource(lambda name: read_field(obj, name), lambda name: has_field(obj, name))


def to_text(value: Any) -> str:
    """Строковое представление значения для подстановки."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


__all__ = [
    "MISSING",
    "ValueSource",
    "SequenceSource",
    "IndexedSource",
    "MappingSource",
    "RecordSource",
    "value_source_for",
    "to_text",
]
