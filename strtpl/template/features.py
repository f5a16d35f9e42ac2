"""
Стратегии форматирования и разбора.

Стратегии разбиты на группы. Внутри группы стратегии взаимоисключающие:
добавление новой стратегии группы вытесняет прежнюю.
"""

from __future__ import annotations

import enum
from typing import Dict, Iterable, Iterator, Mapping, Optional


class FeatureGroup(enum.Enum):
    """Группы взаимоисключающих стратегий."""
    FORMAT_MISSING_KEY = "format_missing_key"      # в параметрах нет значения для плейсхолдера
    FORMAT_NULL_VALUE = "format_null_value"        # значение есть, но равно None
    MATCH_DEFAULT_VALUE = "match_default_value"    # разобранное значение совпало со значением по умолчанию
    MATCH_EMPTY_VALUE = "match_empty_value"        # разобранное значение — пустая строка
    MATCH_NULL_STR = "match_null_str"              # разобранное значение — строка "null"


class Feature(enum.Enum):
    """Стратегия форматирования или разбора."""

    # --- Форматирование: нет значения для плейсхолдера ---
    FORMAT_MISSING_KEY_PRINT_WHOLE_PLACEHOLDER = (FeatureGroup.FORMAT_MISSING_KEY, 0)
    FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE = (FeatureGroup.FORMAT_MISSING_KEY, 1)
    FORMAT_MISSING_KEY_PRINT_NULL = (FeatureGroup.FORMAT_MISSING_KEY, 2)
    FORMAT_MISSING_KEY_PRINT_EMPTY = (FeatureGroup.FORMAT_MISSING_KEY, 3)
    FORMAT_MISSING_KEY_PRINT_VARIABLE_NAME = (FeatureGroup.FORMAT_MISSING_KEY, 4)
    FORMAT_MISSING_KEY_THROWS = (FeatureGroup.FORMAT_MISSING_KEY, 5)

    # --- Форматирование: значение равно None ---
    FORMAT_NULL_VALUE_TO_STR = (FeatureGroup.FORMAT_NULL_VALUE, 0)
    FORMAT_NULL_VALUE_TO_EMPTY = (FeatureGroup.FORMAT_NULL_VALUE, 1)
    FORMAT_NULL_VALUE_TO_WHOLE_PLACEHOLDER = (FeatureGroup.FORMAT_NULL_VALUE, 2)
    FORMAT_NULL_VALUE_TO_DEFAULT_VALUE = (FeatureGroup.FORMAT_NULL_VALUE, 3)

    # --- Разбор: значение совпало со значением по умолчанию ---
    MATCH_KEEP_DEFAULT_VALUE = (FeatureGroup.MATCH_DEFAULT_VALUE, 0)
    MATCH_IGNORE_DEFAULT_VALUE = (FeatureGroup.MATCH_DEFAULT_VALUE, 1)
    MATCH_DEFAULT_VALUE_TO_NULL = (FeatureGroup.MATCH_DEFAULT_VALUE, 2)

    # --- Разбор: пустая строка ---
    MATCH_EMPTY_VALUE_TO_NULL = (FeatureGroup.MATCH_EMPTY_VALUE, 0)
    MATCH_EMPTY_VALUE_TO_DEFAULT_VALUE = (FeatureGroup.MATCH_EMPTY_VALUE, 1)
    MATCH_IGNORE_EMPTY_VALUE = (FeatureGroup.MATCH_EMPTY_VALUE, 2)
    MATCH_KEEP_VALUE_EMPTY = (FeatureGroup.MATCH_EMPTY_VALUE, 3)

    # --- Разбор: строка "null" ---
    MATCH_NULL_STR_TO_NULL = (FeatureGroup.MATCH_NULL_STR, 0)
    MATCH_KEEP_NULL_STR = (FeatureGroup.MATCH_NULL_STR, 1)
    MATCH_IGNORE_NULL_STR = (FeatureGroup.MATCH_NULL_STR, 2)

    @property
    def group(self) -> FeatureGroup:
        return self.value[0]

    @classmethod
    def parse(cls, name: str) -> "Feature":
        """Стратегия по имени без учёта регистра: 'match_keep_null_str'."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown feature: {name!r}") from None


class FeatureSet:
    """
    Неизменяемый набор стратегий, не более одной на группу.

    Операции add/remove возвращают новый набор.
    """

    __slots__ = ("_by_group",)

    def __init__(self, by_group: Optional[Mapping[FeatureGroup, Feature]] = None):
        self._by_group: Dict[FeatureGroup, Feature] = dict(by_group or {})

    @classmethod
    def of(cls, *features: Feature) -> "FeatureSet":
        """Набор из перечисленных стратегий; при конфликте в группе побеждает последняя."""
        return cls().add(*features)

    def add(self, *features: Feature) -> "FeatureSet":
        by_group = dict(self._by_group)
        for feature in features:
            by_group[feature.group] = feature
        return FeatureSet(by_group)

    def remove(self, *features: Feature) -> "FeatureSet":
        """Убирает стратегии; отсутствующие в наборе игнорируются."""
        by_group = {g: f for g, f in self._by_group.items() if f not in features}
        return FeatureSet(by_group)

    def get(self, group: FeatureGroup) -> Optional[Feature]:
        return self._by_group.get(group)

    def __contains__(self, feature: object) -> bool:
        return isinstance(feature, Feature) and self._by_group.get(feature.group) is feature

    def __iter__(self) -> Iterator[Feature]:
        return iter(sorted(self._by_group.values(), key=lambda f: (list(FeatureGroup).index(f.group), f.value[1])))

    def __len__(self) -> int:
        return len(self._by_group)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FeatureSet):
            return self._by_group == other._by_group
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._by_group.values()))

    def __repr__(self) -> str:
        return f"FeatureSet({', '.join(f.name for f in self)})"


DEFAULT_FEATURES = FeatureSet.of(
    Feature.FORMAT_MISSING_KEY_PRINT_WHOLE_PLACEHOLDER,
    Feature.FORMAT_NULL_VALUE_TO_STR,
    Feature.MATCH_KEEP_DEFAULT_VALUE,
    Feature.MATCH_EMPTY_VALUE_TO_NULL,
    Feature.MATCH_NULL_STR_TO_NULL,
)


def parse_features(names: Iterable[str]) -> list[Feature]:
    """Список стратегий по именам (для конфигурации и CLI)."""
    return [Feature.parse(name) for name in names]


__all__ = ["Feature", "FeatureGroup", "FeatureSet", "DEFAULT_FEATURES", "parse_features"]
