"""
Движок строковых шаблонов.

Форматирует шаблоны с плейсхолдерами и выполняет обратный разбор:
по готовой строке восстанавливает значения плейсхолдеров.
"""

from __future__ import annotations

from .features import DEFAULT_FEATURES, Feature, FeatureGroup, FeatureSet
from .nodes import (
    IndexedPlaceholder,
    LiteralSegment,
    NamedPlaceholder,
    PlaceholderSegment,
    PositionalPlaceholder,
    Segment,
)
from .parser import parse_named, parse_single, to_source
from .records import RecordCoercionError
from .template import (
    NamedPlaceholderTemplate,
    NamedPlaceholderTemplateBuilder,
    SinglePlaceholderTemplate,
    SinglePlaceholderTemplateBuilder,
    StrTemplate,
    of,
    of_named,
    reset_global_defaults,
    set_global_default_value,
    set_global_features,
)
from .tokens import DelimiterConfig, SinglePlaceholderConfig
from .values import IndexedSource, MappingSource, RecordSource, SequenceSource, ValueSource

__all__ = [
    "DEFAULT_FEATURES",
    "Feature",
    "FeatureGroup",
    "FeatureSet",
    "LiteralSegment",
    "PlaceholderSegment",
    "PositionalPlaceholder",
    "IndexedPlaceholder",
    "NamedPlaceholder",
    "Segment",
    "parse_named",
    "parse_single",
    "to_source",
    "RecordCoercionError",
    "StrTemplate",
    "SinglePlaceholderTemplate",
    "NamedPlaceholderTemplate",
    "SinglePlaceholderTemplateBuilder",
    "NamedPlaceholderTemplateBuilder",
    "of",
    "of_named",
    "set_global_features",
    "set_global_default_value",
    "reset_global_defaults",
    "DelimiterConfig",
    "SinglePlaceholderConfig",
    "ValueSource",
    "SequenceSource",
    "IndexedSource",
    "MappingSource",
    "RecordSource",
]
