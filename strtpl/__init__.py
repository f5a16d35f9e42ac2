"""
strtpl — строковые шаблоны с форматированием и обратным разбором.
"""

from __future__ import annotations

from .errors import (
    AmbiguousTemplateError,
    InvalidConfigurationError,
    MissingDefaultValueError,
    MissingKeyError,
    StrTemplateError,
)
from .template import (
    Feature,
    FeatureSet,
    NamedPlaceholderTemplate,
    SinglePlaceholderTemplate,
    StrTemplate,
    of,
    of_named,
    reset_global_defaults,
    set_global_default_value,
    set_global_features,
)

__all__ = [
    "StrTemplateError",
    "InvalidConfigurationError",
    "MissingKeyError",
    "MissingDefaultValueError",
    "AmbiguousTemplateError",
    "Feature",
    "FeatureSet",
    "StrTemplate",
    "SinglePlaceholderTemplate",
    "NamedPlaceholderTemplate",
    "of",
    "of_named",
    "set_global_features",
    "set_global_default_value",
    "reset_global_defaults",
]
