"""
Пресеты шаблонов из YAML.
"""

from __future__ import annotations

from .load import (
    DEFAULT_PRESETS_FILE,
    build_template,
    builder_for,
    list_presets,
    load_preset,
    load_template,
    read_presets,
    resolve_presets_file,
)
from .model import PresetKind, PresetsConfig, TemplatePreset
from .typed import ConfigLoadError, load_typed

__all__ = [
    "DEFAULT_PRESETS_FILE",
    "ConfigLoadError",
    "PresetKind",
    "PresetsConfig",
    "TemplatePreset",
    "build_template",
    "builder_for",
    "list_presets",
    "load_preset",
    "load_template",
    "load_typed",
    "read_presets",
    "resolve_presets_file",
]
