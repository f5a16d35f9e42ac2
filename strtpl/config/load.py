"""
Загрузчик файла пресетов шаблонов (strtpl.yaml).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from ruamel.yaml import YAML

from ..template.template import (
    NamedPlaceholderTemplateBuilder,
    SinglePlaceholderTemplateBuilder,
    StrTemplate,
    of,
    of_named,
)
from .model import PresetKind, PresetsConfig, TemplatePreset
from .typed import ConfigLoadError, load_typed

logger = logging.getLogger(__name__)

DEFAULT_PRESETS_FILE = "strtpl.yaml"

_yaml = YAML(typ="safe")


def presets_path(root: Path) -> Path:
    return (root / DEFAULT_PRESETS_FILE).resolve()


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"YAML must be a mapping: {path}")
    return raw


def read_presets(path: Path) -> PresetsConfig:
    """
    Загружает пресеты из YAML файла.

    Отсутствующий файл даёт пустой набор пресетов.

    Raises:
        ConfigLoadError: Неизвестные ключи или неверные типы полей
    """
    raw = _read_yaml_map(path)
    cfg = load_typed(PresetsConfig, raw, path=str(path))
    logger.debug("Loaded %d preset(s) from %s", len(cfg.templates), path)
    return cfg


def list_presets(path: Path) -> List[str]:
    return sorted(read_presets(path).templates.keys())


def load_preset(path: Path, name: str) -> TemplatePreset:
    cfg = read_presets(path)
    preset = cfg.templates.get(name)
    if preset is None:
        available = ", ".join(sorted(cfg.templates)) or "(none)"
        raise ConfigLoadError(f"Preset '{name}' not found in {path}. Available: {available}")
    return preset


def builder_for(preset: TemplatePreset) -> Union[NamedPlaceholderTemplateBuilder, SinglePlaceholderTemplateBuilder]:
    """Билдер шаблона, настроенный по пресету; его можно донастроить перед build()."""
    builder: Union[NamedPlaceholderTemplateBuilder, SinglePlaceholderTemplateBuilder]
    if preset.kind is PresetKind.SINGLE:
        if preset.prefix is not None or preset.suffix is not None:
            raise ConfigLoadError("Preset of kind 'single' does not accept prefix/suffix")
        single = of(preset.template)
        if preset.placeholder is not None:
            single.placeholder(preset.placeholder)
        builder = single
    else:
        if preset.placeholder is not None:
            raise ConfigLoadError("Preset of kind 'named' does not accept placeholder")
        named = of_named(preset.template)
        if preset.prefix is not None:
            named.prefix(preset.prefix)
        if preset.suffix is not None:
            named.suffix(preset.suffix)
        builder = named

    if preset.escape is not None:
        builder.escape(preset.escape)
    if preset.features is not None:
        builder.features(*preset.features)
    builder.add_features(*preset.add_features)
    builder.remove_features(*preset.remove_features)
    if preset.default_value is not None:
        builder.default_value(preset.default_value)
    return builder


def build_template(preset: TemplatePreset) -> StrTemplate:
    return builder_for(preset).build()


def load_template(path: Path, name: str) -> StrTemplate:
    return build_template(load_preset(path, name))


def resolve_presets_file(config: Optional[str]) -> Path:
    """Путь к файлу пресетов: явный --config или strtpl.yaml в текущем каталоге."""
    if config:
        return Path(config).resolve()
    return presets_path(Path.cwd())
