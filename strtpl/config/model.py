from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..template.features import Feature


class PresetKind(enum.Enum):
    NAMED = "named"
    SINGLE = "single"


@dataclass
class TemplatePreset:
    """
    Описание шаблона в файле пресетов.

    Для kind=named используются prefix/suffix, для kind=single — placeholder.
    features полностью заменяет набор стратегий, add/remove применяются после.
    """
    template: str
    kind: PresetKind = PresetKind.NAMED
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    placeholder: Optional[str] = None
    escape: Optional[str] = None
    features: Optional[List[Feature]] = None
    add_features: List[Feature] = field(default_factory=list)
    remove_features: List[Feature] = field(default_factory=list)
    default_value: Optional[str] = None
    description: Optional[str] = None


@dataclass
class PresetsConfig:
    templates: Dict[str, TemplatePreset] = field(default_factory=dict)
