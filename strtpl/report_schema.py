from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PlaceholderInfo(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )
    kind: str = Field(..., description="positional | indexed | named")
    key: str
    text: str


class MatchResult(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )
    template: str
    input: str
    matched: bool
    values: Dict[str, Optional[str]] = Field(default_factory=dict)
    sequence: List[Optional[str]] = Field(default_factory=list)


class PresetInfo(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )
    name: str
    kind: str
    template: str
    description: Optional[str] = None
    placeholders: List[PlaceholderInfo] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)


class PresetsList(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )
    config_path: str = Field(..., alias="configPath")
    presets: List[PresetInfo] = Field(default_factory=list)
