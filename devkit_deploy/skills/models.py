"""Installed skill data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SkillMetadata:
    name: str = ""
    description: str = ""
    version: str = ""


@dataclass(frozen=True)
class InstalledSkill:
    name: str
    path: Path
    metadata: SkillMetadata
