"""Parse YAML frontmatter of installed skill documents."""

from __future__ import annotations

import re
from pathlib import Path

import yaml

from devkit_deploy.constants import SKILL_DOC_FILENAME
from devkit_deploy.skills.models import InstalledSkill, SkillMetadata

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


def parse_frontmatter(text: str) -> dict:
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}
    try:
        raw = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        return {}
    return raw if isinstance(raw, dict) else {}


def parse_installed_skill(path: Path) -> InstalledSkill:
    name = path.parent.name if path.name == SKILL_DOC_FILENAME else path.stem
    try:
        raw = parse_frontmatter(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError:
        raw = {}

    metadata = SkillMetadata(
        name=str(raw.get("name", name)),
        description=str(raw.get("description", "")),
        version=str(raw.get("version", "")),
    )
    return InstalledSkill(name=name, path=path.parent, metadata=metadata)
