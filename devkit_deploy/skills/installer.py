"""Stage skill packages through npm and place their documents into hosts."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

from devkit_deploy.constants import (
    NODE_MODULES_DIRNAME,
    NPM_INSTALL_ARGS,
    PACKAGE_MANIFEST_FILENAME,
    SKILL_DOC_FILENAME,
    SKILL_PACKAGE_SUFFIX,
    TEMP_DIR_PREFIX,
    TEMP_MANIFEST_NAME,
    USAGE_GUIDE_FILENAME,
)
from devkit_deploy.errors import MissingConfigFileError
from devkit_deploy.models import SkillInstallResult, SkillTarget, SkillUninstallResult
from devkit_deploy.platform import temp_root
from devkit_deploy.runner import CommandRunner, SubprocessRunner
from devkit_deploy.skills.models import InstalledSkill
from devkit_deploy.skills.parser import parse_installed_skill
from devkit_deploy.utils import now_millis, write_json

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def skill_folder_name(package_name: str) -> str:
    """Directory name for an installed skill: ``@scope/foo-skill`` -> ``foo``."""
    base = package_name.rsplit("/", 1)[-1]
    if base.endswith(SKILL_PACKAGE_SUFFIX) and len(base) > len(SKILL_PACKAGE_SUFFIX):
        return base[: -len(SKILL_PACKAGE_SUFFIX)]
    return base


def skills_dir_for_target(target: SkillTarget, skills_folder: Optional[str]) -> Path:
    if skills_folder and target.should_nest:
        return target.path / skills_folder
    return target.path


def temp_manifest(package_names: Sequence[str]) -> dict:
    return {
        "name": TEMP_MANIFEST_NAME,
        "version": "1.0.0",
        "private": True,
        "dependencies": {name: "latest" for name in package_names},
    }


def make_temp_dir(root: Optional[Path] = None) -> Path:
    return (root or temp_root()) / f"{TEMP_DIR_PREFIX}{now_millis()}"


def _unique_targets(targets: Sequence[SkillTarget]) -> list[SkillTarget]:
    seen: set[Path] = set()
    unique: list[SkillTarget] = []
    for target in targets:
        if target.path in seen:
            continue
        seen.add(target.path)
        unique.append(target)
    return unique


def _usage_guide_source(readme_template: Optional[str], templates_dir: Path) -> Optional[Path]:
    if not readme_template:
        return None
    source = templates_dir / readme_template
    if not source.is_file():
        raise MissingConfigFileError(source)
    return source


def install_skills(
    package_names: Sequence[str],
    targets: Sequence[SkillTarget],
    temp_dir: Path,
    skills_folder: Optional[str] = None,
    readme_template: Optional[str] = None,
    *,
    runner: Optional[CommandRunner] = None,
    templates_dir: Path = TEMPLATES_DIR,
    usage_guide_name: str = USAGE_GUIDE_FILENAME,
) -> SkillInstallResult:
    runner = runner or SubprocessRunner()
    targets = _unique_targets(targets)
    guide_source = _usage_guide_source(readme_template, templates_dir)

    temp_dir.mkdir(parents=True, exist_ok=True)
    write_json(temp_dir / PACKAGE_MANIFEST_FILENAME, temp_manifest(package_names))
    logger.info("Installing %d skill package(s) into %s", len(package_names), temp_dir)
    runner.run(["npm", *NPM_INSTALL_ARGS], cwd=temp_dir)

    modules_dir = temp_dir / NODE_MODULES_DIRNAME
    per_target: dict[Path, int] = {}
    for target in targets:
        skills_dir = skills_dir_for_target(target, skills_folder)
        skills_dir.mkdir(parents=True, exist_ok=True)

        placed = 0
        for package_name in package_names:
            doc = modules_dir / package_name / SKILL_DOC_FILENAME
            if not doc.is_file():
                logger.debug("No %s shipped by %s", SKILL_DOC_FILENAME, package_name)
                continue
            skill_dir = skills_dir / skill_folder_name(package_name)
            skill_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(doc, skill_dir / SKILL_DOC_FILENAME)
            placed += 1

        if guide_source is not None:
            shutil.copyfile(guide_source, skills_dir / usage_guide_name)
        per_target[target.path] = placed
        logger.info("Placed %d skill(s) in %s", placed, skills_dir)

    # floor of the per-target mean; per_target holds the exact counts
    total = sum(per_target.values())
    installed = total // len(targets) if targets else 0
    return SkillInstallResult(installed=installed, per_target=per_target)


def uninstall_skills(
    package_names: Sequence[str],
    targets: Sequence[SkillTarget],
    skills_folder: Optional[str] = None,
    *,
    usage_guide_name: str = USAGE_GUIDE_FILENAME,
) -> SkillUninstallResult:
    removed = 0
    for target in _unique_targets(targets):
        skills_dir = skills_dir_for_target(target, skills_folder)
        for package_name in package_names:
            skill_dir = skills_dir / skill_folder_name(package_name)
            if skill_dir.is_dir():
                shutil.rmtree(skill_dir)
                removed += 1

        guide = skills_dir / usage_guide_name
        if guide.is_file():
            guide.unlink()

        # never remove a shared folder still holding foreign content
        if skills_dir != target.path and skills_dir.is_dir():
            if not any(skills_dir.iterdir()):
                skills_dir.rmdir()
    return SkillUninstallResult(removed=removed)


def cleanup_temp(temp_dir: Path) -> None:
    if not temp_dir.exists():
        return
    shutil.rmtree(temp_dir)
    logger.debug("Removed temporary directory %s", temp_dir)


def list_installed_skills(skills_dir: Path) -> list[InstalledSkill]:
    if not skills_dir.is_dir():
        return []
    skills: list[InstalledSkill] = []
    for doc in sorted(skills_dir.glob(f"*/{SKILL_DOC_FILENAME}")):
        skills.append(parse_installed_skill(doc))
    return skills
