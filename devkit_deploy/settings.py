"""Installer catalog: host table, skills, MCP servers and profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from jsonschema import Draft202012Validator

from devkit_deploy.constants import DEFAULT_SKILLS_CANDIDATES
from devkit_deploy.errors import (
    InvalidConfigSchemaError,
    InvalidJsonFormatError,
    MissingConfigFileError,
    UnknownHostError,
    UnknownProfileError,
)
from devkit_deploy.models import HostApplication, Profile, ServerDefinition, SkillEntry
from devkit_deploy.utils import read_json_safe

CONFIG_DIR = Path(__file__).resolve().parent / "config"
DEFAULT_SETTINGS_PATH = CONFIG_DIR / "settings.json"
SCHEMA_PATH = CONFIG_DIR / "settings.schema.json"


def load_json_schema(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


@dataclass(frozen=True)
class Settings:
    hosts: tuple[HostApplication, ...]
    skills: tuple[SkillEntry, ...]
    mcp_servers: tuple[ServerDefinition, ...]
    profiles: tuple[Profile, ...] = ()
    skills_folder: Optional[str] = None
    readme_template: Optional[str] = None
    support_local_mcp: bool = True
    git_skills_candidates: tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_SKILLS_CANDIDATES
    )

    def host(self, host_id: str) -> HostApplication:
        for host in self.hosts:
            if host.id == host_id:
                return host
        raise UnknownHostError(host_id)

    def select_hosts(self, host_ids: Iterable[str] | None) -> list[HostApplication]:
        if not host_ids:
            return list(self.hosts)
        selected: list[HostApplication] = []
        for host_id in host_ids:
            host = self.host(host_id)
            if host not in selected:
                selected.append(host)
        return selected

    def profile(self, profile_id: str) -> Profile:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        raise UnknownProfileError(profile_id)

    def skills_for(self, profile_id: str | None) -> list[SkillEntry]:
        if profile_id is None:
            return list(self.skills)
        wanted = set(self.profile(profile_id).skills)
        return [skill for skill in self.skills if skill.npm_name in wanted]

    def servers_for(self, profile_id: str | None) -> list[ServerDefinition]:
        if profile_id is None:
            return list(self.mcp_servers)
        wanted = set(self.profile(profile_id).mcp_servers)
        return [server for server in self.mcp_servers if server.name in wanted]


def _host_from_raw(raw: dict[str, Any]) -> HostApplication:
    return HostApplication(
        id=raw["id"],
        display_name=raw["displayName"],
        skills_folder=raw["skillsFolder"],
        mcp_config_file=raw["mcpConfigFile"],
        mcp_server_key=raw.get("mcpServerKey", "mcpServers"),
        global_mcp_server_key=raw.get("globalMcpServerKey"),
        global_mcp_config_file=raw.get("globalMcpConfigFile"),
        nest_skills=bool(raw.get("nestSkills", True)),
    )


def _profile_from_raw(raw: dict[str, Any]) -> Profile:
    return Profile(
        id=raw["id"],
        display_name=raw.get("displayName", raw["id"]),
        description=raw.get("description", ""),
        skills=[str(item) for item in raw.get("skills", [])],
        mcp_servers=[str(item) for item in raw.get("mcpServers", [])],
    )


def parse_settings(payload: Any, path: Path = DEFAULT_SETTINGS_PATH) -> Settings:
    validator = Draft202012Validator(load_json_schema(SCHEMA_PATH))
    error = next(iter(validator.iter_errors(payload)), None)
    if error is not None:
        raise InvalidConfigSchemaError(path, format_schema_error(error))

    candidates = payload.get("gitSkillsCandidates")
    return Settings(
        hosts=tuple(_host_from_raw(item) for item in payload["hostApplications"]),
        skills=tuple(SkillEntry.from_raw(item) for item in payload.get("skills", [])),
        mcp_servers=tuple(
            ServerDefinition.from_raw(item) for item in payload.get("mcpServers", [])
        ),
        profiles=tuple(_profile_from_raw(item) for item in payload.get("profiles", [])),
        skills_folder=payload.get("skillsFolder") or None,
        readme_template=payload.get("readmeTemplate") or None,
        support_local_mcp=bool(payload.get("supportLocalMcpInstallation", True)),
        git_skills_candidates=tuple(candidates)
        if candidates
        else DEFAULT_SKILLS_CANDIDATES,
    )


def load_settings(path: Path | None = None) -> Settings:
    path = path or DEFAULT_SETTINGS_PATH
    payload, error = read_json_safe(path)
    if error is not None:
        raise InvalidJsonFormatError(path, error)
    if payload is None:
        raise MissingConfigFileError(path)
    return parse_settings(payload, path)
