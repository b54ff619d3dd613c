from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class Scope(str, Enum):
    LOCAL = "local"
    GLOBAL = "global"


class RepoAction(str, Enum):
    CLONED = "cloned"
    UPDATED = "updated"


class HostResultStatus(str, Enum):
    OK = "ok"
    NOOP = "noop"
    FAILED = "failed"


@dataclass(frozen=True)
class HostApplication:
    id: str
    display_name: str
    skills_folder: str
    mcp_config_file: str
    mcp_server_key: str = "mcpServers"
    global_mcp_server_key: Optional[str] = None
    global_mcp_config_file: Optional[str] = None
    nest_skills: bool = True

    @property
    def global_server_key(self) -> str:
        return self.global_mcp_server_key or self.mcp_server_key


@dataclass(frozen=True)
class ResolvedPaths:
    skills_dir: Path
    local_skills_dir: Path
    mcp_config: Path
    local_mcp_config: Path
    mcp_server_key: str
    global_mcp_server_key: str

    def skills_dir_for(self, scope: Scope) -> Path:
        return self.local_skills_dir if scope == Scope.LOCAL else self.skills_dir

    def mcp_config_for(self, scope: Scope) -> Path:
        return self.local_mcp_config if scope == Scope.LOCAL else self.mcp_config

    def server_key_for(self, scope: Scope) -> str:
        if scope == Scope.GLOBAL:
            return self.global_mcp_server_key
        return self.mcp_server_key


@dataclass(frozen=True)
class SkillEntry:
    npm_name: str
    name: str
    description: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "SkillEntry":
        if isinstance(raw, str):
            return cls(npm_name=raw, name=raw)
        npm_name = str(raw["npmName"])
        return cls(
            npm_name=npm_name,
            name=str(raw.get("name") or npm_name),
            description=str(raw.get("description") or ""),
        )


@dataclass(frozen=True)
class ServerDefinition:
    name: str
    command: str
    args: list[str] = field(default_factory=list)
    env: Optional[dict[str, str]] = None
    cwd: Optional[str] = None
    type: Optional[str] = None
    description: str = ""

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ServerDefinition":
        args = raw.get("args")
        env = raw.get("env")
        return cls(
            name=str(raw["name"]),
            command=str(raw["command"]),
            args=[str(item) for item in args] if isinstance(args, list) else [],
            env={str(k): str(v) for k, v in env.items()}
            if isinstance(env, dict)
            else None,
            cwd=str(raw["cwd"]) if raw.get("cwd") is not None else None,
            type=str(raw["type"]) if raw.get("type") is not None else None,
            description=str(raw.get("description") or ""),
        )

    def to_entry(self) -> dict[str, Any]:
        entry: dict[str, Any] = {"command": self.command, "args": list(self.args)}
        if self.env is not None:
            entry["env"] = dict(self.env)
        if self.cwd is not None:
            entry["cwd"] = self.cwd
        if self.type is not None:
            entry["type"] = self.type
        return entry


@dataclass(frozen=True)
class Profile:
    id: str
    display_name: str
    description: str = ""
    skills: list[str] = field(default_factory=list)
    mcp_servers: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SkillTarget:
    path: Path
    should_nest: bool = True


@dataclass
class SkillInstallResult:
    installed: int
    per_target: dict[Path, int] = field(default_factory=dict)


@dataclass
class SkillUninstallResult:
    removed: int


@dataclass
class McpUninstallResult:
    removed: int
    changed: bool


@dataclass
class LoadedConfig:
    document: dict[str, Any]
    recovered_from: Optional[Path] = None


@dataclass
class RepoResult:
    action: RepoAction
    dir: Path


@dataclass(frozen=True)
class GitMcpRequest:
    name: str
    repo_url: str
    type: str = "stdio"
    command: str = "node"
    args: list[str] = field(default_factory=list)
    build_command: Optional[str] = None


@dataclass
class HostResultRow:
    host: str
    status: HostResultStatus
    path: Optional[Path]
    detail: str


@dataclass
class DeployReport:
    skills: Optional[SkillInstallResult] = None
    skills_removed: Optional[int] = None
    skill_targets: list[Path] = field(default_factory=list)
    skills_error: Optional[str] = None
    mcp_rows: list[HostResultRow] = field(default_factory=list)
    repo: Optional[RepoResult] = None
    server: Optional[ServerDefinition] = None

    @property
    def failed(self) -> int:
        failures = sum(
            1 for row in self.mcp_rows if row.status == HostResultStatus.FAILED
        )
        return failures + (1 if self.skills_error else 0)
