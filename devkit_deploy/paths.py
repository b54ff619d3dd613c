"""Per-host, per-scope path resolution.

Everything here is pure path arithmetic over the host table; nothing touches
the filesystem.
"""

from pathlib import Path
from typing import Iterable

from devkit_deploy.constants import GLOBAL_REPO_ROOT, LOCAL_REPO_ROOT, MCP_REPOS_DIRNAME
from devkit_deploy.models import HostApplication, ResolvedPaths, Scope
from devkit_deploy.platform import PlatformInfo, application_support_root


def resolve_paths(
    project_root: Path, info: PlatformInfo, host: HostApplication
) -> ResolvedPaths:
    home = Path.home()
    if host.global_mcp_config_file:
        global_config = application_support_root(info) / host.global_mcp_config_file
    else:
        global_config = home / host.mcp_config_file

    return ResolvedPaths(
        skills_dir=home / host.skills_folder,
        local_skills_dir=project_root / host.skills_folder,
        mcp_config=global_config,
        local_mcp_config=project_root / host.mcp_config_file,
        mcp_server_key=host.mcp_server_key,
        global_mcp_server_key=host.global_server_key,
    )


def resolve_host_paths(
    project_root: Path, info: PlatformInfo, hosts: Iterable[HostApplication]
) -> dict[str, ResolvedPaths]:
    return {host.id: resolve_paths(project_root, info, host) for host in hosts}


def repo_root(scope: Scope, project_root: Path, info: PlatformInfo) -> Path:
    if scope == Scope.LOCAL:
        return project_root / LOCAL_REPO_ROOT
    return application_support_root(info) / GLOBAL_REPO_ROOT


def mcp_repos_root(scope: Scope, project_root: Path, info: PlatformInfo) -> Path:
    return repo_root(scope, project_root, info) / MCP_REPOS_DIRNAME


def mcp_repo_dir(
    scope: Scope, project_root: Path, info: PlatformInfo, name: str
) -> Path:
    return mcp_repos_root(scope, project_root, info) / name
