from pathlib import Path

from devkit_deploy.models import HostApplication, Scope
from devkit_deploy.paths import mcp_repo_dir, resolve_host_paths
from devkit_deploy.platform import detect_platform

CURSOR = HostApplication(
    id="cursor",
    display_name="Cursor",
    skills_folder=".cursor/skills",
    mcp_config_file=".cursor/mcp.json",
)
VSCODE = HostApplication(
    id="vscode",
    display_name="VSCode",
    skills_folder=".github/skills",
    mcp_config_file=".vscode/mcp.json",
    global_mcp_config_file="Code/User/mcp.json",
    mcp_server_key="servers",
    global_mcp_server_key="mcp.servers",
)


def test_resolve_paths_for_home_relative_host(tmp_path: Path, project_root: Path) -> None:
    paths = resolve_host_paths(project_root, detect_platform("linux"), [CURSOR])["cursor"]

    assert paths.skills_dir == tmp_path / ".cursor" / "skills"
    assert paths.local_skills_dir == project_root / ".cursor" / "skills"
    assert paths.mcp_config == tmp_path / ".cursor" / "mcp.json"
    assert paths.local_mcp_config == project_root / ".cursor" / "mcp.json"
    assert paths.mcp_server_key == "mcpServers"
    assert paths.global_mcp_server_key == "mcpServers"


def test_resolve_paths_uses_app_support_for_global_config(
    tmp_path: Path, project_root: Path
) -> None:
    mac = resolve_host_paths(project_root, detect_platform("darwin"), [VSCODE])["vscode"]
    linux = resolve_host_paths(project_root, detect_platform("linux"), [VSCODE])["vscode"]

    assert mac.mcp_config == (
        tmp_path / "Library" / "Application Support" / "Code" / "User" / "mcp.json"
    )
    assert linux.mcp_config == tmp_path / ".config" / "Code" / "User" / "mcp.json"
    assert linux.local_mcp_config == project_root / ".vscode" / "mcp.json"


def test_server_keys_pass_through_per_scope(project_root: Path) -> None:
    paths = resolve_host_paths(project_root, detect_platform("linux"), [VSCODE])["vscode"]

    assert paths.server_key_for(Scope.LOCAL) == "servers"
    assert paths.server_key_for(Scope.GLOBAL) == "mcp.servers"
    assert paths.skills_dir_for(Scope.LOCAL) == paths.local_skills_dir
    assert paths.mcp_config_for(Scope.GLOBAL) == paths.mcp_config


def test_resolve_never_touches_filesystem(tmp_path: Path) -> None:
    project = tmp_path / "missing-project"

    resolve_host_paths(project, detect_platform("linux"), [CURSOR, VSCODE])

    assert not project.exists()
    assert not (tmp_path / ".cursor").exists()


def test_mcp_repo_dir_per_scope(tmp_path: Path, project_root: Path) -> None:
    info = detect_platform("linux")

    assert mcp_repo_dir(Scope.LOCAL, project_root, info, "docs") == (
        project_root / ".devkit-deploy" / "mcp-repos" / "docs"
    )
    assert mcp_repo_dir(Scope.GLOBAL, project_root, info, "docs") == (
        tmp_path / ".config" / "devkit-deploy" / "mcp-repos" / "docs"
    )
