"""Install and uninstall skills and MCP servers across selected hosts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from devkit_deploy.errors import DeployAppError
from devkit_deploy.git_repo import GitRepoService, copy_skills, find_skills_dir
from devkit_deploy.mcp_config import (
    install_mcp_config,
    resolve_server_args,
    uninstall_mcp_config,
)
from devkit_deploy.models import (
    DeployReport,
    GitMcpRequest,
    HostApplication,
    HostResultRow,
    HostResultStatus,
    ResolvedPaths,
    Scope,
    ServerDefinition,
    SkillEntry,
    SkillTarget,
)
from devkit_deploy.paths import mcp_repo_dir, mcp_repos_root, repo_root, resolve_host_paths
from devkit_deploy.platform import PlatformInfo, detect_platform
from devkit_deploy.runner import CommandRunner, SubprocessRunner
from devkit_deploy.settings import Settings
from devkit_deploy.skills.installer import (
    cleanup_temp,
    install_skills,
    list_installed_skills,
    make_temp_dir,
    skills_dir_for_target,
    uninstall_skills,
)
from devkit_deploy.skills.models import InstalledSkill

logger = logging.getLogger(__name__)


class DeployService:
    def __init__(
        self,
        settings: Settings,
        project_root: Path,
        platform_info: Optional[PlatformInfo] = None,
        runner: Optional[CommandRunner] = None,
        temp_dir_factory: Callable[[], Path] = make_temp_dir,
    ) -> None:
        self.settings = settings
        self.project_root = project_root
        self.platform_info = platform_info or detect_platform()
        self.runner = runner or SubprocessRunner()
        self.temp_dir_factory = temp_dir_factory
        self.paths: dict[str, ResolvedPaths] = resolve_host_paths(
            project_root, self.platform_info, settings.hosts
        )

    def skill_targets(
        self, hosts: Sequence[HostApplication], scope: Scope
    ) -> list[SkillTarget]:
        targets: list[SkillTarget] = []
        seen: set[Path] = set()
        for host in hosts:
            path = self.paths[host.id].skills_dir_for(scope)
            if path in seen:
                continue
            seen.add(path)
            targets.append(SkillTarget(path=path, should_nest=host.nest_skills))
        return targets

    def install(
        self,
        hosts: Sequence[HostApplication],
        skills_scope: Scope,
        mcp_scope: Scope,
        skills: Sequence[SkillEntry],
        servers: Sequence[ServerDefinition],
        *,
        include_skills: bool = True,
        include_mcp: bool = True,
        strict: bool = False,
    ) -> DeployReport:
        report = DeployReport()
        if include_skills:
            self._install_skills(report, hosts, skills_scope, skills)
        if include_mcp:
            resolved = resolve_server_args(
                servers,
                repo_root(mcp_scope, self.project_root, self.platform_info),
                mcp_repos_root(mcp_scope, self.project_root, self.platform_info),
            )
            report.mcp_rows = self._write_servers(hosts, mcp_scope, resolved, strict)
        return report

    def uninstall(
        self,
        hosts: Sequence[HostApplication],
        skills_scope: Scope,
        mcp_scope: Scope,
        skills: Sequence[SkillEntry],
        servers: Sequence[ServerDefinition],
        *,
        include_skills: bool = True,
        include_mcp: bool = True,
    ) -> DeployReport:
        report = DeployReport()
        if include_skills:
            targets = self.skill_targets(hosts, skills_scope)
            report.skill_targets = [target.path for target in targets]
            try:
                result = uninstall_skills(
                    [skill.npm_name for skill in skills],
                    targets,
                    self.settings.skills_folder,
                )
                report.skills_removed = result.removed
            except OSError as exc:
                report.skills_error = str(exc)

        if include_mcp:
            names = [server.name for server in servers]
            report.mcp_rows = self._remove_servers(hosts, mcp_scope, names)
        return report

    def install_git_mcp(
        self,
        request: GitMcpRequest,
        hosts: Sequence[HostApplication],
        repo_scope: Scope,
        mcp_scope: Scope,
        skills_scope: Optional[Scope] = None,
    ) -> DeployReport:
        report = DeployReport()
        repo_dir = mcp_repo_dir(
            repo_scope, self.project_root, self.platform_info, request.name
        )
        report.repo, server = GitRepoService(self.runner).install_git_mcp(
            request, repo_dir
        )
        report.server = server

        if skills_scope is not None:
            source = find_skills_dir(repo_dir, self.settings.git_skills_candidates)
            if source is None:
                logger.info("No bundled skills found in %s", repo_dir)
            else:
                targets = self.skill_targets(hosts, skills_scope)
                report.skill_targets = [target.path for target in targets]
                try:
                    for target in targets:
                        copy_skills(
                            source,
                            skills_dir_for_target(target, self.settings.skills_folder),
                        )
                except OSError as exc:
                    report.skills_error = str(exc)

        report.mcp_rows = self._write_servers(hosts, mcp_scope, [server], strict=False)
        return report

    def status(
        self, hosts: Sequence[HostApplication], skills_scope: Scope
    ) -> dict[str, list[InstalledSkill]]:
        installed: dict[str, list[InstalledSkill]] = {}
        for host in hosts:
            target = SkillTarget(
                path=self.paths[host.id].skills_dir_for(skills_scope),
                should_nest=host.nest_skills,
            )
            skills_dir = skills_dir_for_target(target, self.settings.skills_folder)
            installed[host.id] = list_installed_skills(skills_dir)
        return installed

    def _install_skills(
        self,
        report: DeployReport,
        hosts: Sequence[HostApplication],
        scope: Scope,
        skills: Sequence[SkillEntry],
    ) -> None:
        targets = self.skill_targets(hosts, scope)
        report.skill_targets = [target.path for target in targets]
        if not skills or not targets:
            return

        temp_dir = self.temp_dir_factory()
        try:
            report.skills = install_skills(
                [skill.npm_name for skill in skills],
                targets,
                temp_dir,
                self.settings.skills_folder,
                self.settings.readme_template,
                runner=self.runner,
            )
        except (DeployAppError, OSError) as exc:
            report.skills_error = str(exc)
        finally:
            try:
                cleanup_temp(temp_dir)
            except OSError as exc:
                logger.warning("Could not remove %s: %s", temp_dir, exc)

    def _write_servers(
        self,
        hosts: Sequence[HostApplication],
        scope: Scope,
        servers: Sequence[ServerDefinition],
        strict: bool,
    ) -> list[HostResultRow]:
        rows: list[HostResultRow] = []
        visited: set[tuple[Path, str]] = set()
        for host in hosts:
            paths = self.paths[host.id]
            config_path = paths.mcp_config_for(scope)
            server_key = paths.server_key_for(scope)
            if (config_path, server_key) in visited:
                rows.append(
                    HostResultRow(
                        host.id, HostResultStatus.NOOP, config_path, "shared config"
                    )
                )
                continue
            visited.add((config_path, server_key))

            try:
                loaded = install_mcp_config(config_path, servers, server_key, strict)
            except (DeployAppError, OSError) as exc:
                rows.append(
                    HostResultRow(host.id, HostResultStatus.FAILED, config_path, str(exc))
                )
                continue

            detail = f"{len(servers)} server(s) under {server_key!r}"
            if loaded.recovered_from is not None:
                detail += f"; unreadable config saved to {loaded.recovered_from.name}"
            rows.append(HostResultRow(host.id, HostResultStatus.OK, config_path, detail))
        return rows

    def _remove_servers(
        self, hosts: Sequence[HostApplication], scope: Scope, names: Sequence[str]
    ) -> list[HostResultRow]:
        rows: list[HostResultRow] = []
        visited: set[tuple[Path, str]] = set()
        for host in hosts:
            paths = self.paths[host.id]
            config_path = paths.mcp_config_for(scope)
            server_key = paths.server_key_for(scope)
            if (config_path, server_key) in visited:
                rows.append(
                    HostResultRow(
                        host.id, HostResultStatus.NOOP, config_path, "shared config"
                    )
                )
                continue
            visited.add((config_path, server_key))

            try:
                result = uninstall_mcp_config(config_path, names, server_key)
            except OSError as exc:
                rows.append(
                    HostResultRow(host.id, HostResultStatus.FAILED, config_path, str(exc))
                )
                continue

            status = HostResultStatus.OK if result.changed else HostResultStatus.NOOP
            rows.append(
                HostResultRow(
                    host.id, status, config_path, f"removed {result.removed} entr(ies)"
                )
            )
        return rows
