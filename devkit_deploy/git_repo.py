"""Clone, update and build MCP servers sourced from git repositories."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

from devkit_deploy.constants import GIT_DIRNAME
from devkit_deploy.errors import RepoNotGitError
from devkit_deploy.models import (
    GitMcpRequest,
    RepoAction,
    RepoResult,
    ServerDefinition,
)
from devkit_deploy.runner import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class GitRepoService:
    def __init__(self, runner: Optional[CommandRunner] = None) -> None:
        self.runner = runner or SubprocessRunner()

    def ensure_repo(self, url: str, repo_dir: Path) -> RepoResult:
        if repo_dir.exists():
            if not (repo_dir / GIT_DIRNAME).exists():
                raise RepoNotGitError(repo_dir)
            logger.info("Updating %s", repo_dir)
            self.runner.run(["git", "-C", str(repo_dir), "pull", "--ff-only"])
            return RepoResult(action=RepoAction.UPDATED, dir=repo_dir)

        repo_dir.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Cloning %s into %s", url, repo_dir)
        self.runner.run(["git", "clone", "--depth", "1", url, str(repo_dir)])
        return RepoResult(action=RepoAction.CLONED, dir=repo_dir)

    def build_mcp(
        self, repo_dir: Path, build_commands: str | Sequence[str] | None
    ) -> None:
        if not build_commands:
            return
        if isinstance(build_commands, str):
            build_commands = [build_commands]
        for command in build_commands:
            argv = command.split()
            if not argv:
                continue
            logger.info("Building in %s: %s", repo_dir, command)
            self.runner.run(argv, cwd=repo_dir)

    def install_git_mcp(
        self, request: GitMcpRequest, repo_dir: Path
    ) -> tuple[RepoResult, ServerDefinition]:
        result = self.ensure_repo(request.repo_url, repo_dir)
        self.build_mcp(repo_dir, request.build_command)
        return result, server_from_request(request, repo_dir)


def server_from_request(request: GitMcpRequest, repo_dir: Path) -> ServerDefinition:
    args: list[str] = []
    if request.args:
        # first argument is an entry point relative to the repository
        args = [str(repo_dir / request.args[0]), *request.args[1:]]
    return ServerDefinition(
        name=request.name,
        command=request.command,
        args=args,
        type=request.type,
    )


def find_skills_dir(repo_dir: Path, candidates: Sequence[str]) -> Optional[Path]:
    for candidate in candidates:
        full_path = repo_dir / candidate
        if full_path.exists():
            return full_path
    return None


def copy_skills(source_dir: Path, target_dir: Path) -> None:
    target_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source_dir, target_dir, dirs_exist_ok=True)
