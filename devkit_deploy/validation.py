"""Input checks for git-sourced MCP servers."""

import re
from dataclasses import dataclass
from typing import Optional

_MCP_NAME_RE = re.compile(r"[a-z0-9-]+", re.IGNORECASE)
_GIT_URL_RE = re.compile(
    r"https://(github\.com|gitlab\.com)/[\w-]+/[\w-]+(\.git)?"
)


@dataclass(frozen=True)
class GitUrlCheck:
    valid: bool
    provider: Optional[str] = None
    error: Optional[str] = None


def validate_mcp_name(name: Optional[str]) -> Optional[str]:
    if not name or not name.strip():
        return "MCP name is required"
    if " " in name:
        return "MCP name cannot contain spaces"
    if not _MCP_NAME_RE.fullmatch(name):
        return "MCP name can only contain letters, numbers, and hyphens"
    return None


def validate_git_url(url: Optional[str]) -> GitUrlCheck:
    if not url or not url.strip():
        return GitUrlCheck(valid=False, error="Git repository URL is required")

    match = _GIT_URL_RE.fullmatch(url)
    if match is None:
        if "github.com" in url or "gitlab.com" in url:
            return GitUrlCheck(
                valid=False,
                error=(
                    "Invalid Git URL format. Must be: https://github.com/user/repo.git "
                    "or https://gitlab.com/user/repo.git"
                ),
            )
        return GitUrlCheck(
            valid=False, error="Only GitHub and GitLab repositories are supported"
        )

    provider = "github" if "github" in match.group(1) else "gitlab"
    return GitUrlCheck(valid=True, provider=provider)


def parse_args_string(text: Optional[str]) -> list[str]:
    if not text or not text.strip():
        return []
    return [item.strip() for item in text.split(",") if item.strip()]
