"""Merge and removal of MCP server entries in host JSON config files.

Only the sub-object stored under the host's server key is ever touched;
every other part of the document passes through unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Sequence

from devkit_deploy.errors import InvalidJsonFormatError
from devkit_deploy.models import LoadedConfig, McpUninstallResult, ServerDefinition
from devkit_deploy.utils import backup_file, read_json_safe, write_json

logger = logging.getLogger(__name__)

REPO_DIR_PLACEHOLDER = "{repoDir}"
MCP_REPO_DIR_PLACEHOLDER = "{mcpRepoDir}"


def load_config_checked(path: Path, strict: bool = False) -> LoadedConfig:
    payload, error = read_json_safe(path)
    if error is None and payload is None:
        return LoadedConfig(document={})
    if error is None and not isinstance(payload, dict):
        error = "top-level value must be a JSON object"
    if error is not None:
        if strict:
            raise InvalidJsonFormatError(path, error)
        backup_path = backup_file(path)
        logger.warning(
            "Could not parse %s (%s); original saved to %s", path, error, backup_path
        )
        return LoadedConfig(document={}, recovered_from=backup_path)
    return LoadedConfig(document=payload)


def load_config(path: Path) -> dict[str, Any]:
    return load_config_checked(path).document


def merge_servers(
    document: dict[str, Any], servers: Iterable[ServerDefinition], server_key: str
) -> dict[str, Any]:
    existing = document.get(server_key)
    merged_servers = dict(existing) if isinstance(existing, dict) else {}
    for server in servers:
        merged_servers[server.name] = server.to_entry()

    merged = dict(document)
    merged[server_key] = merged_servers
    return merged


def remove_servers(
    document: dict[str, Any], names: Iterable[str], server_key: str
) -> tuple[dict[str, Any], int]:
    existing = document.get(server_key)
    if not isinstance(existing, dict):
        return document, 0

    remaining = dict(existing)
    removed = 0
    for name in names:
        if name in remaining:
            del remaining[name]
            removed += 1

    if removed == 0:
        return document, 0

    updated = dict(document)
    if remaining:
        updated[server_key] = remaining
    else:
        del updated[server_key]
    return updated, removed


def install_mcp_config(
    path: Path,
    servers: Sequence[ServerDefinition],
    server_key: str,
    strict: bool = False,
) -> LoadedConfig:
    path.parent.mkdir(parents=True, exist_ok=True)
    loaded = load_config_checked(path, strict=strict)
    updated = merge_servers(loaded.document, servers, server_key)
    write_json(path, updated)
    logger.info("Wrote %d server(s) under %r to %s", len(servers), server_key, path)
    return LoadedConfig(document=updated, recovered_from=loaded.recovered_from)


def uninstall_mcp_config(
    path: Path, names: Sequence[str], server_key: str
) -> McpUninstallResult:
    if not path.exists():
        return McpUninstallResult(removed=0, changed=False)

    document = load_config(path)
    updated, removed = remove_servers(document, names, server_key)
    changed = updated is not document
    if changed:
        write_json(path, updated)
        logger.info("Removed %d server(s) under %r from %s", removed, server_key, path)
    return McpUninstallResult(removed=removed, changed=changed)


def resolve_server_args(
    servers: Iterable[ServerDefinition], repo_dir: Path, mcp_repo_dir: Path
) -> list[ServerDefinition]:
    resolved: list[ServerDefinition] = []
    for server in servers:
        args = [
            arg.replace(REPO_DIR_PLACEHOLDER, str(repo_dir)).replace(
                MCP_REPO_DIR_PLACEHOLDER, str(mcp_repo_dir)
            )
            for arg in server.args
        ]
        resolved.append(replace(server, args=args))
    return resolved
