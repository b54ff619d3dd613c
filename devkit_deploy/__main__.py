import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from devkit_deploy import __version__
from devkit_deploy.errors import DeployAppError
from devkit_deploy.models import GitMcpRequest, HostApplication, Scope
from devkit_deploy.platform import detect_platform, os_label
from devkit_deploy.runner import CommandRunner, SubprocessRunner
from devkit_deploy.service import DeployService
from devkit_deploy.settings import Settings, load_settings
from devkit_deploy.tui import DeployConsoleUI
from devkit_deploy.validation import parse_args_string, validate_git_url, validate_mcp_name


SCOPE_VALUES = [scope.value for scope in Scope]
TRANSPORT_TYPES = ["stdio", "http", "sse"]


def _make_runner() -> CommandRunner:
    return SubprocessRunner()


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("devkit_deploy")
    if not verbose or logger.handlers:
        return
    logger.setLevel(logging.DEBUG)
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _scope_option(name: str, help_text: str, default: Optional[str] = None) -> Callable:
    return click.option(
        name,
        type=click.Choice(SCOPE_VALUES, case_sensitive=False),
        default=default,
        show_default=default is not None,
        help=help_text,
    )


def _host_option() -> Callable:
    return click.option(
        "--host",
        "host_ids",
        multiple=True,
        help="Host application id (repeatable). Defaults to every configured host.",
    )


def _settings_from_obj(obj: Dict[str, Any]) -> Settings:
    try:
        return load_settings(obj.get("settings_path"))
    except DeployAppError as exc:
        raise click.ClickException(str(exc))


def _service_from_obj(obj: Dict[str, Any], settings: Settings) -> DeployService:
    return DeployService(
        settings=settings,
        project_root=obj["project_root"],
        platform_info=detect_platform(),
        runner=_make_runner(),
    )


def _select_hosts(settings: Settings, host_ids: tuple[str, ...]) -> list[HostApplication]:
    try:
        hosts = settings.select_hosts(host_ids)
    except DeployAppError as exc:
        raise click.ClickException(str(exc))
    if not hosts:
        raise click.ClickException(
            "No host applications selected. At least one host application is required."
        )
    return hosts


def _mcp_scope(settings: Settings, value: Optional[str]) -> Scope:
    if value is None:
        return Scope.LOCAL if settings.support_local_mcp else Scope.GLOBAL
    scope = Scope(value.lower())
    if scope == Scope.LOCAL and not settings.support_local_mcp:
        raise click.ClickException("Local MCP installation is not supported.")
    return scope


def _header(ui: DeployConsoleUI, subtitle: str) -> None:
    ui.render_header(f"devkit-deploy v{__version__}", subtitle, os_label(detect_platform()))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Alternate settings catalog (JSON).",
)
@click.option(
    "--project-root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Project root for local scope. Defaults to the current directory.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every step.")
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    settings_path: Optional[Path],
    project_root: Optional[Path],
    verbose: bool,
) -> None:
    """Install skills and MCP servers across host applications."""
    _configure_logging(verbose)
    ctx.obj = {
        "settings_path": settings_path,
        "project_root": (project_root or Path.cwd()).expanduser().resolve(),
    }


@cli.command(help="Install skills and MCP server configs.")
@_scope_option("--scope", "Where to install skills.", default=Scope.LOCAL.value)
@_scope_option("--mcp-scope", "Where to write MCP configs.")
@_host_option()
@click.option("--profile", default=None, help="Install only a profile's selection.")
@click.option("--no-skills", is_flag=True, help="Skip skill installation.")
@click.option("--no-mcp", is_flag=True, help="Skip MCP configuration.")
@click.option("--strict", is_flag=True, help="Abort on unreadable MCP configs.")
@click.pass_obj
def install(
    obj: Dict[str, Any],
    scope: str,
    mcp_scope: Optional[str],
    host_ids: tuple[str, ...],
    profile: Optional[str],
    no_skills: bool,
    no_mcp: bool,
    strict: bool,
) -> None:
    ui = DeployConsoleUI(Console())
    settings = _settings_from_obj(obj)
    hosts = _select_hosts(settings, host_ids)
    skills_scope = Scope(scope.lower())
    resolved_mcp_scope = _mcp_scope(settings, mcp_scope)
    try:
        skills = settings.skills_for(profile)
        servers = settings.servers_for(profile)
    except DeployAppError as exc:
        raise click.ClickException(str(exc))

    _header(ui, "Install skills + MCP servers across host applications")
    ui.render_scopes([("Skills scope", skills_scope), ("MCP scope", resolved_mcp_scope)])

    service = _service_from_obj(obj, settings)
    report = service.install(
        hosts,
        skills_scope,
        resolved_mcp_scope,
        skills,
        servers,
        include_skills=not no_skills,
        include_mcp=not no_mcp,
        strict=strict,
    )
    ui.render_install_report(report, resolved_mcp_scope)

    if report.failed:
        raise click.exceptions.Exit(1)
    ui.render_done("All done. Your skills and MCP servers are ready.")


@cli.command(help="Remove skills and MCP servers installed by this tool.")
@_scope_option("--scope", "Where to remove skills from.", default=Scope.LOCAL.value)
@_scope_option("--mcp-scope", "Where to remove MCP configs from.")
@_host_option()
@click.option("--no-skills", is_flag=True, help="Keep installed skills.")
@click.option("--no-mcp", is_flag=True, help="Keep MCP configuration.")
@click.pass_obj
def uninstall(
    obj: Dict[str, Any],
    scope: str,
    mcp_scope: Optional[str],
    host_ids: tuple[str, ...],
    no_skills: bool,
    no_mcp: bool,
) -> None:
    if no_skills and no_mcp:
        raise click.ClickException("No items selected to uninstall.")

    ui = DeployConsoleUI(Console())
    settings = _settings_from_obj(obj)
    hosts = _select_hosts(settings, host_ids)
    skills_scope = Scope(scope.lower())
    resolved_mcp_scope = _mcp_scope(settings, mcp_scope)

    _header(ui, "Uninstall skills + MCP servers installed by this tool")
    service = _service_from_obj(obj, settings)
    report = service.uninstall(
        hosts,
        skills_scope,
        resolved_mcp_scope,
        list(settings.skills),
        list(settings.mcp_servers),
        include_skills=not no_skills,
        include_mcp=not no_mcp,
    )
    ui.render_uninstall_report(report, resolved_mcp_scope)

    if report.failed:
        raise click.exceptions.Exit(1)
    ui.render_done("Uninstall complete.")


@cli.command("git-mcp", help="Install an MCP server from a Git repository.")
@click.option("--name", required=True, help="MCP name (letters, digits, hyphens).")
@click.option("--repo-url", required=True, help="GitHub or GitLab HTTPS URL.")
@click.option(
    "--type",
    "transport",
    type=click.Choice(TRANSPORT_TYPES),
    default="stdio",
    show_default=True,
)
@click.option("--command", "server_command", default="node", show_default=True)
@click.option(
    "--args",
    "args_text",
    default="",
    help="Comma-separated arguments; the first is relative to the repository.",
)
@click.option("--build-command", default="npm install", show_default=True)
@_scope_option("--repo-scope", "Where to clone the repository.", default=Scope.LOCAL.value)
@_scope_option("--mcp-scope", "Where to write MCP configs.")
@_scope_option("--skills-scope", "Also copy skills bundled in the repository.")
@_host_option()
@click.pass_obj
def git_mcp(
    obj: Dict[str, Any],
    name: str,
    repo_url: str,
    transport: str,
    server_command: str,
    args_text: str,
    build_command: str,
    repo_scope: str,
    mcp_scope: Optional[str],
    skills_scope: Optional[str],
    host_ids: tuple[str, ...],
) -> None:
    name_error = validate_mcp_name(name)
    if name_error is not None:
        raise click.BadParameter(name_error, param_hint="--name")
    url_check = validate_git_url(repo_url)
    if not url_check.valid:
        raise click.BadParameter(url_check.error or "invalid URL", param_hint="--repo-url")

    ui = DeployConsoleUI(Console())
    settings = _settings_from_obj(obj)
    hosts = _select_hosts(settings, host_ids)
    resolved_mcp_scope = _mcp_scope(settings, mcp_scope)
    request = GitMcpRequest(
        name=name,
        repo_url=repo_url,
        type=transport,
        command=server_command,
        args=parse_args_string(args_text),
        build_command=build_command or None,
    )

    _header(ui, "Install MCP server from Git repository")
    ui.render_scopes(
        [("Repository scope", Scope(repo_scope.lower())), ("MCP scope", resolved_mcp_scope)]
    )

    service = _service_from_obj(obj, settings)
    try:
        report = service.install_git_mcp(
            request,
            hosts,
            Scope(repo_scope.lower()),
            resolved_mcp_scope,
            Scope(skills_scope.lower()) if skills_scope else None,
        )
    except DeployAppError as exc:
        raise click.ClickException(f"Failed to install Git MCP: {exc}")
    ui.render_git_report(report, resolved_mcp_scope)

    if report.failed:
        raise click.exceptions.Exit(1)
    ui.render_done("Git MCP installation complete!")


@cli.command(help="List skills installed for each host application.")
@_scope_option("--scope", "Which skills location to inspect.", default=Scope.LOCAL.value)
@_host_option()
@click.pass_obj
def status(obj: Dict[str, Any], scope: str, host_ids: tuple[str, ...]) -> None:
    ui = DeployConsoleUI(Console())
    settings = _settings_from_obj(obj)
    hosts = _select_hosts(settings, host_ids)
    service = _service_from_obj(obj, settings)
    ui.render_status(service.status(hosts, Scope(scope.lower())))


@cli.command(help="Show resolved paths for each host application.")
@_scope_option("--scope", "Scope to resolve.", default=Scope.LOCAL.value)
@click.pass_obj
def hosts(obj: Dict[str, Any], scope: str) -> None:
    ui = DeployConsoleUI(Console())
    settings = _settings_from_obj(obj)
    service = _service_from_obj(obj, settings)
    ui.render_hosts(list(settings.hosts), service.paths, Scope(scope.lower()))


def main() -> int:
    try:
        # non-standalone click returns the code of an explicit Exit
        result = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
