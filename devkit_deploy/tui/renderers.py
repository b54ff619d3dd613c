from rich.console import Console

from devkit_deploy.models import (
    DeployReport,
    HostApplication,
    HostResultStatus,
    ResolvedPaths,
    Scope,
)
from devkit_deploy.skills.models import InstalledSkill
from devkit_deploy.tui.enums import UIStyle
from devkit_deploy.tui.sections import UISection
from devkit_deploy.tui.tables import HostResultTable, HostsTable, SkillsTable, SummaryTable
from devkit_deploy.utils import compact_home_path, compact_home_paths_in_text


class DeployConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_header(self, title: str, subtitle: str, os_name: str) -> None:
        self.console.print(
            UISection.wrap(
                title,
                SummaryTable.block([("Mode", subtitle), ("Detected OS", os_name)]),
                style=UIStyle.BLUE.value,
            )
        )

    def render_scopes(self, rows: list[tuple[str, Scope]]) -> None:
        self.console.print(
            UISection.wrap(
                "scope",
                SummaryTable.block(
                    [(label, scope.value.capitalize()) for label, scope in rows]
                ),
                style=UIStyle.DIM.value,
            )
        )

    def render_install_report(self, report: DeployReport, mcp_scope: Scope) -> None:
        locations = len(report.skill_targets)
        if report.skills_error:
            self._error("skills", f"Failed to install skills: {report.skills_error}")
        elif report.skills is not None:
            self.console.print(
                UISection.bullets(
                    "skills",
                    f"{report.skills.installed} skills installed to "
                    f"{locations} host application location(s).",
                    [
                        f"{compact_home_path(path)}: {count}"
                        for path, count in report.skills.per_target.items()
                    ],
                    style=UIStyle.GREEN.value,
                )
            )
        self._render_mcp_rows(report, mcp_scope, verb="updated")

    def render_uninstall_report(self, report: DeployReport, mcp_scope: Scope) -> None:
        if report.skills_error:
            self._error("skills", f"Failed to remove skills: {report.skills_error}")
        elif report.skills_removed is not None:
            self.console.print(
                UISection.note(
                    "skills",
                    f"Removed {report.skills_removed} skill folder(s) from "
                    f"{len(report.skill_targets)} host application location(s).",
                    style=UIStyle.YELLOW.value,
                )
            )
        self._render_mcp_rows(report, mcp_scope, verb="cleaned")

    def render_git_report(self, report: DeployReport, mcp_scope: Scope) -> None:
        if report.repo is not None:
            self.console.print(
                UISection.note(
                    "repository",
                    f"Repository {report.repo.action.value}: "
                    f"{compact_home_path(report.repo.dir)}",
                    style=UIStyle.CYAN.value,
                )
            )
        if report.skills_error:
            self._error("skills", f"Failed to copy bundled skills: {report.skills_error}")
        elif report.skill_targets:
            self.console.print(
                UISection.note(
                    "skills",
                    f"Bundled skills copied to {len(report.skill_targets)} location(s).",
                    style=UIStyle.GREEN.value,
                )
            )
        self._render_mcp_rows(report, mcp_scope, verb="updated")
        if report.server is not None:
            self.console.print(
                UISection.note(
                    "next",
                    f"MCP server '{report.server.name}' configured.\n"
                    "Restart your host application to load the new MCP server.",
                    style=UIStyle.DIM.value,
                )
            )

    def render_hosts(
        self, hosts: list[HostApplication], paths: dict[str, ResolvedPaths], scope: Scope
    ) -> None:
        self.console.print(
            UISection.wrap(
                f"hosts ({scope.value})",
                HostsTable.build(hosts, paths, scope),
                style=UIStyle.CYAN.value,
            )
        )

    def render_status(self, installed: dict[str, list[InstalledSkill]]) -> None:
        self.console.print(
            UISection.wrap(
                "installed skills", SkillsTable.build(installed), style=UIStyle.CYAN.value
            )
        )

    def render_done(self, message: str) -> None:
        self.console.print(UISection.note("done", message, style=UIStyle.GREEN.value))

    def _render_mcp_rows(self, report: DeployReport, scope: Scope, verb: str) -> None:
        if not report.mcp_rows:
            return
        changed = [row for row in report.mcp_rows if row.status == HostResultStatus.OK]
        self.console.print(
            UISection.wrap(
                "mcp config",
                HostResultTable.build(report.mcp_rows),
                style=UIStyle.CYAN.value,
                subtitle=f"{len(changed)} host application(s) {verb} ({scope.value} scope)",
            )
        )
        failures = [
            row for row in report.mcp_rows if row.status == HostResultStatus.FAILED
        ]
        if failures:
            self.console.print(
                UISection.bullets(
                    "failures",
                    None,
                    [
                        f"{row.host}: {compact_home_paths_in_text(row.detail)}"
                        for row in failures
                    ],
                    style=UIStyle.RED.value,
                )
            )

    def _error(self, title: str, text: str) -> None:
        self.console.print(
            UISection.note(
                title, compact_home_paths_in_text(text), style=UIStyle.RED.value
            )
        )
