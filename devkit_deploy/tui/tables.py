from rich.table import Column, Table

from devkit_deploy.models import HostApplication, HostResultRow, ResolvedPaths, Scope
from devkit_deploy.skills.models import InstalledSkill
from devkit_deploy.tui.sections import UISection
from devkit_deploy.utils import compact_home_path


class SummaryTable:
    @staticmethod
    def block(rows: list[tuple[str, str]]) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        for key, value in rows:
            table.add_row(key, value)
        return table


class HostResultTable:
    @staticmethod
    def build(rows: list[HostResultRow]) -> Table:
        table = Table(
            Column(header="Host", width=12),
            Column(header="Status", width=8),
            Column(header="Config", overflow="ellipsis", max_width=58),
            Column(header="Detail", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for row in rows:
            path = compact_home_path(row.path) if row.path is not None else ""
            table.add_row(
                row.host, UISection.status_label(row.status), path, row.detail
            )
        return table


class HostsTable:
    @staticmethod
    def build(
        hosts: list[HostApplication], paths: dict[str, ResolvedPaths], scope: Scope
    ) -> Table:
        table = Table(
            Column(header="Host", width=10),
            Column(header="Name", width=14),
            Column(header="Skills", overflow="fold"),
            Column(header="MCP config", overflow="fold"),
            Column(header="Key", width=12),
            expand=True,
            header_style="bold",
        )
        for host in hosts:
            resolved = paths[host.id]
            table.add_row(
                host.id,
                host.display_name,
                compact_home_path(resolved.skills_dir_for(scope)),
                compact_home_path(resolved.mcp_config_for(scope)),
                resolved.server_key_for(scope),
            )
        return table


class SkillsTable:
    @staticmethod
    def build(installed: dict[str, list[InstalledSkill]]) -> Table:
        table = Table(
            Column(header="Host", width=10),
            Column(header="Skill", width=22),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for host_id, skills in installed.items():
            if not skills:
                table.add_row(host_id, "[dim]none[/dim]", "")
                continue
            for skill in skills:
                table.add_row(host_id, skill.metadata.name, skill.metadata.description)
        return table
