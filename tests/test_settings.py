from pathlib import Path

import pytest

from devkit_deploy.errors import (
    InvalidConfigSchemaError,
    InvalidJsonFormatError,
    MissingConfigFileError,
    UnknownHostError,
    UnknownProfileError,
)
from devkit_deploy.settings import load_settings, parse_settings


def test_bundled_settings_load() -> None:
    settings = load_settings()

    assert {host.id for host in settings.hosts} >= {"claude", "cursor", "vscode"}
    assert settings.skills
    assert settings.mcp_servers
    assert settings.skills_folder == "a11y"


def test_parse_settings_builds_catalog(settings) -> None:
    vscode = settings.host("vscode")

    assert [host.id for host in settings.hosts] == ["claude", "vscode"]
    assert vscode.mcp_server_key == "servers"
    assert vscode.global_server_key == "mcp.servers"
    assert vscode.nest_skills is False
    assert settings.host("claude").global_server_key == "mcpServers"
    assert [skill.npm_name for skill in settings.skills] == ["a-skill", "b-skill"]
    assert settings.skills[0].name == "a-skill"
    assert settings.skills[1].description == "Second skill"
    assert settings.mcp_servers[1].env == {"DEBUG": "1"}
    assert settings.git_skills_candidates == ("skills", ".github/skills", ".claude/skills")


def test_select_hosts(settings) -> None:
    assert [host.id for host in settings.select_hosts(())] == ["claude", "vscode"]
    assert [host.id for host in settings.select_hosts(["vscode", "vscode"])] == ["vscode"]

    with pytest.raises(UnknownHostError):
        settings.select_hosts(["emacs"])


def test_profile_selection(settings) -> None:
    assert [skill.npm_name for skill in settings.skills_for("minimal")] == ["a-skill"]
    assert [server.name for server in settings.servers_for("minimal")] == ["wcag"]
    assert len(settings.skills_for(None)) == 2

    with pytest.raises(UnknownProfileError):
        settings.skills_for("nope")


def test_schema_violation_names_the_field(settings_payload) -> None:
    del settings_payload["hostApplications"][0]["mcpConfigFile"]

    with pytest.raises(InvalidConfigSchemaError) as excinfo:
        parse_settings(settings_payload, Path("catalog.json"))

    assert "mcpConfigFile" in str(excinfo.value)
    assert "hostApplications.0" in str(excinfo.value)


def test_schema_rejects_unknown_host_fields(settings_payload) -> None:
    settings_payload["hostApplications"][0]["colour"] = "blue"

    with pytest.raises(InvalidConfigSchemaError):
        parse_settings(settings_payload)


def test_load_settings_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigFileError):
        load_settings(tmp_path / "absent.json")


def test_load_settings_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{nope", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError):
        load_settings(path)


def test_load_settings_from_file(settings_file: Path) -> None:
    settings = load_settings(settings_file)

    assert settings.readme_template == "deploy-README.md"
    assert settings.profile("minimal").display_name == "Minimal"
