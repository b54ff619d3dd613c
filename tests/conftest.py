import sys
import json
from pathlib import Path
from typing import Any, Optional, Sequence

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from devkit_deploy.constants import PACKAGE_MANIFEST_FILENAME, TEMP_MANIFEST_NAME  # noqa: E402
from devkit_deploy.errors import CommandFailedError  # noqa: E402
from devkit_deploy.runner import CommandResult  # noqa: E402
from devkit_deploy.settings import Settings, parse_settings  # noqa: E402


class FakeRunner:
    """Records commands and fakes the filesystem effects of npm and git."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Optional[Path]]] = []
        self.packages_without_docs: set[str] = set()
        self.repo_files: dict[str, str] = {}
        self.fail_on: Optional[str] = None

    def run(self, argv: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        args = [str(item) for item in argv]
        self.calls.append((args, cwd))
        command_line = " ".join(args)
        if self.fail_on is not None and command_line.startswith(self.fail_on):
            raise CommandFailedError(args, 1, "simulated failure")

        if args[:2] == ["npm", "install"] and self._is_staging_dir(cwd):
            self._fake_npm_install(cwd)
        elif args[:2] == ["git", "clone"]:
            self._fake_clone(Path(args[-1]))
        return CommandResult(argv=args, returncode=0, output="")

    def commands(self) -> list[str]:
        return [" ".join(args) for args, _ in self.calls]

    @staticmethod
    def _is_staging_dir(cwd: Optional[Path]) -> bool:
        if cwd is None or not (cwd / PACKAGE_MANIFEST_FILENAME).is_file():
            return False
        manifest = json.loads((cwd / PACKAGE_MANIFEST_FILENAME).read_text(encoding="utf-8"))
        return manifest.get("name") == TEMP_MANIFEST_NAME

    def _fake_npm_install(self, cwd: Path) -> None:
        manifest = json.loads((cwd / PACKAGE_MANIFEST_FILENAME).read_text(encoding="utf-8"))
        for name in manifest["dependencies"]:
            package_dir = cwd / "node_modules" / name
            package_dir.mkdir(parents=True, exist_ok=True)
            (package_dir / "package.json").write_text("{}", encoding="utf-8")
            if name in self.packages_without_docs:
                continue
            (package_dir / "SKILL.md").write_text(
                f"---\nname: {name}\ndescription: Docs for {name}\n---\n\n# {name}\n",
                encoding="utf-8",
            )

    def _fake_clone(self, target: Path) -> None:
        (target / ".git").mkdir(parents=True)
        for relative, content in self.repo_files.items():
            path = target / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


SETTINGS_PAYLOAD: dict[str, Any] = {
    "skillsFolder": "a11y",
    "readmeTemplate": "deploy-README.md",
    "supportLocalMcpInstallation": True,
    "hostApplications": [
        {
            "id": "claude",
            "displayName": "Claude Code",
            "skillsFolder": ".claude/skills",
            "mcpConfigFile": ".mcp.json",
            "mcpServerKey": "mcpServers",
        },
        {
            "id": "vscode",
            "displayName": "VSCode",
            "skillsFolder": ".github/skills",
            "mcpConfigFile": ".vscode/mcp.json",
            "globalMcpConfigFile": "Code/User/mcp.json",
            "mcpServerKey": "servers",
            "globalMcpServerKey": "mcp.servers",
            "nestSkills": False,
        },
    ],
    "skills": [
        "a-skill",
        {"npmName": "b-skill", "name": "b", "description": "Second skill"},
    ],
    "mcpServers": [
        {"name": "wcag", "command": "npx", "args": ["-y", "wcag-mcp"]},
        {
            "name": "local-docs",
            "command": "node",
            "args": ["{mcpRepoDir}/docs/index.js"],
            "env": {"DEBUG": "1"},
        },
    ],
    "profiles": [
        {
            "id": "minimal",
            "displayName": "Minimal",
            "skills": ["a-skill"],
            "mcpServers": ["wcag"],
        }
    ],
}


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def read_json():
    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def settings_payload() -> dict[str, Any]:
    return json.loads(json.dumps(SETTINGS_PAYLOAD))


@pytest.fixture
def settings(settings_payload: dict[str, Any]) -> Settings:
    return parse_settings(settings_payload)


@pytest.fixture
def settings_file(tmp_path: Path, settings_payload: dict[str, Any], write_json) -> Path:
    path = tmp_path / "settings.json"
    write_json(path, settings_payload)
    return path


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
