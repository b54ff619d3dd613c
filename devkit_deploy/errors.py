from pathlib import Path
from typing import Sequence


class DeployAppError(Exception):
    """Base user-facing application error."""


class DeployFileError(DeployAppError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingConfigFileError(DeployFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing required config file")


class InvalidJsonFormatError(DeployFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(DeployFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class RepoNotGitError(DeployFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Target exists but is not a git repo")


class CommandFailedError(DeployAppError):
    def __init__(
        self, argv: Sequence[str], returncode: int | None, output: str = ""
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        status = "timed out" if returncode is None else f"failed with code {returncode}"
        super().__init__(f"{' '.join(self.argv)} {status}")


class UnknownHostError(DeployAppError):
    def __init__(self, host_id: str) -> None:
        self.host_id = host_id
        super().__init__(f"Unknown host application: {host_id}")


class UnknownProfileError(DeployAppError):
    def __init__(self, profile_id: str) -> None:
        self.profile_id = profile_id
        super().__init__(f"Unknown profile: {profile_id}")
