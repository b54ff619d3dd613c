"""External process invocation behind a narrow interface."""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from devkit_deploy.errors import CommandFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    output: str


class CommandRunner(Protocol):
    def run(self, argv: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        """Run argv to completion, raising CommandFailedError on non-zero exit."""
        ...


class SubprocessRunner:
    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def run(self, argv: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        args = [str(item) for item in argv]
        if not args:
            raise ValueError("Empty command")
        # npm and friends are .cmd shims on Windows
        executable = shutil.which(args[0]) or args[0]
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
        try:
            completed = subprocess.run(
                [executable, *args[1:]],
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CommandFailedError(args, 127, str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandFailedError(args, None, str(exc)) from exc

        output = (completed.stdout or "") + (completed.stderr or "")
        if completed.returncode != 0:
            logger.debug("Command output:\n%s", output.strip())
            raise CommandFailedError(args, completed.returncode, output.strip())
        return CommandResult(argv=args, returncode=completed.returncode, output=output)
