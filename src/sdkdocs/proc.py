"""Subprocess execution for external build tools.

Every external command (registry setup script, ``pod``, ``jazzy``) goes
through :class:`ProcessRunner`, which captures stdout, stderr and the exit
status uniformly. Collaborators accept a runner so tests can substitute a
fake one.

No timeouts are applied.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from sdkdocs.errors import CommandError
from sdkdocs.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)

    def last_line(self) -> str:
        """Return the last non-blank stdout line, stripped (``""`` if none)."""
        lines = [line.strip() for line in self.stdout.splitlines() if line.strip()]
        return lines[-1] if lines else ""


class ProcessRunner:
    """Run commands with captured output and report their status."""

    def run(
        self,
        args: Sequence[str | Path],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run ``args`` to completion.

        Args:
            args: Command and arguments (no shell interpolation).
            cwd: Working directory for the child process.
            env: Full environment for the child (inherits when None).

        Returns:
            CommandResult with captured output. A non-zero exit status is
            returned, not raised; callers decide how fatal it is.

        Raises:
            CommandError: If the executable cannot be started at all.
        """
        argv = tuple(str(a) for a in args)
        logger.debug("process.exec", cmd=" ".join(argv), cwd=str(cwd) if cwd else None)
        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise CommandError(
                f"Unable to execute `{argv[0]}`: {exc}",
                context={"command": " ".join(argv)},
                cause=exc,
            ) from exc

        result = CommandResult(
            args=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        logger.debug("process.exit", cmd=argv[0], returncode=result.returncode)
        return result


__all__ = ["CommandResult", "ProcessRunner"]
