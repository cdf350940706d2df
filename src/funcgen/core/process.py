"""
Running external tools.

Generation for Java projects is delegated to Maven. The runner is kept
behind a small interface so tests can substitute a fake without spawning
a process.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ExternalToolError, MissingDependencyError

logger = logging.getLogger("funcgen.core.process")

MAVEN = "mvn"

# Receives each line of tool output as it is produced
OutputSink = Callable[[str], None]


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr of a finished command."""

    exit_code: int
    output: str


class CommandRunner(Protocol):
    """Runs a command to completion, streaming its output."""

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        on_output: OutputSink | None = None,
    ) -> CommandResult: ...


class SubprocessRunner:
    """
    Runs commands with :mod:`subprocess`.

    There is no timeout: a tool that never exits blocks the caller.
    """

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        on_output: OutputSink | None = None,
    ) -> CommandResult:
        executable = shutil.which(command) or command
        argv = [executable, *args]
        logger.info("Running %s in %s", " ".join([command, *args]), cwd)

        lines: list[str] = []
        try:
            process = subprocess.Popen(
                argv,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except FileNotFoundError as e:
            raise MissingDependencyError(f"Command not found: {command}") from e

        assert process.stdout is not None
        with process.stdout:
            for line in process.stdout:
                lines.append(line)
                if on_output:
                    on_output(line.rstrip("\n"))
        exit_code = process.wait()

        logger.debug("%s exited with code %d", command, exit_code)
        return CommandResult(exit_code=exit_code, output="".join(lines))


def execute_command(
    runner: CommandRunner,
    cwd: Path,
    command: str,
    *args: str,
    on_output: OutputSink | None = None,
) -> str:
    """
    Run a command and fail on a non-zero exit.

    Returns:
        The captured output

    Raises:
        ExternalToolError: If the command exits non-zero
    """
    result = runner.run(command, list(args), cwd, on_output)
    if result.exit_code != 0:
        raise ExternalToolError([command, *args], result.exit_code, result.output)
    return result.output


def validate_maven_installed() -> None:
    """
    Check that Maven is on PATH.

    Raises:
        MissingDependencyError: If ``mvn`` cannot be found
    """
    if shutil.which(MAVEN) is None:
        raise MissingDependencyError(
            "Maven (mvn) is required to add functions to a Java project but was not found.",
            hint="Install Maven 3.5 or later and make sure 'mvn' is on your PATH: "
            "https://maven.apache.org/download.cgi",
        )
