"""
Error types for funcgen project validation, prompting, and generation.
"""

from __future__ import annotations


class FuncGenError(Exception):
    """Base exception for all funcgen errors."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with the remediation hint if available."""
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class UserCancelledError(FuncGenError):
    """
    Raised when the user dismisses a prompt or chooses to cancel.

    Propagates to the top of the workflow. Anything already written to
    disk stays where it is.
    """

    def __init__(self, message: str = "Operation cancelled."):
        super().__init__(message)


class MissingDependencyError(FuncGenError):
    """
    Raised when an external tool needed for generation is not installed.

    Examples:
    - Maven (mvn) not on PATH for a Java project
    """

    pass


class ExternalToolError(FuncGenError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, command: list[str], exit_code: int, output: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        super().__init__(
            f"Command failed with exit code {exit_code}: {' '.join(command)}",
            hint=_tail(output),
        )


class NoEligibleTemplatesError(FuncGenError):
    """Raised when no template matches the language, runtime and filter."""

    pass


class TemplateError(FuncGenError):
    """
    Raised when a template cannot be loaded or written.

    Examples:
    - Malformed metadata.json
    - Function directory already exists
    """

    pass


class InitError(FuncGenError):
    """Raised when project initialization fails."""

    pass


def _tail(output: str, lines: int = 20) -> str | None:
    """Return the last lines of captured tool output, if any."""
    if not output.strip():
        return None
    return "\n".join(output.rstrip().splitlines()[-lines:])
