"""
funcgen CLI utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil

import typer

from funcgen._version import get_version
from funcgen.core.errors import FuncGenError, UserCancelledError

LOG_LEVEL_ENV = "FUNCGEN_LOG_LEVEL"


def configure_logging(verbose: bool = False) -> None:
    """Configure logging from ``FUNCGEN_LOG_LEVEL`` (``--verbose`` forces DEBUG)."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("funcgen").setLevel(level)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"funcgen version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(
            f"  Python:        {platform.python_implementation()} {platform.python_version()}"
        )
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo("")
        typer.echo("Tools:")
        maven = shutil.which("mvn")
        maven_status = f"✓ {maven}" if maven else "✗ Not found (needed for Java projects)"
        typer.echo(f"  Maven:         {maven_status}")
        git = shutil.which("git")
        typer.echo(f"  Git:           {'✓ ' + git if git else '✗ Not found'}")

        raise typer.Exit()


def exit_on_error(error: FuncGenError) -> typer.Exit:
    """Report an error on stderr and return the Exit to raise."""
    if isinstance(error, UserCancelledError):
        typer.echo("Cancelled.", err=True)
    else:
        typer.echo(f"Error: {error.message}", err=True)
        if error.hint:
            typer.echo(error.hint, err=True)
    return typer.Exit(code=1)
