"""
Project commands for the funcgen CLI.

- init: Initialize a function app project
"""

from __future__ import annotations

from pathlib import Path

import typer

from funcgen.core.errors import FuncGenError
from funcgen.core.models import ProjectLanguage, ProjectRuntime
from funcgen.core.project import ProjectInitializer, init_project, missing_project_files
from funcgen.core.settings import get_project_language, get_project_runtime
from funcgen.core.ui import UserInterface

from .utils import configure_logging, exit_on_error


def make_initializer(
    ui: UserInterface,
    language: ProjectLanguage | None = None,
    runtime: ProjectRuntime | None = None,
    no_git: bool = False,
) -> ProjectInitializer:
    """Build the initializer the create workflow calls when the folder isn't a project."""

    def initialize(root: Path) -> None:
        project_language = get_project_language(root, ui, language)
        project_runtime = get_project_runtime(root, project_language, ui, runtime)
        init_project(
            root,
            project_language,
            project_runtime,
            no_git=no_git,
            progress_callback=typer.echo,
        )

    return initialize


def init_command(
    path: str | None = typer.Argument(
        None, help="Project directory (defaults to the current directory)"
    ),
    language: ProjectLanguage | None = typer.Option(
        None, "--language", "-l", case_sensitive=False, help="Project language"
    ),
    runtime: ProjectRuntime | None = typer.Option(
        None, "--runtime", "-r", help="Functions host runtime"
    ),
    no_git: bool = typer.Option(False, "--no-git", help="Skip git repository initialization"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Initialize a function app project.

    Creates host.json, local.settings.json, .vscode/launch.json and
    .vscode/settings.json. Existing files are kept.

    Examples:
        funcgen init                         # Current directory
        funcgen init ./my-app -l JavaScript  # New directory
        funcgen init --no-git
    """
    from funcgen.cli_ui import RichUserInterface, print_success

    configure_logging(verbose)
    root = Path(path or ".").resolve()

    try:
        make_initializer(RichUserInterface(), language, runtime, no_git)(root)
    except FuncGenError as e:
        raise exit_on_error(e) from e

    missing = missing_project_files(root)
    if missing:
        typer.echo(f"Project is still missing: {', '.join(missing)}", err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    print_success(f"Function app project initialized in: {root}")
    typer.echo("\nNext steps:")
    if path is not None:
        typer.echo(f"  cd {path}")
    typer.echo("  funcgen create")
