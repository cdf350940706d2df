"""
Function commands for the funcgen CLI.

- create: Add a function to a project from a template
- templates: List the templates available for a project
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from funcgen.core.app_settings import LocalAppSettings
from funcgen.core.errors import FuncGenError
from funcgen.core.models import ProjectLanguage, ProjectRuntime, TemplateFilter
from funcgen.core.process import SubprocessRunner
from funcgen.core.settings import required_runtime
from funcgen.core.templates import VERIFIED_TEMPLATES, DirectoryTemplateCatalog
from funcgen.core.workflow import create_function

from .project import make_initializer
from .utils import configure_logging, exit_on_error

logger = logging.getLogger("funcgen.cli.function")


def _open_file(path: Path) -> None:
    typer.launch(str(path))


def create_command(
    path: str | None = typer.Argument(
        None, help="Function app project directory (defaults to the current directory)"
    ),
    language: ProjectLanguage | None = typer.Option(
        None, "--language", "-l", case_sensitive=False, help="Override the project language"
    ),
    runtime: ProjectRuntime | None = typer.Option(
        None, "--runtime", "-r", help="Override the project runtime"
    ),
    template_filter: TemplateFilter | None = typer.Option(
        None, "--filter", "-f", case_sensitive=False, help="Template filter: All, Core or Verified"
    ),
    templates_dir: Path | None = typer.Option(
        None, "--templates", help="Use a template catalog directory instead of the bundled one"
    ),
    no_open: bool = typer.Option(False, "--no-open", help="Don't open the new function file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Add a new function to a function app project.

    Prompts for a template, the function name and the settings the
    template needs. Java projects are updated through Maven.

    Examples:
        funcgen create                       # Project in current directory
        funcgen create ./my-app --filter All
        funcgen create -l Java --no-open
    """
    from funcgen.cli_ui import RichUserInterface, print_success

    configure_logging(verbose)
    root = Path(path or ".").resolve()
    ui = RichUserInterface()

    try:
        result = create_function(
            root,
            ui,
            DirectoryTemplateCatalog(templates_dir),
            LocalAppSettings(ui, root),
            make_initializer(ui, language, runtime),
            SubprocessRunner(),
            opener=None if no_open else _open_file,
            language=language,
            runtime=runtime,
            template_filter=template_filter,
            on_output=typer.echo,
        )
    except FuncGenError as e:
        raise exit_on_error(e) from e

    logger.debug("Create function context: %s", dict(result.context.values))
    typer.echo("")
    print_success(f"Created function '{result.function_name}' from {result.template.name}")
    if result.file_path is not None:
        typer.echo(f"  {result.file_path}")
    for name in result.settings.skipped:
        typer.echo(f"  Note: no definition found for setting '{name}'; left unchanged", err=True)


def templates_command(
    language: ProjectLanguage = typer.Option(
        ..., "--language", "-l", case_sensitive=False, help="Project language"
    ),
    runtime: ProjectRuntime | None = typer.Option(
        None, "--runtime", "-r", help="Host runtime (defaults to what the language needs, else ~1)"
    ),
    template_filter: TemplateFilter = typer.Option(
        TemplateFilter.VERIFIED, "--filter", "-f", case_sensitive=False
    ),
    templates_dir: Path | None = typer.Option(None, "--templates"),
) -> None:
    """List the templates available for a language and runtime."""
    from funcgen.cli_ui import SelectOption, display_options_table

    if runtime is None:
        runtime = required_runtime(language) or ProjectRuntime.ONE

    try:
        templates = DirectoryTemplateCatalog(templates_dir).get_templates(
            language, runtime, template_filter
        )
    except FuncGenError as e:
        raise exit_on_error(e) from e

    if not templates:
        typer.echo(f"No {template_filter} templates for {language} ({runtime}).")
        return

    options = [
        SelectOption(
            value=t,
            label=t.name,
            description=t.id,
            badge="VERIFIED" if t.id in VERIFIED_TEMPLATES else "",
        )
        for t in templates
    ]
    display_options_table(options, title=f"{language} templates ({runtime}, {template_filter})")
