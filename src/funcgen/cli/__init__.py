"""
funcgen CLI.

- function.py: create, templates
- project.py: init
- utils.py: Shared utilities
"""

from __future__ import annotations

import typer

from funcgen._version import get_version

from .function import create_command, templates_command
from .project import init_command
from .utils import version_callback

__version__ = get_version()

app = typer.Typer(
    help="""funcgen - add functions to Azure Functions projects

Commands:
  • init       Initialize a function app project
  • create     Add a function from a template
  • templates  List available templates
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """funcgen CLI main callback for global options."""
    pass


app.command(name="init")(init_command)
app.command(name="create")(create_command)
app.command(name="templates")(templates_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = ["__version__", "app", "main"]
