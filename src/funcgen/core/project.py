"""
Function app project validation and initialization.

A folder is a function app project when it contains the host
configuration, the local settings and a debugger launch configuration.
Adding a function to a folder without them offers to initialize it first.
"""

from __future__ import annotations

import json
import logging
import subprocess
import warnings
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from .app_settings import LOCAL_SETTINGS_FILE, default_local_settings
from .errors import InitError, UserCancelledError
from .models import ProjectLanguage, ProjectRuntime
from .settings import ProjectSettings, save_project_settings
from .ui import Pick, UserInterface

logger = logging.getLogger("funcgen.core.project")

HOST_FILE = "host.json"
LAUNCH_FILE = str(Path(".vscode") / "launch.json")

# tasks.json is not required; users may run `func host start` themselves
REQUIRED_PROJECT_FILES: tuple[str, ...] = (
    HOST_FILE,
    LOCAL_SETTINGS_FILE,
    LAUNCH_FILE,
)

# Called to initialize the project at the given root
ProjectInitializer = Callable[[Path], None]


class ProjectAction(Enum):
    """Choices offered when the folder is not a function app project."""

    INITIALIZE = "initialize"
    SKIP = "skip"
    CANCEL = "cancel"


def missing_project_files(root: Path) -> list[str]:
    """Return required project files that don't exist under ``root``."""
    return [f for f in REQUIRED_PROJECT_FILES if not (root / f).exists()]


def validate_is_function_app(
    root: Path,
    ui: UserInterface,
    initializer: ProjectInitializer,
) -> ProjectAction | None:
    """
    Check that ``root`` is a function app project.

    If any required file is missing, asks whether to initialize the
    project, skip the check, or cancel.

    Returns:
        The action taken, or None if the project was already valid

    Raises:
        UserCancelledError: If the user cancels
    """
    missing = missing_project_files(root)
    if not missing:
        return None

    logger.info("Missing project files in %s: %s", root, ", ".join(missing))
    picks = [
        Pick(ProjectAction.INITIALIZE, "Yes", "Initialize the folder as a function app project"),
        Pick(ProjectAction.SKIP, "Skip for now", "Continue without initializing"),
        Pick(ProjectAction.CANCEL, "Cancel"),
    ]
    action = ui.show_quick_pick(
        picks, "The selected folder is not a function app project. Initialize Project?"
    ).data

    if action == ProjectAction.INITIALIZE:
        initializer(root)
    elif action == ProjectAction.CANCEL:
        raise UserCancelledError()

    return action


# =============================================================================
# Project initialization
# =============================================================================


def _host_json(runtime: ProjectRuntime) -> dict[str, Any]:
    if runtime == ProjectRuntime.BETA:
        return {"version": "2.0"}
    return {}


def _launch_json(language: ProjectLanguage) -> dict[str, Any]:
    if language == ProjectLanguage.JAVA:
        configuration = {
            "name": "Attach to Java Functions",
            "type": "java",
            "request": "attach",
            "hostName": "localhost",
            "port": 5005,
            "preLaunchTask": "runFunctionsHost",
        }
    elif language in (ProjectLanguage.JAVASCRIPT, ProjectLanguage.TYPESCRIPT):
        configuration = {
            "name": "Attach to JavaScript Functions",
            "type": "node",
            "request": "attach",
            "port": 5858,
            "protocol": "inspector",
            "preLaunchTask": "runFunctionsHost",
        }
    else:
        configuration = {
            "name": "Attach to Functions Host",
            "type": "coreclr",
            "request": "attach",
            "processId": "${command:azureFunctions.pickProcess}",
        }
    return {"version": "0.2.0", "configurations": [configuration]}


_GITIGNORE = """bin
obj
csx
.vs
edge
Publish
.vscode/
*.user
*.suo
*.cscfg
*.Cache
project.lock.json

/packages
/TestResults

/tools/NuGet.exe
/App_Data
/secrets
/data
.secrets
appsettings.json
local.settings.json
"""


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")


def init_project(
    root: Path,
    language: ProjectLanguage,
    runtime: ProjectRuntime,
    no_git: bool = False,
    progress_callback: Callable[[str], None] | None = None,
) -> None:
    """
    Initialize a function app project in ``root``.

    Existing files are left untouched, so this can be run on a folder
    that is only partially set up.

    Args:
        root: Directory to initialize (created if missing)
        language: Project language saved to the workspace settings
        runtime: Host runtime saved to the workspace settings
        no_git: If True, skip git initialization
        progress_callback: Optional callback for progress messages

    Raises:
        InitError: If files cannot be written
    """

    def log(msg: str) -> None:
        """Log progress message if callback provided."""
        logger.debug(msg)
        if progress_callback:
            progress_callback(msg)

    log(f"Initializing function app project in {root}...")

    files: dict[str, dict[str, Any]] = {
        HOST_FILE: _host_json(runtime),
        LOCAL_SETTINGS_FILE: default_local_settings(),
        LAUNCH_FILE: _launch_json(language),
    }

    try:
        root.mkdir(parents=True, exist_ok=True)
        for rel_path, content in files.items():
            path = root / rel_path
            if path.exists():
                log(f"  Keeping existing {rel_path}")
                continue
            _write_json(path, content)
            log(f"  Created {rel_path}")

        save_project_settings(
            root, ProjectSettings(project_language=language, project_runtime=runtime)
        )
        log("  Saved project settings")

        gitignore_path = root / ".gitignore"
        if not gitignore_path.exists():
            gitignore_path.write_text(_GITIGNORE, encoding="utf-8")
            log("  Created .gitignore")
    except OSError as e:
        raise InitError(f"Failed to initialize project: {e}") from e

    if not no_git and not (root / ".git").exists():
        _init_git_repository(root, log)


def _init_git_repository(root: Path, log: Callable[[str], None]) -> None:
    """
    Initialize git repository in project directory.

    Args:
        root: Project directory
        log: Logging callback
    """
    log("Initializing git repository...")
    try:
        subprocess.run(
            ["git", "init"],
            cwd=root,
            check=True,
            capture_output=True,
            text=True,
        )
        log("  Git repository initialized")
    except subprocess.CalledProcessError as e:
        # Don't fail the entire init if git initialization fails
        warnings.warn(f"Failed to initialize git repository: {e}", stacklevel=2)
        log(f"  Warning: git initialization failed ({e})")
    except FileNotFoundError:
        warnings.warn("git command not found - skipping git initialization", stacklevel=2)
        log("  Warning: git not found, skipping")
