"""
Project settings stored in ``.vscode/settings.json``.

The language, runtime and template filter of a function project are kept
under the ``azureFunctions.*`` keys so the project stays compatible with the
VS Code extension. Unknown keys in the file are preserved on save.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import FuncGenError
from .models import ProjectLanguage, ProjectRuntime, TemplateFilter
from .ui import Pick, UserInterface

logger = logging.getLogger("funcgen.core.settings")

SETTINGS_FILE = Path(".vscode") / "settings.json"
SETTINGS_PREFIX = "azureFunctions"


class ProjectSettings(BaseModel):
    """Typed view of the ``azureFunctions.*`` workspace settings."""

    model_config = ConfigDict(populate_by_name=True)

    project_language: ProjectLanguage | None = Field(
        default=None, alias=f"{SETTINGS_PREFIX}.projectLanguage"
    )
    project_runtime: ProjectRuntime | None = Field(
        default=None, alias=f"{SETTINGS_PREFIX}.projectRuntime"
    )
    template_filter: TemplateFilter = Field(
        default=TemplateFilter.VERIFIED, alias=f"{SETTINGS_PREFIX}.templateFilter"
    )


def _read_raw(root: Path) -> dict[str, Any]:
    path = root / SETTINGS_FILE
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise FuncGenError(
            f"Invalid JSON in {path}: {e}",
            hint="Comments and trailing commas are not supported in this file",
        ) from e
    if not isinstance(data, dict):
        raise FuncGenError(f"Expected a JSON object in {path}")
    return data


def load_project_settings(root: Path) -> ProjectSettings:
    """
    Load project settings from ``root/.vscode/settings.json``.

    Returns defaults when the file doesn't exist.

    Raises:
        FuncGenError: If the file is malformed or holds unknown values
    """
    data = _read_raw(root)
    relevant = {k: v for k, v in data.items() if k.startswith(f"{SETTINGS_PREFIX}.")}
    try:
        return ProjectSettings.model_validate(relevant)
    except ValidationError as e:
        raise FuncGenError(
            f"Invalid function settings in {root / SETTINGS_FILE}",
            hint=str(e),
        ) from e


def save_project_settings(root: Path, settings: ProjectSettings) -> None:
    """
    Write project settings, keeping any other keys already in the file.

    Only fields that were loaded or explicitly set are written, so defaults
    never get pinned into the user's file.
    """
    data = _read_raw(root)
    for key, value in settings.model_dump(by_alias=True, mode="json", exclude_unset=True).items():
        if value is None:
            continue
        data[key] = value

    path = root / SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")
    logger.debug("Saved project settings to %s", path)


def detect_language(root: Path) -> ProjectLanguage | None:
    """Infer the language from project files (a pom.xml means Java)."""
    if (root / "pom.xml").exists():
        return ProjectLanguage.JAVA
    return None


def get_project_language(
    root: Path, ui: UserInterface, override: ProjectLanguage | None = None
) -> ProjectLanguage:
    """
    Resolve the project language.

    Order: explicit override, saved setting, detection from files,
    interactive prompt. A prompted value is saved back to the project.
    """
    if override is not None:
        return override

    settings = load_project_settings(root)
    if settings.project_language is not None:
        return settings.project_language

    detected = detect_language(root)
    if detected is not None:
        return detected

    picks = [Pick(language, language.value) for language in ProjectLanguage]
    language = ui.show_quick_pick(picks, "Select a language for your function project").data
    save_project_settings(root, settings.model_copy(update={"project_language": language}))
    return language


def required_runtime(language: ProjectLanguage) -> ProjectRuntime | None:
    """The only runtime a language runs on, if it is tied to one."""
    if language in (ProjectLanguage.JAVA, ProjectLanguage.CSHARP):
        return ProjectRuntime.BETA
    return None


def get_project_runtime(
    root: Path,
    language: ProjectLanguage,
    ui: UserInterface,
    override: ProjectRuntime | None = None,
) -> ProjectRuntime:
    """
    Resolve the host runtime.

    Java and C# class library projects only run on the beta runtime.
    """
    if override is not None:
        return override

    required = required_runtime(language)
    if required is not None:
        return required

    settings = load_project_settings(root)
    if settings.project_runtime is not None:
        return settings.project_runtime

    picks = [
        Pick(ProjectRuntime.ONE, "Azure Functions v1 (~1)", "Supported in production"),
        Pick(ProjectRuntime.BETA, "Azure Functions v2 (beta)", "Preview runtime"),
    ]
    runtime = ui.show_quick_pick(picks, "Select a runtime for your function project").data
    save_project_settings(root, settings.model_copy(update={"project_runtime": runtime}))
    return runtime


def get_template_filter(root: Path, override: TemplateFilter | None = None) -> TemplateFilter:
    """Resolve the template filter; defaults to Verified."""
    if override is not None:
        return override
    return load_project_settings(root).template_filter
