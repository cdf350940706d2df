"""
The "create function" workflow.

Sequence:
    project validation -> language / runtime / filter -> template pick ->
    storage check (non-HTTP triggers) -> package name (Java) ->
    function name -> settings -> generation -> open the new file

Every prompt can raise :class:`UserCancelledError`, which ends the run.
Files already written stay on disk.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .errors import NoEligibleTemplatesError
from .generation import GenerationRequest, get_generator, get_java_function_file_path
from .models import ProjectLanguage, ProjectRuntime, Template, TemplateFilter
from .process import CommandRunner, OutputSink
from .project import ProjectInitializer, validate_is_function_app
from .resolver import AppSettingsPrompter, ResolvedSettings, resolve_settings
from .settings import get_project_language, get_project_runtime, get_template_filter
from .templates import TemplateCatalog, convert_template_id_to_java
from .ui import Pick, UserInterface
from .validation import validate_function_name, validate_package_name

logger = logging.getLogger("funcgen.core.workflow")

DEFAULT_PACKAGE_NAME = "com.function"
MAX_UNIQUE_SUFFIX = 1024

# Opens the newly created file for the user
FileOpener = Callable[[Path], None]


class FunctionAppSettings(AppSettingsPrompter, Protocol):
    def validate_azure_web_jobs_storage(self) -> None: ...


@dataclass(frozen=True)
class WorkflowContext:
    """Properties recorded by each stage of a run (language, template id, ...)."""

    values: Mapping[str, str] = field(default_factory=dict)

    def with_values(self, **values: str) -> WorkflowContext:
        return WorkflowContext({**self.values, **values})


@dataclass(frozen=True)
class CreateFunctionResult:
    """Outcome of a successful run."""

    function_name: str
    template: Template
    settings: ResolvedSettings
    file_path: Path | None
    context: WorkflowContext


def get_unique_fs_path(root: Path, prefix: str) -> str | None:
    """
    Return the first ``<prefix><n>`` (n = 1, 2, ...) not present under ``root``.

    Examples:
        get_unique_fs_path(Path("/proj"), "HttpTriggerJS")  # -> "HttpTriggerJS1"
    """
    for count in range(1, MAX_UNIQUE_SUFFIX):
        name = f"{prefix}{count}"
        if not (root / name).exists():
            return name
    return None


def get_unique_java_fs_path(root: Path, package_name: str, prefix: str) -> str | None:
    """Like :func:`get_unique_fs_path`, checked against the Java source tree."""
    for count in range(1, MAX_UNIQUE_SUFFIX):
        name = f"{prefix}{count}"
        if not get_java_function_file_path(root, package_name, name).exists():
            return name
    return None


def select_template(
    ui: UserInterface,
    catalog: TemplateCatalog,
    language: ProjectLanguage,
    runtime: ProjectRuntime,
    template_filter: TemplateFilter,
) -> Template:
    """
    Pick a template from those eligible for the language, runtime and filter.

    Raises:
        NoEligibleTemplatesError: If the catalog has none
        UserCancelledError: If the user dismisses the picker
    """
    templates = catalog.get_templates(language, runtime, template_filter)
    if not templates:
        raise NoEligibleTemplatesError(
            f"No {template_filter} templates found for {language} on runtime {runtime}.",
            hint="Try a broader filter, e.g. --filter All",
        )

    picks = [Pick(t, t.name) for t in templates]
    return ui.show_quick_pick(picks, "Select a function template").data


def prompt_for_package_name(ui: UserInterface) -> str:
    return ui.show_input_box(
        "Package",
        "Provide a package name",
        validate=validate_package_name,
        default=DEFAULT_PACKAGE_NAME,
    )


def prompt_for_function_name(
    ui: UserInterface,
    root: Path,
    template: Template,
    language: ProjectLanguage,
    package_name: str,
) -> str:
    if language == ProjectLanguage.JAVA:
        prefix = f"{convert_template_id_to_java(template.id)}Java"
        default = get_unique_java_fs_path(root, package_name, prefix)
    elif template.default_function_name:
        default = get_unique_fs_path(root, template.default_function_name)
    else:
        default = None

    return ui.show_input_box(
        "Function name",
        "Provide a function name",
        validate=lambda s: validate_function_name(root, s, language),
        default=default or template.default_function_name,
    )


def create_function(
    root: Path,
    ui: UserInterface,
    catalog: TemplateCatalog,
    app_settings: FunctionAppSettings,
    initializer: ProjectInitializer,
    runner: CommandRunner,
    *,
    opener: FileOpener | None = None,
    language: ProjectLanguage | None = None,
    runtime: ProjectRuntime | None = None,
    template_filter: TemplateFilter | None = None,
    on_output: OutputSink | None = None,
    context: WorkflowContext | None = None,
) -> CreateFunctionResult:
    """
    Add a new function to the project at ``root``.

    Args:
        root: Function app project root
        ui: Prompt surface
        catalog: Template and setting definitions
        app_settings: local.settings.json access for storage and
            resource-reference settings
        initializer: Initializes the project when the user asks to
        runner: Runs Maven for Java projects
        opener: Called with the new function's primary file if it exists
        language: Overrides the project language setting
        runtime: Overrides the project runtime setting
        template_filter: Overrides the template filter setting
        on_output: Receives external tool output
        context: Properties recorded so far by the caller

    Returns:
        The created function, its primary file and the recorded context

    Raises:
        UserCancelledError: If the user cancels any prompt
        NoEligibleTemplatesError: If no template matches
        MissingDependencyError: If Maven is needed but not installed
        ExternalToolError: If Maven fails
    """
    context = context or WorkflowContext()

    validate_is_function_app(root, ui, initializer)

    language = get_project_language(root, ui, language)
    context = context.with_values(projectLanguage=language.value)
    runtime = get_project_runtime(root, language, ui, runtime)
    context = context.with_values(projectRuntime=runtime.value)
    template_filter = get_template_filter(root, template_filter)
    context = context.with_values(templateFilter=template_filter.value)

    template = select_template(ui, catalog, language, runtime, template_filter)
    context = context.with_values(templateId=template.id)
    logger.info("Selected template %s for %s (%s)", template.id, language, runtime)

    if not template.function_config.is_http_trigger:
        app_settings.validate_azure_web_jobs_storage()

    package_name = prompt_for_package_name(ui) if language == ProjectLanguage.JAVA else ""
    name = prompt_for_function_name(ui, root, template, language, package_name)

    settings = resolve_settings(ui, catalog, app_settings, template, runtime)
    if settings.skipped:
        context = context.with_values(skippedSettings=",".join(settings.skipped))

    generator = get_generator(language, runner, on_output)
    file_path = generator.generate(
        GenerationRequest(
            root=root,
            template=template,
            language=language,
            function_name=name,
            settings=settings,
            package_name=package_name,
        )
    )
    logger.info("Created function %s (primary file: %s)", name, file_path)

    if file_path is not None and file_path.exists() and opener is not None:
        opener(file_path)

    return CreateFunctionResult(
        function_name=name,
        template=template,
        settings=settings,
        file_path=file_path,
        context=context,
    )
