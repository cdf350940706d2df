"""
Function template catalog and template materialization.

The bundled catalog lives in ``funcgen/templates``:

    templates/
      bindings.json             setting definitions per binding type
      HttpTrigger-JavaScript/
        metadata.json           name, language, category, prompted settings
        function.json           bindings written for the new function
        index.js                any other files are copied as-is

Text files go through ``{{variable}}`` substitution when written.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from .errors import TemplateError
from .models import (
    ConfigSetting,
    EnumValue,
    FunctionConfig,
    ProjectLanguage,
    ProjectRuntime,
    SettingValidator,
    Template,
    TemplateFilter,
    ValueType,
)

logger = logging.getLogger("funcgen.core.templates")

BUILTIN_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
METADATA_FILE = "metadata.json"
FUNCTION_FILE = "function.json"
BINDINGS_FILE = "bindings.json"

# Templates that have been tested end to end
VERIFIED_TEMPLATES = {
    "BlobTrigger-JavaScript",
    "GenericWebHook-JavaScript",
    "GitHubWebHook-JavaScript",
    "HttpTrigger-JavaScript",
    "HttpTriggerWithParameters-JavaScript",
    "ManualTrigger-JavaScript",
    "QueueTrigger-JavaScript",
    "TimerTrigger-JavaScript",
    "HttpTrigger-Java",
    "QueueTrigger-Java",
    "TimerTrigger-Java",
}


class TemplateCatalog(Protocol):
    """Source of templates and setting definitions."""

    def get_templates(
        self,
        language: ProjectLanguage,
        runtime: ProjectRuntime,
        template_filter: TemplateFilter,
    ) -> list[Template]:
        """Return templates eligible for the language, runtime and filter."""
        ...

    def get_setting(
        self, runtime: ProjectRuntime, binding_type: str, setting_name: str
    ) -> ConfigSetting | None:
        """Return the definition of one setting, or None if unknown."""
        ...


def convert_template_id_to_java(template_id: str) -> str:
    """
    Translate a catalog template id to the Maven plugin's template name.

    Examples:
        convert_template_id_to_java("HttpTrigger-Java")  # -> "HttpTrigger"
    """
    return template_id.removesuffix("-Java")


def matches_filter(template: Template, template_filter: TemplateFilter) -> bool:
    if template_filter == TemplateFilter.ALL:
        return True
    if template_filter == TemplateFilter.CORE:
        return "Core" in template.category
    return template.id in VERIFIED_TEMPLATES


class DirectoryTemplateCatalog:
    """
    Template catalog read from a directory tree.

    Setting definitions are shared across runtimes.

    Args:
        templates_dir: Catalog root (defaults to the bundled templates)
    """

    def __init__(self, templates_dir: Path | None = None):
        self.templates_dir = templates_dir or BUILTIN_TEMPLATES_DIR
        self._templates: list[Template] | None = None
        self._settings: dict[tuple[str, str], ConfigSetting] | None = None

    @property
    def templates(self) -> list[Template]:
        if self._templates is None:
            self._templates = self._load_templates()
        return self._templates

    def get_templates(
        self,
        language: ProjectLanguage,
        runtime: ProjectRuntime,
        template_filter: TemplateFilter,
    ) -> list[Template]:
        return [
            t
            for t in self.templates
            if t.language == language
            and runtime in t.runtimes
            and matches_filter(t, template_filter)
        ]

    def get_setting(
        self, runtime: ProjectRuntime, binding_type: str, setting_name: str
    ) -> ConfigSetting | None:
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings.get((binding_type.lower(), setting_name))

    def _load_templates(self) -> list[Template]:
        if not self.templates_dir.exists():
            raise TemplateError(f"Template catalog not found at {self.templates_dir}")

        templates = []
        for template_dir in sorted(self.templates_dir.iterdir()):
            if (template_dir / METADATA_FILE).exists():
                templates.append(load_template(template_dir))
        logger.debug("Loaded %d templates from %s", len(templates), self.templates_dir)
        return templates

    def _load_settings(self) -> dict[tuple[str, str], ConfigSetting]:
        path = self.templates_dir / BINDINGS_FILE
        if not path.exists():
            return {}
        data = _read_json(path)

        settings: dict[tuple[str, str], ConfigSetting] = {}
        for binding in data.get("bindings", []):
            binding_type = binding.get("type", "")
            for raw in binding.get("settings", []):
                setting = _parse_setting(binding_type, raw)
                settings[(binding_type.lower(), setting.name)] = setting
        return settings


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TemplateError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise TemplateError(f"Expected a JSON object in {path}")
    return data


def _parse_setting(binding_type: str, raw: dict[str, Any]) -> ConfigSetting:
    value_type = raw.get("value", ValueType.STRING.value)
    try:
        parsed_type = ValueType(value_type)
    except ValueError:
        # Unsupported value types are prompted as strings
        parsed_type = ValueType.STRING

    try:
        return ConfigSetting(
            name=raw["name"],
            binding_type=binding_type,
            value_type=parsed_type,
            label=raw.get("label", raw["name"]),
            resource_type=raw.get("resource"),
            default_value=raw.get("defaultValue"),
            required=raw.get("required", False),
            validators=[
                SettingValidator(expression=v["expression"], error_text=v["errorText"])
                for v in raw.get("validators", [])
            ],
            enums=[
                EnumValue(value=e["value"], display_name=e.get("display", e["value"]))
                for e in raw.get("enum", [])
            ],
        )
    except (KeyError, ValidationError) as e:
        raise TemplateError(f"Invalid setting for binding '{binding_type}': {e}") from e


def load_template(template_dir: Path) -> Template:
    """
    Load one template from its directory.

    Raises:
        TemplateError: If the metadata is missing or malformed
    """
    metadata = _read_json(template_dir / METADATA_FILE)
    function_json = template_dir / FUNCTION_FILE
    config_data = _read_json(function_json) if function_json.exists() else {}

    files: dict[str, str] = {}
    for path in sorted(template_dir.rglob("*")):
        if path.is_file() and path.name not in (METADATA_FILE, FUNCTION_FILE):
            files[path.relative_to(template_dir).as_posix()] = path.read_text(encoding="utf-8")

    try:
        template = Template(
            id=metadata.get("id", template_dir.name),
            name=metadata["name"],
            language=ProjectLanguage(metadata["language"]),
            runtimes=metadata.get("runtimes", list(ProjectRuntime)),
            category=metadata.get("category", []),
            default_function_name=metadata.get("defaultFunctionName", ""),
            user_prompted_settings=metadata.get("userPrompt", []),
            function_config=FunctionConfig(
                bindings=config_data.get("bindings", []),
                disabled=config_data.get("disabled", False),
            ),
            files=files,
        )
    except (KeyError, ValueError) as e:
        raise TemplateError(f"Invalid template metadata in {template_dir}: {e}") from e
    return template


def substitute_template_vars(content: str, variables: dict[str, str]) -> str:
    """
    Substitute {{variable}} patterns in template content.

    Examples:
        substitute_template_vars("Hello {{name}}", {"name": "World"})
        # -> "Hello World"
    """
    for key, value in variables.items():
        pattern = f"{{{{{key}}}}}"
        content = content.replace(pattern, value)

    return content


def write_template_files(
    template: Template,
    function_dir: Path,
    function_config: FunctionConfig | None = None,
) -> list[Path]:
    """
    Write a template's files into a new function directory.

    Args:
        template: Template to materialize
        function_dir: Destination directory; must not exist yet
        function_config: Bindings to write to function.json (defaults to
            the template's own)

    Returns:
        Paths of the files written

    Raises:
        TemplateError: If the directory exists or writing fails
    """
    if function_dir.exists():
        raise TemplateError(f"Directory already exists: {function_dir}")

    config = function_config or template.function_config
    variables = {"function_name": function_dir.name, "template_id": template.id}
    written: list[Path] = []

    try:
        function_dir.mkdir(parents=True)

        function_json = function_dir / FUNCTION_FILE
        function_json.write_text(
            json.dumps(config.to_function_json(), indent=2) + "\n", encoding="utf-8"
        )
        written.append(function_json)

        for rel_path, content in template.files.items():
            dst_path = function_dir / rel_path
            dst_path.parent.mkdir(parents=True, exist_ok=True)
            dst_path.write_text(substitute_template_vars(content, variables), encoding="utf-8")
            written.append(dst_path)
    except OSError as e:
        shutil.rmtree(function_dir, ignore_errors=True)
        raise TemplateError(f"Failed to write template files: {e}") from e

    logger.debug("Wrote %d files for %s to %s", len(written), template.id, function_dir)
    return written
