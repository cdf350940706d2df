"""
Data models for function templates and their settings.

Templates and setting definitions are read-only inputs loaded from the
template catalog. Everything here is frozen; applying resolved settings
to a template yields a new :class:`FunctionConfig`.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProjectLanguage(StrEnum):
    """Languages a function project can be written in."""

    BASH = "Bash"
    BATCH = "Batch"
    CSHARP = "C#"
    CSHARP_SCRIPT = "C#Script"
    FSHARP_SCRIPT = "F#Script"
    JAVA = "Java"
    JAVASCRIPT = "JavaScript"
    PHP = "PHP"
    POWERSHELL = "PowerShell"
    PYTHON = "Python"
    TYPESCRIPT = "TypeScript"


class ProjectRuntime(StrEnum):
    """Azure Functions host runtimes."""

    ONE = "~1"
    BETA = "beta"


class TemplateFilter(StrEnum):
    """Which subset of the template catalog to offer."""

    ALL = "All"
    CORE = "Core"
    VERIFIED = "Verified"


class ValueType(StrEnum):
    """Prompt strategy for a setting value."""

    STRING = "string"
    BOOLEAN = "boolean"
    ENUM = "enum"
    CHECKBOX_LIST = "checkBoxList"
    INT = "int"


class SettingKind(StrEnum):
    """The prompt variant a setting resolves through."""

    RESOURCE = "resource"
    BOOLEAN = "boolean"
    ENUM = "enum"
    STRING = "string"


# Entry file written by script templates, per language
ENTRY_FILE_NAMES: dict[ProjectLanguage, str] = {
    ProjectLanguage.BASH: "run.sh",
    ProjectLanguage.BATCH: "run.bat",
    ProjectLanguage.CSHARP_SCRIPT: "run.csx",
    ProjectLanguage.FSHARP_SCRIPT: "run.fsx",
    ProjectLanguage.JAVASCRIPT: "index.js",
    ProjectLanguage.PHP: "run.php",
    ProjectLanguage.POWERSHELL: "run.ps1",
    ProjectLanguage.PYTHON: "run.py",
    ProjectLanguage.TYPESCRIPT: "index.ts",
}


def get_file_name_from_language(language: ProjectLanguage) -> str | None:
    """Return the canonical entry file for a language, or None if it has none."""
    return ENTRY_FILE_NAMES.get(language)


class EnumValue(BaseModel):
    """One choice of an enumerated setting."""

    value: str
    display_name: str

    model_config = ConfigDict(frozen=True)


class SettingValidator(BaseModel):
    """A regular expression a setting value must match."""

    expression: str
    error_text: str

    model_config = ConfigDict(frozen=True)


class ConfigSetting(BaseModel):
    """
    Definition of a single template setting for one binding type.

    Attributes:
        name: Setting name as used in function.json
        binding_type: Binding the setting belongs to (e.g. ``queueTrigger``)
        value_type: Declared value type
        label: Human-readable label shown in prompts
        resource_type: Azure resource the value refers to, if any
        default_value: Fallback default for string prompts
        required: Whether an empty value is rejected
        validators: Regex rules applied to string values
        enums: Choices for enumerated settings, in display order
    """

    name: str
    binding_type: str
    value_type: ValueType = ValueType.STRING
    label: str = ""
    resource_type: str | None = None
    default_value: str | None = None
    required: bool = False
    validators: list[SettingValidator] = Field(default_factory=list)
    enums: list[EnumValue] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def display_label(self) -> str:
        return self.label or self.name

    @property
    def kind(self) -> SettingKind:
        """Prompt variant for this setting; unknown value types prompt as strings."""
        if self.resource_type is not None:
            return SettingKind.RESOURCE
        if self.value_type == ValueType.BOOLEAN:
            return SettingKind.BOOLEAN
        if self.value_type == ValueType.ENUM:
            return SettingKind.ENUM
        return SettingKind.STRING

    def validate_setting(self, value: str | None) -> str | None:
        """
        Validate a candidate value.

        Returns:
            Error message, or None if the value is acceptable
        """
        if not value:
            if self.required:
                return f"'{self.display_label}' is required."
            return None

        for validator in self.validators:
            if not re.search(validator.expression, value):
                return validator.error_text

        return None


class FunctionConfig(BaseModel):
    """
    The bindings section of a template's function.json.

    The first binding with ``direction == "in"`` is the input binding;
    its values seed the defaults of prompted settings.
    """

    bindings: list[dict[str, Any]] = Field(default_factory=list)
    disabled: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def in_binding(self) -> dict[str, Any]:
        for binding in self.bindings:
            if binding.get("direction") == "in":
                return binding
        return {}

    @property
    def in_binding_type(self) -> str:
        return str(self.in_binding.get("type", ""))

    @property
    def is_http_trigger(self) -> bool:
        return self.in_binding_type.lower() == "httptrigger"

    def get_in_binding_value(self, name: str) -> str | None:
        value = self.in_binding.get(name)
        if value is None:
            return None
        return str(value)

    def with_in_binding_values(self, values: dict[str, str]) -> FunctionConfig:
        """Return a copy whose input binding carries the given values."""
        bindings: list[dict[str, Any]] = []
        applied = False
        for binding in self.bindings:
            if not applied and binding.get("direction") == "in":
                binding = {**binding, **values}
                applied = True
            bindings.append(dict(binding))
        return FunctionConfig(bindings=bindings, disabled=self.disabled)

    def to_function_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"bindings": [dict(b) for b in self.bindings]}
        if self.disabled:
            data["disabled"] = True
        return data


class Template(BaseModel):
    """
    A function template from the catalog.

    Attributes:
        id: Template identifier (e.g. ``HttpTrigger-JavaScript``)
        name: Display name shown in the picker
        language: Language the template is written in
        runtimes: Host runtimes the template supports
        category: Catalog categories (``Core``, ``Experimental``, ...)
        default_function_name: Base for the suggested function name
        user_prompted_settings: Setting names to prompt for, in order
        function_config: Bindings written to function.json
        files: Relative path to file content, written on materialization
    """

    id: str
    name: str
    language: ProjectLanguage
    runtimes: list[ProjectRuntime] = Field(default_factory=lambda: list(ProjectRuntime))
    category: list[str] = Field(default_factory=list)
    default_function_name: str = ""
    user_prompted_settings: list[str] = Field(default_factory=list)
    function_config: FunctionConfig = Field(default_factory=FunctionConfig)
    files: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
