"""
Core of funcgen: models, validation, prompting and generation.

- models.py - Templates, settings and the language/runtime enums
- validation.py - Function and package name rules
- ui.py - Prompt protocol and the scripted implementation
- settings.py - Project settings (.vscode/settings.json)
- app_settings.py - local.settings.json
- project.py - Project validation and initialization
- templates.py - Template catalog and materialization
- resolver.py - Setting resolution
- process.py - External tool execution
- generation.py - Maven and template generation strategies
- workflow.py - The create-function workflow
"""

from __future__ import annotations

from .errors import (
    ExternalToolError,
    FuncGenError,
    InitError,
    MissingDependencyError,
    NoEligibleTemplatesError,
    TemplateError,
    UserCancelledError,
)
from .models import (
    ConfigSetting,
    EnumValue,
    FunctionConfig,
    ProjectLanguage,
    ProjectRuntime,
    Template,
    TemplateFilter,
    ValueType,
)
from .workflow import CreateFunctionResult, WorkflowContext, create_function

__all__ = [
    # Errors
    "FuncGenError",
    "UserCancelledError",
    "MissingDependencyError",
    "ExternalToolError",
    "NoEligibleTemplatesError",
    "TemplateError",
    "InitError",
    # Models
    "ConfigSetting",
    "EnumValue",
    "FunctionConfig",
    "ProjectLanguage",
    "ProjectRuntime",
    "Template",
    "TemplateFilter",
    "ValueType",
    # Workflow
    "CreateFunctionResult",
    "WorkflowContext",
    "create_function",
]
