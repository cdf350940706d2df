"""
funcgen - add functions to Azure Functions projects from templates.

Selects a function template, resolves its settings through typed prompts,
and writes the new function either directly from the template files or
through Maven for Java projects.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    ExternalToolError,
    FuncGenError,
    MissingDependencyError,
    NoEligibleTemplatesError,
    UserCancelledError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "FuncGenError",
    "UserCancelledError",
    "MissingDependencyError",
    "ExternalToolError",
    "NoEligibleTemplatesError",
]
