"""
Function and package name validation.

Validators return an error message, or None when the value is valid.
They are called on every submission of a prompt, so they hold no state.
"""

from __future__ import annotations

import re
from pathlib import Path

from .models import ProjectLanguage

FUNCTION_NAME_REGEX = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")
PACKAGE_NAME_REGEX = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*")

# Reserved words that can't be used as Java class or package segment names
JAVA_RESERVED_KEYWORDS = {
    "abstract",
    "assert",
    "boolean",
    "break",
    "byte",
    "case",
    "catch",
    "char",
    "class",
    "const",
    "continue",
    "default",
    "do",
    "double",
    "else",
    "enum",
    "extends",
    "final",
    "finally",
    "float",
    "for",
    "goto",
    "if",
    "implements",
    "import",
    "instanceof",
    "int",
    "interface",
    "long",
    "native",
    "new",
    "package",
    "private",
    "protected",
    "public",
    "return",
    "short",
    "static",
    "strictfp",
    "super",
    "switch",
    "synchronized",
    "this",
    "throw",
    "throws",
    "transient",
    "try",
    "void",
    "volatile",
    "while",
    # Literals
    "true",
    "false",
    "null",
}

INVALID_NAME_MESSAGE = (
    "Function name must start with a letter and can contain letters, digits, '_' and '-'"
)


def get_java_class_name(name: str) -> str:
    """
    Convert a function name to the Java class Maven generates for it.

    Examples:
        get_java_class_name("myTimer")  # -> "MyTimer"
        get_java_class_name("http-trigger")  # -> "Http_trigger"
    """
    name = name.replace("-", "_")
    return name[:1].upper() + name[1:]


def validate_java_function_name(name: str | None) -> str | None:
    """Validate a function name for a Java project."""
    if not name:
        return "The function name cannot be empty."

    if not FUNCTION_NAME_REGEX.fullmatch(name):
        return INVALID_NAME_MESSAGE

    if name in JAVA_RESERVED_KEYWORDS:
        return f"'{name}' is a Java reserved keyword and cannot be used as a function name"

    return None


def validate_package_name(package_name: str | None) -> str | None:
    """
    Validate a Java package name.

    Examples:
        validate_package_name("com.function")  # -> None
        validate_package_name("com..function")  # -> "..."
    """
    if not package_name:
        return "The package name cannot be empty."

    if not PACKAGE_NAME_REGEX.fullmatch(package_name):
        return (
            "Package name must be dot separated segments that start with a letter or '_' "
            "and contain only letters, digits and '_'"
        )

    for segment in package_name.split("."):
        if segment in JAVA_RESERVED_KEYWORDS:
            return f"Package name segment '{segment}' is a Java reserved keyword"

    return None


def validate_function_name(root: Path, name: str | None, language: ProjectLanguage) -> str | None:
    """
    Validate a new function name for the project at ``root``.

    Args:
        root: Function app project root
        name: Proposed function name
        language: Project language

    Returns:
        Error message, or None if the name can be used
    """
    if not name:
        return "The function name cannot be empty."

    if language == ProjectLanguage.JAVA:
        return validate_java_function_name(name)

    if (root / name).exists():
        return f"A folder with the name '{name}' already exists."

    if not FUNCTION_NAME_REGEX.fullmatch(name):
        return INVALID_NAME_MESSAGE

    return None
