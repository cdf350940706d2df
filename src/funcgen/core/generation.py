"""
Generation strategies for a new function.

Java functions are added through the Azure Functions Maven plugin, which
writes the class into the project's source tree. Every other language
writes the template's files into a new folder named after the function.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from .models import ProjectLanguage, Template, get_file_name_from_language
from .process import MAVEN, CommandRunner, OutputSink, execute_command, validate_maven_installed
from .resolver import ResolvedSettings
from .templates import convert_template_id_to_java, write_template_files
from .validation import get_java_class_name

logger = logging.getLogger("funcgen.core.generation")

JAVA_SOURCE_DIR = Path("src") / "main" / "java"
MAVEN_ADD_GOAL = "azure-functions:add"


class GenerationKind(StrEnum):
    """How a language's functions are produced."""

    MAVEN = "maven"
    TEMPLATE = "template"


def generation_kind(language: ProjectLanguage) -> GenerationKind:
    if language == ProjectLanguage.JAVA:
        return GenerationKind.MAVEN
    return GenerationKind.TEMPLATE


@dataclass(frozen=True)
class GenerationRequest:
    """Everything a generator needs to create one function."""

    root: Path
    template: Template
    language: ProjectLanguage
    function_name: str
    settings: ResolvedSettings
    package_name: str = ""


class Generator(Protocol):
    def generate(self, request: GenerationRequest) -> Path | None:
        """Create the function; return its primary file, if it has one."""
        ...


def get_java_function_file_path(root: Path, package_name: str, function_name: str) -> Path:
    """
    Path of the class Maven generates for a Java function.

    Examples:
        get_java_function_file_path(Path("/proj"), "com.function", "MyTimer")
        # -> /proj/src/main/java/com/function/MyTimer.java
    """
    return (
        root
        / JAVA_SOURCE_DIR
        / Path(*package_name.split("."))
        / f"{get_java_class_name(function_name)}.java"
    )


def get_script_function_file_path(
    root: Path, function_name: str, language: ProjectLanguage
) -> Path | None:
    """Path of the entry file of a script function, or None if the language has none."""
    file_name = get_file_name_from_language(language)
    if file_name is None:
        return None
    return root / function_name / file_name


class JavaGenerator:
    """
    Adds a function with ``mvn azure-functions:add``.

    Args:
        runner: Runs Maven
        on_output: Receives Maven's output as it is produced
    """

    def __init__(self, runner: CommandRunner, on_output: OutputSink | None = None):
        self.runner = runner
        self.on_output = on_output

    def build_args(self, request: GenerationRequest) -> list[str]:
        return [
            MAVEN_ADD_GOAL,
            "-B",
            f"-Dfunctions.package={request.package_name}",
            f"-Dfunctions.name={request.function_name}",
            f"-Dfunctions.template={convert_template_id_to_java(request.template.id)}",
            *request.settings.as_maven_properties(),
        ]

    def generate(self, request: GenerationRequest) -> Path | None:
        validate_maven_installed()
        execute_command(
            self.runner,
            request.root,
            MAVEN,
            *self.build_args(request),
            on_output=self.on_output,
        )
        return get_java_function_file_path(
            request.root, request.package_name, request.function_name
        )


class ScriptGenerator:
    """Writes the template's files into ``<root>/<function name>``."""

    def generate(self, request: GenerationRequest) -> Path | None:
        function_dir = request.root / request.function_name
        config = request.template.function_config.with_in_binding_values(
            request.settings.as_binding_values()
        )
        write_template_files(request.template, function_dir, config)
        return get_script_function_file_path(
            request.root, request.function_name, request.language
        )


def get_generator(
    language: ProjectLanguage,
    runner: CommandRunner,
    on_output: OutputSink | None = None,
) -> Generator:
    kind = generation_kind(language)
    if kind == GenerationKind.MAVEN:
        return JavaGenerator(runner, on_output)
    return ScriptGenerator()
