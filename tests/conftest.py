"""Shared pytest fixtures for funcgen tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from funcgen.core.models import ConfigSetting, ProjectRuntime
from funcgen.core.process import CommandResult, OutputSink
from funcgen.core.templates import DirectoryTemplateCatalog
from funcgen.core.ui import ScriptedUserInterface


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(self) -> None:
        self.exit_code = 0
        self.output = ""
        self.creates: Path | None = None
        self.calls: list[tuple[str, list[str], Path]] = []

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        on_output: OutputSink | None = None,
    ) -> CommandResult:
        self.calls.append((command, list(args), cwd))
        if on_output:
            for line in self.output.splitlines():
                on_output(line)
        if self.exit_code == 0 and self.creates is not None:
            self.creates.parent.mkdir(parents=True, exist_ok=True)
            self.creates.write_text("// generated\n")
        return CommandResult(exit_code=self.exit_code, output=self.output)


class FakeAppSettings:
    """
    Counts storage checks and answers resource prompts with a fixed name.

    When ``ui`` is set, each storage check records the prompts shown so far.
    """

    def __init__(self) -> None:
        self.ui: ScriptedUserInterface | None = None
        self.prompts_at_check: list[list[str]] = []
        self.storage_checks = 0
        self.connection = "MyStorageConnection"
        self.requested: list[str] = []

    def validate_azure_web_jobs_storage(self) -> None:
        self.storage_checks += 1
        if self.ui is not None:
            self.prompts_at_check.append(list(self.ui.prompts))

    def prompt_for_app_setting(self, resource_type: str) -> str:
        self.requested.append(resource_type)
        return self.connection


class SpyCatalog(DirectoryTemplateCatalog):
    """Bundled catalog that records setting lookups."""

    def __init__(self) -> None:
        super().__init__()
        self.setting_lookups: list[tuple[str, str]] = []

    def get_setting(
        self, runtime: ProjectRuntime, binding_type: str, setting_name: str
    ) -> ConfigSetting | None:
        self.setting_lookups.append((binding_type, setting_name))
        return super().get_setting(runtime, binding_type, setting_name)


def write_project(
    root: Path,
    language: str | None = "JavaScript",
    runtime: str | None = "~1",
    storage: str = "UseDevelopmentStorage=true",
) -> Path:
    """Create a function app project skeleton."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "host.json").write_text("{}\n")
    (root / "local.settings.json").write_text(
        json.dumps({"IsEncrypted": False, "Values": {"AzureWebJobsStorage": storage}})
    )
    vscode = root / ".vscode"
    vscode.mkdir(exist_ok=True)
    (vscode / "launch.json").write_text('{"version": "0.2.0", "configurations": []}\n')

    settings = {}
    if language:
        settings["azureFunctions.projectLanguage"] = language
    if runtime:
        settings["azureFunctions.projectRuntime"] = runtime
    (vscode / "settings.json").write_text(json.dumps(settings))
    return root


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A JavaScript function app project on runtime ~1."""
    return write_project(tmp_path / "app")


@pytest.fixture
def java_project_dir(tmp_path: Path) -> Path:
    """A Java function app project."""
    root = write_project(tmp_path / "java-app", language="Java", runtime=None)
    (root / "pom.xml").write_text("<project/>\n")
    return root


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str = "custom", **kwargs: str | None) -> Path:
        return write_project(tmp_path / name, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def catalog() -> SpyCatalog:
    return SpyCatalog()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def app_settings() -> FakeAppSettings:
    return FakeAppSettings()
