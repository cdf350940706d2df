"""End-to-end tests for the create function workflow."""

import json

import pytest

from funcgen.core import generation
from funcgen.core.errors import ExternalToolError, NoEligibleTemplatesError, UserCancelledError
from funcgen.core.models import ProjectLanguage, ProjectRuntime, TemplateFilter
from funcgen.core.ui import CANCEL, DEFAULT, ScriptedUserInterface
from funcgen.core.workflow import (
    WorkflowContext,
    create_function,
    get_unique_fs_path,
    get_unique_java_fs_path,
)


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, path):
        self.calls.append(path)


@pytest.fixture
def opener():
    return Recorder()


@pytest.fixture
def initializer():
    return Recorder()


@pytest.fixture
def maven_installed(monkeypatch):
    monkeypatch.setattr(generation, "validate_maven_installed", lambda: None)


@pytest.fixture
def run(catalog, app_settings, initializer, fake_runner, opener):
    """Run the workflow with the shared fakes."""

    def _run(root, answers, **kwargs):
        ui = ScriptedUserInterface(answers)
        app_settings.ui = ui
        result = create_function(
            root, ui, catalog, app_settings, initializer, fake_runner, opener=opener, **kwargs
        )
        return result, ui

    return _run


def _function_dirs(root):
    return sorted(p.name for p in root.iterdir() if (p / "function.json").exists())


class TestScriptFunctions:
    def test_http_trigger(self, run, project_dir, app_settings, opener):
        """HTTP triggers write the template and skip the storage check."""
        result, ui = run(project_dir, ["HTTP trigger", DEFAULT, "Anonymous"])

        assert result.function_name == "HttpTriggerJS1"
        assert result.file_path == project_dir / "HttpTriggerJS1" / "index.js"
        assert opener.calls == [result.file_path]
        assert app_settings.storage_checks == 0
        assert app_settings.prompts_at_check == []
        assert ui.prompts == ["Select a function template", "Function name", "Authorization level"]

        data = json.loads((project_dir / "HttpTriggerJS1" / "function.json").read_text())
        assert data["bindings"][0]["authLevel"] == "anonymous"

    def test_named_function_path(self, run, project_dir):
        result, _ = run(project_dir, ["HTTP trigger", "HttpTrigger1", "Function"])

        assert result.file_path == project_dir / "HttpTrigger1" / "index.js"
        assert result.file_path.exists()

    def test_timer_trigger_checks_storage_once(self, run, project_dir, app_settings):
        result, ui = run(project_dir, ["Timer trigger", "Nightly", "bad schedule", "0 0 2 * * *"])

        assert app_settings.storage_checks == 1
        assert app_settings.prompts_at_check == [["Select a function template"]]
        assert ui.prompts[1] == "Function name"
        assert result.settings.values == {"schedule": "0 0 2 * * *"}
        assert [r[1] for r in ui.rejections] == ["bad schedule"]
        data = json.loads((project_dir / "Nightly" / "function.json").read_text())
        assert data["bindings"][0]["schedule"] == "0 0 2 * * *"

    def test_queue_trigger_uses_app_setting(self, run, project_dir, app_settings):
        result, _ = run(project_dir, ["Queue trigger", "Orders", "orders"])

        assert app_settings.requested == ["Storage"]
        binding = json.loads((project_dir / "Orders" / "function.json").read_text())["bindings"][0]
        assert binding["connection"] == "MyStorageConnection"
        assert binding["queueName"] == "orders"

    def test_default_name_is_unique(self, run, project_dir):
        (project_dir / "HttpTriggerJS1").mkdir()

        result, _ = run(project_dir, ["HTTP trigger", DEFAULT, "Function"])

        assert result.function_name == "HttpTriggerJS2"

    def test_existing_folder_name_is_reprompted(self, run, project_dir):
        (project_dir / "Taken").mkdir()

        result, ui = run(project_dir, ["HTTP trigger", "Taken", "Fresh", "Function"])

        assert result.function_name == "Fresh"
        assert ui.rejections[0] == (
            "Function name",
            "Taken",
            "A folder with the name 'Taken' already exists.",
        )

    def test_context_records_choices(self, run, project_dir):
        result, _ = run(
            project_dir,
            ["HTTP trigger", DEFAULT, "Function"],
            context=WorkflowContext({"caller": "test"}),
        )

        assert dict(result.context.values) == {
            "caller": "test",
            "projectLanguage": "JavaScript",
            "projectRuntime": "~1",
            "templateFilter": "Verified",
            "templateId": "HttpTrigger-JavaScript",
        }

    def test_overrides(self, run, project_dir, opener):
        result, _ = run(
            project_dir,
            ["HTTP trigger", DEFAULT, "Function"],
            language=ProjectLanguage.PYTHON,
            template_filter=TemplateFilter.ALL,
        )

        assert result.template.id == "HttpTrigger-Python"
        assert result.file_path == project_dir / "HttpTriggerPython1" / "run.py"


class TestJavaFunctions:
    def test_timer_trigger(
        self, run, java_project_dir, fake_runner, app_settings, opener, maven_installed
    ):
        expected = java_project_dir / "src" / "main" / "java" / "com" / "function" / "MyTimer.java"
        fake_runner.creates = expected

        result, ui = run(java_project_dir, ["Timer trigger", DEFAULT, "MyTimer", DEFAULT])

        assert result.file_path == expected
        assert opener.calls == [expected]
        assert app_settings.storage_checks == 1
        assert ui.prompts[:3] == ["Select a function template", "Package", "Function name"]
        assert app_settings.prompts_at_check == [["Select a function template"]]
        (call,) = fake_runner.calls
        assert call[0] == "mvn"
        assert call[1] == [
            "azure-functions:add",
            "-B",
            "-Dfunctions.package=com.function",
            "-Dfunctions.name=MyTimer",
            "-Dfunctions.template=TimerTrigger",
            "-Dschedule=0 */5 * * * *",
        ]
        assert result.context.values["projectRuntime"] == "beta"

    def test_default_java_name(self, run, java_project_dir, maven_installed):
        result, _ = run(java_project_dir, ["HTTP trigger", "org.example", DEFAULT, "Admin"])

        assert result.function_name == "HttpTriggerJava1"

    def test_maven_failure(self, run, java_project_dir, fake_runner, opener, maven_installed):
        fake_runner.exit_code = 1
        fake_runner.output = "[ERROR] BUILD FAILURE"

        with pytest.raises(ExternalToolError):
            run(java_project_dir, ["HTTP trigger", DEFAULT, "MyHttp", "Function"])

        assert opener.calls == []

    def test_file_not_generated_is_not_opened(self, run, java_project_dir, opener, maven_installed):
        result, _ = run(java_project_dir, ["HTTP trigger", DEFAULT, "MyHttp", "Function"])

        assert not result.file_path.exists()
        assert opener.calls == []


class TestCancellation:
    def test_cancel_at_template_pick(self, run, project_dir, catalog, opener):
        with pytest.raises(UserCancelledError):
            run(project_dir, [CANCEL])

        assert catalog.setting_lookups == []
        assert _function_dirs(project_dir) == []
        assert opener.calls == []

    def test_cancel_at_name(self, run, project_dir, catalog):
        with pytest.raises(UserCancelledError):
            run(project_dir, ["HTTP trigger", CANCEL])

        assert catalog.setting_lookups == []
        assert _function_dirs(project_dir) == []

    def test_cancel_at_project_prompt(self, run, project_dir, initializer):
        (project_dir / "host.json").unlink()

        with pytest.raises(UserCancelledError):
            run(project_dir, ["Cancel"])
        assert initializer.calls == []


class TestProjectValidation:
    def test_skip_continues_without_initializing(self, run, project_dir, initializer):
        (project_dir / ".vscode" / "launch.json").unlink()

        result, ui = run(project_dir, ["Skip for now", "HTTP trigger", DEFAULT, "Function"])

        assert initializer.calls == []
        assert ui.prompts[0].startswith("The selected folder is not a function app project")
        assert result.file_path.exists()

    def test_initialize_is_called(self, run, project_dir, initializer):
        (project_dir / "host.json").unlink()

        run(project_dir, ["Yes", "HTTP trigger", DEFAULT, "Function"])

        assert initializer.calls == [project_dir]


def test_no_eligible_templates(run, project_dir, catalog):
    with pytest.raises(NoEligibleTemplatesError) as exc_info:
        run(project_dir, [], language=ProjectLanguage.PHP)

    assert exc_info.value.hint == "Try a broader filter, e.g. --filter All"


def test_runtime_prompt_when_unset(run, make_project):
    root = make_project(runtime=None)

    result, _ = run(root, ["Azure Functions v1 (~1)", "HTTP trigger", DEFAULT, "Function"])

    assert result.context.values["projectRuntime"] == ProjectRuntime.ONE.value


def test_unique_paths(tmp_path):
    (tmp_path / "Fn1").mkdir()
    (tmp_path / "Fn2").mkdir()
    assert get_unique_fs_path(tmp_path, "Fn") == "Fn3"

    java_file = tmp_path / "src" / "main" / "java" / "com" / "function" / "FnJava1.java"
    java_file.parent.mkdir(parents=True)
    java_file.write_text("")
    assert get_unique_java_fs_path(tmp_path, "com.function", "FnJava") == "FnJava2"
