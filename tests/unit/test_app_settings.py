"""Tests for local.settings.json handling."""

import json

import pytest

from funcgen.core.app_settings import (
    AZURE_WEB_JOBS_STORAGE,
    STORAGE_EMULATOR_CONNECTION,
    LocalAppSettings,
)
from funcgen.core.errors import FuncGenError, UserCancelledError
from funcgen.core.ui import DEFAULT, ScriptedUserInterface


@pytest.fixture
def unset_storage_project(make_project):
    return make_project("my-app", storage="")


def _values(root):
    return json.loads((root / "local.settings.json").read_text())["Values"]


class TestStorageCheck:
    def test_configured_storage_does_not_prompt(self, project_dir):
        ui = ScriptedUserInterface()

        LocalAppSettings(ui, project_dir).validate_azure_web_jobs_storage()

        assert ui.prompts == []

    def test_use_emulator(self, unset_storage_project):
        ui = ScriptedUserInterface(["Use the local storage emulator"])

        LocalAppSettings(ui, unset_storage_project).validate_azure_web_jobs_storage()

        assert _values(unset_storage_project)[AZURE_WEB_JOBS_STORAGE] == STORAGE_EMULATOR_CONNECTION

    def test_enter_connection_string(self, unset_storage_project):
        ui = ScriptedUserInterface(
            ["Enter a connection string", "  ", "DefaultEndpointsProtocol=https"]
        )

        LocalAppSettings(ui, unset_storage_project).validate_azure_web_jobs_storage()

        values = _values(unset_storage_project)
        assert values[AZURE_WEB_JOBS_STORAGE] == "DefaultEndpointsProtocol=https"
        assert len(ui.rejections) == 1

    def test_skip_leaves_file_alone(self, unset_storage_project):
        before = (unset_storage_project / "local.settings.json").read_text()

        LocalAppSettings(
            ScriptedUserInterface(["Skip for now"]), unset_storage_project
        ).validate_azure_web_jobs_storage()

        assert (unset_storage_project / "local.settings.json").read_text() == before

    def test_cancel(self, unset_storage_project):
        with pytest.raises(UserCancelledError):
            LocalAppSettings(
                ScriptedUserInterface(["Cancel"]), unset_storage_project
            ).validate_azure_web_jobs_storage()


class TestPromptForAppSetting:
    def test_pick_existing(self, project_dir):
        ui = ScriptedUserInterface([AZURE_WEB_JOBS_STORAGE])

        name = LocalAppSettings(ui, project_dir).prompt_for_app_setting("Storage")

        assert name == AZURE_WEB_JOBS_STORAGE

    def test_create_new(self, unset_storage_project):
        ui = ScriptedUserInterface(["+ New app setting", DEFAULT, "UseDevelopmentStorage=true"])

        name = LocalAppSettings(ui, unset_storage_project).prompt_for_app_setting("Storage")

        assert name == "MY_APP_STORAGE"
        assert _values(unset_storage_project)["MY_APP_STORAGE"] == "UseDevelopmentStorage=true"

    def test_new_name_must_be_unique(self, project_dir):
        ui = ScriptedUserInterface(
            ["+ New app setting", AZURE_WEB_JOBS_STORAGE, "QueueConnection", "conn"]
        )

        name = LocalAppSettings(ui, project_dir).prompt_for_app_setting("Storage")

        assert name == "QueueConnection"
        assert ui.rejections[0][2] == "An app setting named 'AzureWebJobsStorage' already exists."


def test_missing_file_uses_defaults(tmp_path):
    settings = LocalAppSettings(ScriptedUserInterface(), tmp_path)

    assert settings.get_values() == {AZURE_WEB_JOBS_STORAGE: ""}

    settings.set_value("Other", "x")
    assert _values(tmp_path) == {AZURE_WEB_JOBS_STORAGE: "", "Other": "x"}


def test_invalid_json(tmp_path):
    (tmp_path / "local.settings.json").write_text("not json")

    with pytest.raises(FuncGenError, match="Invalid JSON"):
        LocalAppSettings(ScriptedUserInterface(), tmp_path).get_values()
