"""
Local app settings (``local.settings.json``).

Resource-reference settings such as a queue trigger's ``connection`` name an
app setting that holds a connection string. This module lets the user pick
an existing app setting or add a new one, and checks that the storage
account setting the Functions host needs for non-HTTP triggers is present.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import FuncGenError, UserCancelledError
from .ui import Pick, UserInterface

logger = logging.getLogger("funcgen.core.app_settings")

LOCAL_SETTINGS_FILE = "local.settings.json"
AZURE_WEB_JOBS_STORAGE = "AzureWebJobsStorage"
STORAGE_EMULATOR_CONNECTION = "UseDevelopmentStorage=true"

# Suffix used when suggesting a name for a new connection setting
_CONNECTION_SUFFIX = "_STORAGE"


def default_local_settings() -> dict[str, Any]:
    """Content of a fresh local.settings.json."""
    return {
        "IsEncrypted": False,
        "Values": {
            AZURE_WEB_JOBS_STORAGE: "",
        },
    }


class LocalAppSettings:
    """
    Reads and updates the ``Values`` section of local.settings.json.

    Args:
        ui: Prompt surface
        root: Function app project root
    """

    def __init__(self, ui: UserInterface, root: Path):
        self.ui = ui
        self.root = root
        self.path = root / LOCAL_SETTINGS_FILE

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return default_local_settings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise FuncGenError(f"Invalid JSON in {self.path}: {e}") from e
        data.setdefault("Values", {})
        return data

    def get_values(self) -> dict[str, str]:
        return dict(self._load()["Values"])

    def set_value(self, key: str, value: str) -> None:
        data = self._load()
        data["Values"][key] = value
        self.path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        logger.debug("Set app setting %s in %s", key, self.path)

    def validate_azure_web_jobs_storage(self) -> None:
        """
        Make sure ``AzureWebJobsStorage`` has a value.

        Non-HTTP triggers need a storage account to run locally. If the
        value is empty the user can enter a connection string, use the
        storage emulator, skip, or cancel.

        Raises:
            UserCancelledError: If the user cancels
        """
        if self.get_values().get(AZURE_WEB_JOBS_STORAGE):
            return

        logger.info("%s is not set in %s", AZURE_WEB_JOBS_STORAGE, self.path)
        picks: list[Pick[str]] = [
            Pick("enter", "Enter a connection string"),
            Pick("emulator", "Use the local storage emulator"),
            Pick("skip", "Skip for now"),
            Pick("cancel", "Cancel"),
        ]
        choice = self.ui.show_quick_pick(
            picks,
            f"Non-HTTP triggers need '{AZURE_WEB_JOBS_STORAGE}' set to run locally",
        ).data

        if choice == "enter":
            value = self.ui.show_input_box(
                "Connection string",
                f"Provide the storage connection string for '{AZURE_WEB_JOBS_STORAGE}'",
                validate=_validate_connection_string,
            )
            self.set_value(AZURE_WEB_JOBS_STORAGE, value)
        elif choice == "emulator":
            self.set_value(AZURE_WEB_JOBS_STORAGE, STORAGE_EMULATOR_CONNECTION)
        elif choice == "cancel":
            raise UserCancelledError()

    def prompt_for_app_setting(self, resource_type: str) -> str:
        """
        Select or create the app setting holding a connection for ``resource_type``.

        Returns:
            The app setting name, which is what the binding references
        """
        values = self.get_values()
        picks: list[Pick[str | None]] = [Pick(None, "+ New app setting")]
        picks.extend(Pick(key, key) for key in sorted(values))

        placeholder = f"Select the app setting with your {resource_type} connection"
        choice = self.ui.show_quick_pick(picks, placeholder).data
        if choice is not None:
            return choice

        default_name = f"{self.root.name}{_CONNECTION_SUFFIX}".replace("-", "_").upper()
        name = self.ui.show_input_box(
            "App setting name",
            f"Provide a name for the new {resource_type} connection setting",
            validate=lambda s: _validate_app_setting_name(s, values),
            default=default_name,
        )
        connection = self.ui.show_input_box(
            "Connection string",
            f"Provide the {resource_type} connection string",
            validate=_validate_connection_string,
        )
        self.set_value(name, connection)
        return name


def _validate_connection_string(value: str) -> str | None:
    if not value.strip():
        return "The connection string cannot be empty."
    return None


def _validate_app_setting_name(name: str, existing: dict[str, str]) -> str | None:
    if not name.strip():
        return "The app setting name cannot be empty."
    if name in existing:
        return f"An app setting named '{name}' already exists."
    return None
