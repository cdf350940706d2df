"""
Resolution of template settings through typed prompts.

Each name in ``Template.user_prompted_settings`` is looked up in the catalog
and prompted for according to its kind. Names the catalog has no definition
for are skipped; definitions are allowed to lag behind templates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from .models import ConfigSetting, ProjectRuntime, SettingKind, Template
from .templates import TemplateCatalog
from .ui import Pick, UserInterface

logger = logging.getLogger("funcgen.core.resolver")

BOOLEAN_CHOICES = ("true", "false")


class AppSettingsPrompter(Protocol):
    """Resolves resource-reference settings (e.g. a storage connection)."""

    def prompt_for_app_setting(self, resource_type: str) -> str: ...


@dataclass
class ResolvedSettings:
    """
    Setting values collected for one workflow run, in prompt order.

    Attributes:
        values: Setting name to resolved value
        skipped: Prompted setting names with no catalog definition
    """

    values: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)

    def as_binding_values(self) -> dict[str, str]:
        """Values to merge into the template's input binding."""
        return {name: value or "" for name, value in self.values.items()}

    def as_maven_properties(self) -> list[str]:
        """Values as ``-Dname=value`` Maven properties, in prompt order."""
        return [f"-D{name}={value}" for name, value in self.values.items()]


def prompt_for_boolean_setting(ui: UserInterface, setting: ConfigSetting) -> str:
    picks = [Pick(choice, choice) for choice in BOOLEAN_CHOICES]
    return ui.show_quick_pick(picks, setting.display_label).data


def prompt_for_enum_setting(ui: UserInterface, setting: ConfigSetting) -> str:
    picks = [Pick(ev.value, ev.display_name) for ev in setting.enums]
    return ui.show_quick_pick(picks, setting.display_label).data


def prompt_for_string_setting(
    ui: UserInterface, setting: ConfigSetting, default_value: str | None = None
) -> str:
    return ui.show_input_box(
        setting.display_label,
        f"Provide a '{setting.display_label}'",
        validate=setting.validate_setting,
        default=default_value or setting.default_value,
    )


def prompt_for_setting(
    ui: UserInterface,
    app_settings: AppSettingsPrompter,
    setting: ConfigSetting,
    default_value: str | None = None,
) -> str:
    """
    Prompt for one setting according to its kind.

    Args:
        ui: Prompt surface
        app_settings: Handles resource-reference settings
        setting: Setting definition
        default_value: Seed for string prompts; falls back to the
            setting's own default

    Returns:
        The resolved value

    Raises:
        UserCancelledError: If the user dismisses the prompt
    """
    prompters: dict[SettingKind, Callable[[], str]] = {
        SettingKind.RESOURCE: lambda: app_settings.prompt_for_app_setting(
            setting.resource_type or ""
        ),
        SettingKind.BOOLEAN: lambda: prompt_for_boolean_setting(ui, setting),
        SettingKind.ENUM: lambda: prompt_for_enum_setting(ui, setting),
        SettingKind.STRING: lambda: prompt_for_string_setting(ui, setting, default_value),
    }
    return prompters[setting.kind]()


def resolve_settings(
    ui: UserInterface,
    catalog: TemplateCatalog,
    app_settings: AppSettingsPrompter,
    template: Template,
    runtime: ProjectRuntime,
) -> ResolvedSettings:
    """
    Prompt for every setting the template declares.

    Returns:
        The resolved values, plus the names that were skipped
    """
    resolved = ResolvedSettings()
    config = template.function_config

    for setting_name in template.user_prompted_settings:
        setting = catalog.get_setting(runtime, config.in_binding_type, setting_name)
        if setting is None:
            logger.warning(
                "No definition for setting '%s' of binding '%s' (runtime %s); skipping",
                setting_name,
                config.in_binding_type,
                runtime,
            )
            resolved.skipped.append(setting_name)
            continue

        default_value = config.get_in_binding_value(setting_name)
        resolved.values[setting_name] = prompt_for_setting(ui, app_settings, setting, default_value)

    return resolved
