"""Tests for the scripted prompt surface."""

import pytest

from funcgen.core.errors import UserCancelledError
from funcgen.core.ui import CANCEL, DEFAULT, Pick, ScriptedUserInterface, UserInterface


def _not_empty(value: str) -> str | None:
    return None if value else "empty"


def test_scripted_ui_satisfies_protocol():
    assert isinstance(ScriptedUserInterface(), UserInterface)


def test_pick_matches_label():
    ui = ScriptedUserInterface(["Two"])
    picks = [Pick(1, "One"), Pick(2, "Two")]

    assert ui.show_quick_pick(picks, "Number").data == 2
    assert ui.prompts == ["Number"]


def test_unknown_pick_label_raises():
    ui = ScriptedUserInterface(["Three"])

    with pytest.raises(LookupError, match="Three"):
        ui.show_quick_pick([Pick(1, "One")], "Number")


def test_input_reprompts_until_valid():
    """Rejected answers are recorded and the next one is tried."""
    ui = ScriptedUserInterface(["", "", "ok"])

    assert ui.show_input_box("Name", "Provide a name", validate=_not_empty) == "ok"
    assert ui.rejections == [("Name", "", "empty"), ("Name", "", "empty")]


def test_default_answer_uses_prompt_default():
    ui = ScriptedUserInterface([DEFAULT, DEFAULT])

    assert ui.show_input_box("Name", "Provide a name", default="HttpTrigger1") == "HttpTrigger1"
    assert ui.show_input_box("Other", "Provide another") == ""


@pytest.mark.parametrize("answers", [[CANCEL], []])
def test_cancel_and_exhausted_queue(answers):
    ui = ScriptedUserInterface(answers)

    with pytest.raises(UserCancelledError):
        ui.show_input_box("Name", "Provide a name")


def test_cancel_during_reprompt():
    ui = ScriptedUserInterface(["", CANCEL])

    with pytest.raises(UserCancelledError):
        ui.show_input_box("Name", "Provide a name", validate=_not_empty)
    assert len(ui.rejections) == 1
