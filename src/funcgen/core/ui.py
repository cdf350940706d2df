"""
Prompt protocol used by the workflow.

The workflow only needs two interactions: pick one of several labelled
options, and enter free text that must pass a validation callback. Both
either return a value or raise :class:`UserCancelledError`.

Two implementations exist: :class:`funcgen.cli_ui.RichUserInterface` for
the terminal, and :class:`ScriptedUserInterface` which replays a queue of
answers (used by tests and non-interactive callers).
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .errors import UserCancelledError

logger = logging.getLogger("funcgen.core.ui")

T = TypeVar("T")

Validator = Callable[[str], str | None]


@dataclass(frozen=True)
class Pick(Generic[T]):
    """A labelled option carrying arbitrary data."""

    data: T
    label: str
    description: str = ""


@runtime_checkable
class UserInterface(Protocol):
    """Interactive prompt surface."""

    def show_quick_pick(self, picks: Sequence[Pick[T]], placeholder: str) -> Pick[T]:
        """Return the chosen pick or raise UserCancelledError."""
        ...

    def show_input_box(
        self,
        placeholder: str,
        prompt: str,
        validate: Validator | None = None,
        default: str | None = None,
    ) -> str:
        """Return text accepted by ``validate`` or raise UserCancelledError.

        Invalid input must be re-prompted, never returned.
        """
        ...


class _Cancel:
    def __repr__(self) -> str:
        return "CANCEL"


class _Default:
    def __repr__(self) -> str:
        return "DEFAULT"


# Scripted answer that dismisses the prompt
CANCEL: Any = _Cancel()
# Scripted answer that accepts the input box default
DEFAULT: Any = _Default()


class ScriptedUserInterface:
    """
    Replays queued answers in order.

    Pick answers are matched against option labels. Input answers are
    offered to the validator; rejected answers are recorded in
    ``rejections`` and the next queued answer is tried, just as a person
    would retype. An exhausted queue behaves like a dismissed prompt.

    Example:
        ui = ScriptedUserInterface(["HTTP trigger", "MyFunc", CANCEL])
    """

    def __init__(self, answers: Iterable[Any] = ()):
        self.answers: deque[Any] = deque(answers)
        self.prompts: list[str] = []
        self.rejections: list[tuple[str, str, str]] = []

    def _next(self, placeholder: str) -> Any:
        if not self.answers:
            logger.debug("No scripted answer left for %r", placeholder)
            raise UserCancelledError()
        answer = self.answers.popleft()
        if answer is CANCEL:
            raise UserCancelledError()
        return answer

    def show_quick_pick(self, picks: Sequence[Pick[T]], placeholder: str) -> Pick[T]:
        self.prompts.append(placeholder)
        answer = self._next(placeholder)
        for pick in picks:
            if pick.label == answer:
                return pick
        labels = ", ".join(p.label for p in picks)
        raise LookupError(f"Scripted answer {answer!r} is not one of: {labels}")

    def show_input_box(
        self,
        placeholder: str,
        prompt: str,
        validate: Validator | None = None,
        default: str | None = None,
    ) -> str:
        self.prompts.append(placeholder)
        while True:
            answer = self._next(placeholder)
            value = (default or "") if answer is DEFAULT else str(answer)
            error = validate(value) if validate else None
            if error is None:
                return value
            self.rejections.append((placeholder, value, error))
