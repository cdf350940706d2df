"""
Terminal prompts for the funcgen CLI.

:class:`RichUserInterface` implements the workflow's prompt protocol with
rich: an arrow-key menu for picks (a numbered list when stdin is not a
terminal) and a validated input line for free text.
"""

from __future__ import annotations

import os
import select
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from funcgen.core.errors import UserCancelledError
from funcgen.core.ui import Pick, Validator

console = Console()

T = TypeVar("T")

STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "cursor": Style(color="bright_cyan"),
    "current": Style(color="bright_white", bgcolor="blue", bold=True),
    "option": Style(color="white"),
    "detail": Style(color="bright_black"),
    "badge": Style(color="green", bold=True),
    "prompt": Style(color="cyan"),
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
}

_CLEAR = "\033[2J\033[H"
_UP = "\x1b[A"
_DOWN = "\x1b[B"
_ENTER = ("\r", "\n")
_QUIT = ("q", "Q", "\x03", "\x1b")
ESCAPE_TIMEOUT = 0.05


def is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


@dataclass
class SelectOption(Generic[T]):
    """A row in a menu or listing."""

    value: T
    label: str
    description: str = ""
    badge: str = ""


def print_success(message: str) -> None:
    console.print(Text(f"✓ {message}", style=STYLES["success"]))


def print_error(message: str) -> None:
    console.print(Text(f"✗ {message}", style=STYLES["error"]))


def _title(title: str) -> None:
    console.print()
    console.print(Text(title, style=STYLES["title"]))
    console.print()


def _option_line(option: SelectOption, current: bool) -> Text:
    line = Text("› " if current else "  ", style=STYLES["cursor"])
    line.append(option.label, style=STYLES["current"] if current else STYLES["option"])
    if option.badge:
        line.append(f" [{option.badge}]", style=STYLES["badge"])
    return line


def read_key_from(fd: int, timeout: float = ESCAPE_TIMEOUT) -> str:
    """
    Read one keypress from a raw file descriptor.

    Arrow keys arrive as three-byte escape sequences. A lone Esc has nothing
    after it, so the rest of a sequence is only read if it shows up within
    ``timeout`` seconds.
    """
    key = os.read(fd, 1)
    if key == b"\x1b":
        ready, _, _ = select.select([fd], [], [], timeout)
        if ready:
            key += os.read(fd, 2)
    return key.decode(errors="replace")


def _read_key() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        return read_key_from(fd)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class ArrowMenu(Generic[T]):
    """Full-screen menu driven by arrow keys, digits, Enter and q/Esc."""

    def __init__(self, options: Sequence[SelectOption[T]], title: str):
        self.options = list(options)
        self.title = title
        self.index = 0

    def render(self) -> None:
        console.print(_CLEAR, end="")
        _title(self.title)
        for i, option in enumerate(self.options):
            console.print(_option_line(option, i == self.index))
            if i == self.index and option.description:
                console.print(Text(f"    {option.description}", style=STYLES["detail"]))
        console.print()
        console.print(Text("↑/↓ move   Enter select   q cancel", style=STYLES["detail"]))

    def handle(self, key: str) -> tuple[bool, T | None]:
        """Apply a key; returns (done, chosen value)."""
        if key == _UP:
            self.index = (self.index - 1) % len(self.options)
        elif key == _DOWN:
            self.index = (self.index + 1) % len(self.options)
        elif key in _ENTER:
            return True, self.options[self.index].value
        elif key in _QUIT:
            return True, None
        elif key.isdigit() and 0 < int(key) <= len(self.options):
            return True, self.options[int(key) - 1].value
        return False, None

    def run(self) -> T | None:
        try:
            while True:
                self.render()
                done, value = self.handle(_read_key())
                if done:
                    return value
        except KeyboardInterrupt:
            return None
        finally:
            console.print(_CLEAR, end="")


def match_choice(options: Sequence[SelectOption[T]], choice: str) -> SelectOption[T] | None:
    """Resolve a typed answer: a 1-based number, or a case-insensitive label prefix."""
    if choice.isdigit():
        number = int(choice)
        return options[number - 1] if 0 < number <= len(options) else None
    wanted = choice.lower()
    for option in options:
        if option.label.lower().startswith(wanted):
            return option
    return None


def numbered_select(options: Sequence[SelectOption[T]], title: str) -> T | None:
    """Numbered list read from plain input; an empty answer or 'q' cancels."""
    _title(title)
    for number, option in enumerate(options, 1):
        line = Text(f"{number:>3}. ", style=STYLES["prompt"])
        line.append(option.label)
        if option.description:
            line.append(f"  {option.description}", style=STYLES["detail"])
        console.print(line)
    console.print()

    while True:
        try:
            choice = console.input(Text("Choose: ", style=STYLES["prompt"])).strip()
        except (KeyboardInterrupt, EOFError):
            console.print()
            return None
        if choice.lower() in ("", "q", "quit", "cancel"):
            return None
        option = match_choice(options, choice)
        if option is not None:
            return option.value
        print_error(f"Enter 1-{len(options)} or the start of an option name.")


def select_interactive(options: Sequence[SelectOption[T]], title: str) -> T | None:
    """Let the user pick one option; None if they cancel."""
    if not options:
        return None
    if is_interactive():
        try:
            return ArrowMenu(options, title).run()
        except (ImportError, OSError):
            # No termios, or the terminal refused raw mode
            pass
    return numbered_select(options, title)


def input_validated(
    prompt: str,
    validate: Validator | None = None,
    default: str | None = None,
) -> str | None:
    """Read text until ``validate`` accepts it; blank takes the default, None on Ctrl+C/EOF."""
    label = f"{prompt} [{default}]: " if default else f"{prompt}: "
    while True:
        try:
            answer = console.input(Text(label, style=STYLES["prompt"])).strip()
        except (KeyboardInterrupt, EOFError):
            console.print()
            return None
        value = answer or default or ""
        error = validate(value) if validate else None
        if error is None:
            return value
        print_error(error)


def display_options_table(options: Sequence[SelectOption], title: str = "") -> None:
    """Print options as a table (label with badge, description)."""
    table = Table(title=title or None, box=box.ROUNDED, header_style="bold cyan")
    table.add_column("#", style="dim", width=3)
    table.add_column("Name", style="bold")
    table.add_column("Id", style="bright_black")
    for number, option in enumerate(options, 1):
        label = f"{option.label} [{option.badge}]" if option.badge else option.label
        table.add_row(str(number), Text(label), option.description)
    console.print(table)


class RichUserInterface:
    """Terminal implementation of the workflow prompt protocol."""

    def show_quick_pick(self, picks: Sequence[Pick[T]], placeholder: str) -> Pick[T]:
        options = [SelectOption(value=p, label=p.label, description=p.description) for p in picks]
        chosen = select_interactive(options, placeholder)
        if chosen is None:
            raise UserCancelledError()
        return chosen

    def show_input_box(
        self,
        placeholder: str,
        prompt: str,
        validate: Validator | None = None,
        default: str | None = None,
    ) -> str:
        console.print(Text(prompt, style=STYLES["detail"]))
        value = input_validated(placeholder, validate, default)
        if value is None:
            raise UserCancelledError()
        return value
