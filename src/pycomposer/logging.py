# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers built on Rich consoles."""

from __future__ import annotations

import sys
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

_PROCESS_INDENT = "  "
_SUBPROCESS_INDENT = "    "
_ACTION_INDENT = "      "


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def create_console(*, color: bool | None = None, emoji: bool = False) -> Console:
    """Return a console configured for build log output.

    Args:
        color: Explicit colour preference; ``None`` follows TTY detection.
        emoji: Flag indicating whether Rich should render emoji glyphs.

    Returns:
        Console: Console writing to stdout without syntax highlighting.
    """

    tty = detect_tty()
    color_enabled = tty if color is None else color
    return Console(
        color_system="auto" if color_enabled else None,
        no_color=not color_enabled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


class Emitter:
    """Render build output using the title/process/subprocess/action levels."""

    def __init__(self, console: Console | None = None, *, debug: bool = False, enabled: bool = True) -> None:
        self._console = console if console is not None else create_console()
        self._debug_enabled = debug
        self._enabled = enabled

    @property
    def debug(self) -> Emitter:
        """Return an emitter that only prints when debug output is enabled."""

        return Emitter(self._console, debug=self._debug_enabled, enabled=self._enabled and self._debug_enabled)

    @property
    def debug_enabled(self) -> bool:
        """Return ``True`` when debug output is enabled."""

        return self._debug_enabled

    def title(self, message: str) -> None:
        self._emit(message, style="bold")

    def process(self, message: str) -> None:
        self._emit(f"{_PROCESS_INDENT}{message}")

    def subprocess(self, message: str) -> None:
        self._emit(f"{_SUBPROCESS_INDENT}{message}")

    def action(self, message: str) -> None:
        self._emit(f"{_ACTION_INDENT}{message}")

    def action_output(self, output: str) -> None:
        """Write captured subprocess output indented at the action level."""

        for line in output.splitlines():
            self._emit(f"{_ACTION_INDENT}{line}" if line else "")

    def listing(self, heading: str, names: Iterable[str]) -> None:
        """Print ``heading`` followed by one ``- name`` entry per item."""

        self.subprocess(heading)
        for name in names:
            self.subprocess(f"- {name}")

    def break_(self) -> None:
        self._emit("")

    def _emit(self, message: str, *, style: str | None = None) -> None:
        if not self._enabled:
            return
        text = Text(message)
        if style:
            text.stylize(style)
        self._console.print(text)


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str, use_emoji: bool) -> None:
    color_enabled = detect_tty()
    console = create_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji)


def ok(msg: str, *, use_emoji: bool) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji)


def warn(msg: str, *, use_emoji: bool) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji)


def fail(msg: str, *, use_emoji: bool) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji)


__all__ = [
    "Emitter",
    "create_console",
    "detect_tty",
    "emoji",
    "fail",
    "info",
    "ok",
    "warn",
]
