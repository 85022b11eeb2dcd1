# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .build import build_command

app = typer.Typer(
    help="Composer dependency layer caching for image builds.",
    no_args_is_help=True,
    add_completion=False,
)
app.command("build")(build_command)


@app.callback()
def main() -> None:
    """Composer dependency layer caching for image builds."""


__all__ = ["app"]
