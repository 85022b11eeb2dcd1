# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``pycomposer build`` command."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from .. import __version__
from ..build import BuildContext, build, persist_result
from ..config import BuildConfig, ConfigError
from ..constants import STACK_ID_ENV
from ..executable import ComposerExecutable
from ..layers import LayerStore
from ..logging import Emitter, fail, ok
from ..models import BuildpackInfo
from ..plan import load_plan
from ..process_utils import SubprocessExecutionError

BUILDPACK_NAME = "Composer Buildpack"

WORKING_DIR_OPTION = Annotated[
    Path,
    typer.Option("--working-dir", "-w", help="Application source directory."),
]
LAYERS_OPTION = Annotated[
    Path,
    typer.Option("--layers", "-l", help="Directory holding layers and their records."),
]
PLAN_OPTION = Annotated[
    Path | None,
    typer.Option("--plan", "-p", help="Build plan TOML with [[entries]]."),
]
STACK_OPTION = Annotated[
    str | None,
    typer.Option("--stack", help=f"Stack identifier; defaults to ${STACK_ID_ENV}."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI status lines."),
]


def build_command(
    layers: LAYERS_OPTION,
    working_dir: WORKING_DIR_OPTION = Path("."),
    plan: PLAN_OPTION = None,
    stack: STACK_OPTION = None,
    emoji: EMOJI_OPTION = False,
) -> None:
    """Install composer dependencies, reusing the cached packages layer when possible."""

    try:
        config = BuildConfig.from_environment()
    except ConfigError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc

    try:
        plan_entries = load_plan(plan)
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        fail(f"invalid build plan {plan}: {exc}", use_emoji=emoji)
        raise typer.Exit(code=1) from exc

    emitter = Emitter(debug=config.debug)
    store = LayerStore(layers.resolve())
    context = BuildContext(
        working_dir=working_dir.resolve(),
        layers=store,
        stack=stack if stack is not None else os.environ.get(STACK_ID_ENV, ""),
        buildpack=BuildpackInfo(name=BUILDPACK_NAME, version=__version__),
        plan_entries=plan_entries,
    )

    try:
        result = build(context, config=config, emitter=emitter, executable=ComposerExecutable(emitter))
        persist_result(store, result)
    except SubprocessExecutionError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=exc.returncode or 1) from exc
    except OSError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc

    ok("Composer build complete.", use_emoji=emoji)


__all__ = ["build_command"]
