# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Composer executable abstraction used by the build pipeline."""

from __future__ import annotations

import logging
from typing import Protocol

from .logging import Emitter
from .models import Execution, ExecutionResult
from .process_utils import SubprocessExecutionError, run_command

LOGGER = logging.getLogger(__name__)


class Executable(Protocol):
    """Run an :class:`Execution` and return its merged output.

    Implementations raise :class:`SubprocessExecutionError` for any non-zero
    exit status; the error carries the captured output in ``stdout``.
    """

    def execute(self, execution: Execution) -> ExecutionResult: ...


class ComposerExecutable:
    """Invoke the ``composer`` binary found on the execution's ``PATH``."""

    def __init__(self, emitter: Emitter, *, name: str = "composer") -> None:
        self._emitter = emitter
        self._name = name

    def execute(self, execution: Execution) -> ExecutionResult:
        LOGGER.debug("executing %s %s in %s", self._name, execution.describe(), execution.dir)
        try:
            completed = run_command(
                [self._name, *execution.args],
                cwd=execution.dir,
                env=execution.env,
                merge_stderr=True,
            )
        except SubprocessExecutionError as exc:
            self._emitter.action_output(exc.stdout or "")
            raise
        output = completed.stdout or ""
        self._emitter.action_output(output)
        return ExecutionResult(returncode=completed.returncode, output=output)


__all__ = ["ComposerExecutable", "Executable"]
