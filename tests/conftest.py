# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from pycomposer.build import BuildContext
from pycomposer.config import BuildConfig
from pycomposer.layers import LayerStore
from pycomposer.logging import Emitter
from pycomposer.models import BuildpackInfo, Execution, ExecutionResult
from pycomposer.plan import PlanEntry
from pycomposer.process_utils import SubprocessExecutionError

LOCK_CONTENTS = '{"packages": [{"name": "monolog/monolog", "version": "3.5.0"}]}\n'


class FakeComposer:
    """Record executions and imitate the side effects of composer sub-commands."""

    def __init__(self) -> None:
        self.executions: list[Execution] = []
        self.platform_output = ""
        self.platform_returncode = 0
        self.failures: dict[str, int] = {}
        self.install_marker = "installed"

    def execute(self, execution: Execution) -> ExecutionResult:
        self.executions.append(execution)
        command = execution.args[0]
        if command in self.failures:
            raise SubprocessExecutionError(
                ["composer", *execution.args],
                self.failures[command],
                "boom",
                None,
            )
        if command == "install":
            vendor = Path(execution.env["COMPOSER_VENDOR_DIR"])
            vendor.mkdir(parents=True, exist_ok=True)
            (vendor / "autoload.php").write_text(self.install_marker, encoding="utf-8")
        elif command == "global":
            bin_dir = Path(execution.env["COMPOSER_HOME"]) / "vendor" / "bin"
            bin_dir.mkdir(parents=True, exist_ok=True)
            (bin_dir / "phpcs").write_text("#!/bin/sh\n", encoding="utf-8")
        elif command == "check-platform-reqs":
            if self.platform_returncode:
                raise SubprocessExecutionError(
                    ["composer", *execution.args],
                    self.platform_returncode,
                    self.platform_output,
                    None,
                )
            return ExecutionResult(output=self.platform_output)
        return ExecutionResult()

    def calls(self, command: str) -> list[Execution]:
        return [execution for execution in self.executions if execution.args[0] == command]

    def commands(self) -> list[str]:
        return [execution.args[0] for execution in self.executions]


@pytest.fixture
def composer() -> FakeComposer:
    return FakeComposer()


@pytest.fixture
def output() -> StringIO:
    return StringIO()


@pytest.fixture
def emitter(output: StringIO) -> Emitter:
    return Emitter(Console(file=output, no_color=True, highlight=False, soft_wrap=True, width=200))


@pytest.fixture
def debug_emitter(output: StringIO) -> Emitter:
    return Emitter(Console(file=output, no_color=True, highlight=False, soft_wrap=True, width=200), debug=True)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return an application directory holding ``composer.json`` and ``composer.lock``."""

    root = tmp_path / "workspace"
    root.mkdir()
    (root / "composer.json").write_text('{"require": {"monolog/monolog": "^3.5"}}\n', encoding="utf-8")
    (root / "composer.lock").write_text(LOCK_CONTENTS, encoding="utf-8")
    return root


@pytest.fixture
def layers_dir(tmp_path: Path) -> Path:
    path = tmp_path / "layers"
    path.mkdir()
    return path


@pytest.fixture
def make_context(workspace: Path, layers_dir: Path) -> Callable[..., BuildContext]:
    def _make(*, stack: str = "io.buildpacks.stacks.jammy", plan: tuple[PlanEntry, ...] = ()) -> BuildContext:
        return BuildContext(
            working_dir=workspace,
            layers=LayerStore(layers_dir),
            stack=stack,
            buildpack=BuildpackInfo(name="Composer Buildpack", version="1.2.3"),
            plan_entries=plan,
        )

    return _make


@pytest.fixture
def base_env() -> dict[str, str]:
    return {"PATH": "/usr/bin:/bin", "HOME": "/home/cnb"}


@pytest.fixture
def make_config(base_env: dict[str, str]) -> Callable[..., BuildConfig]:
    def _make(**overrides: str) -> BuildConfig:
        return BuildConfig.from_environment({**base_env, **overrides})

    return _make
