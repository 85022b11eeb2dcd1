# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The composer build step: global packages, install, vendor sync, platform reqs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .clock import Clock, format_duration
from .config import BuildConfig
from .environment import prepend_search_path
from .executable import Executable
from .files import workspace_vendor_dir
from .fingerprint import Calculator, ChecksumCalculator
from .global_install import run_composer_global_if_required
from .install import ComposerInstaller, InstallRequest
from .layers import Layer, LayerStore
from .logging import Emitter
from .models import BuildpackInfo
from .php_ini import write_composer_php_ini
from .plan import PlanEntry
from .platform_reqs import run_check_platform_reqs


@dataclass(frozen=True, slots=True)
class BuildContext:
    """Everything the lifecycle hands to a single build invocation."""

    working_dir: Path
    layers: LayerStore
    stack: str
    buildpack: BuildpackInfo
    plan_entries: Sequence[PlanEntry] = ()


@dataclass(slots=True)
class BuildResult:
    """Layers whose types and metadata should be persisted after the build."""

    layers: list[Layer] = field(default_factory=list)
    extensions: list[str] = field(default_factory=list)


def build(
    context: BuildContext,
    *,
    config: BuildConfig,
    emitter: Emitter,
    executable: Executable,
    calculator: Calculator | None = None,
    clock: Clock | None = None,
) -> BuildResult:
    """Run every phase of the composer build step in order.

    Any failure aborts the remaining phases; nothing is persisted by this
    function, so a failed build never stamps the packages layer.
    """

    calculator = calculator or ChecksumCalculator()
    clock = clock or Clock()

    emitter.title(f"{context.buildpack.name} {context.buildpack.version}")

    php_ini_path = write_composer_php_ini(emitter, context.layers, config)

    global_bin = run_composer_global_if_required(
        emitter,
        context.layers,
        executable,
        config,
        php_ini_path=php_ini_path,
        path=config.path,
    )
    path = prepend_search_path(global_bin, config.path)

    request = InstallRequest(
        working_dir=context.working_dir,
        stack=context.stack,
        plan_entries=context.plan_entries,
        php_ini_path=php_ini_path,
        path=path,
        workspace_vendor_dir=workspace_vendor_dir(context.working_dir, config),
    )
    installer = ComposerInstaller(emitter, context.layers, executable, calculator, config)

    emitter.process("Executing build process")
    packages_layer, duration = clock.measure(lambda: installer.run(request))
    emitter.action(f"Completed in {format_duration(duration)}")
    emitter.break_()

    extensions = run_check_platform_reqs(
        emitter,
        executable,
        config,
        working_dir=context.working_dir,
        php_ini_path=php_ini_path,
        path=path,
    )

    return BuildResult(layers=[packages_layer], extensions=extensions)


def persist_result(store: LayerStore, result: BuildResult) -> None:
    """Write the records of every layer in ``result``."""

    for layer in result.layers:
        store.persist(layer)


__all__ = ["BuildContext", "BuildResult", "build", "persist_result"]
