# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide between reusing the cached packages layer and a fresh composer install."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import BuildConfig
from .constants import AUTOLOADER_SUFFIX, DEFAULT_VENDOR_DIR, PACKAGES_LAYER_NAME
from .environment import composer_environment
from .executable import Executable
from .files import ComposerFiles, find_composer_files
from .filesystem import copy_tree, list_names, remove_tree
from .fingerprint import Calculator
from .layers import Layer, LayerCacheKey, LayerStore
from .logging import Emitter
from .models import Execution
from .plan import PlanEntry, merge_layer_types


@dataclass(frozen=True, slots=True)
class InstallRequest:
    """Per-build inputs to :func:`run_composer_install`."""

    working_dir: Path
    stack: str
    plan_entries: Sequence[PlanEntry]
    php_ini_path: Path
    path: str
    workspace_vendor_dir: Path


def is_cache_hit(cached: LayerCacheKey | None, current: LayerCacheKey) -> bool:
    """Return ``True`` only when a stored key exists and equals ``current``."""

    return cached is not None and cached == current


class ComposerInstaller:
    """Run ``composer install`` and keep the packages layer in step with the lockfile."""

    def __init__(
        self,
        emitter: Emitter,
        layers: LayerStore,
        executable: Executable,
        calculator: Calculator,
        config: BuildConfig,
    ) -> None:
        self._emitter = emitter
        self._layers = layers
        self._executable = executable
        self._calculator = calculator
        self._config = config

    def run(self, request: InstallRequest) -> Layer:
        """Populate the workspace vendor directory and return the packages layer.

        Raises:
            OSError: If the lockfile cannot be read or vendor copies fail.
            SubprocessExecutionError: If a composer invocation fails.
        """

        launch, build = merge_layer_types(PACKAGES_LAYER_NAME, request.plan_entries)
        layer = self._layers.get(PACKAGES_LAYER_NAME)
        files = find_composer_files(request.working_dir, self._config)

        checksum = self._calculator.sum(files.lock_path)
        self._emitter.debug.process(f"Calculated checksum of {checksum} for {files.lock_path.name}")

        current = LayerCacheKey(stack=request.stack, lock_sha=checksum)
        cached = LayerCacheKey.from_metadata(layer.metadata)
        if cached is not None:
            self._emitter.debug.process(f"Previous stack: {cached.stack}")
            self._emitter.debug.process(f"Current stack: {request.stack}")

        if is_cache_hit(cached, current):
            return self._reuse(layer, request, files, launch=launch, build=build)
        return self._rebuild(layer, request, files, current, launch=launch, build=build)

    def _reuse(
        self,
        layer: Layer,
        request: InstallRequest,
        files: ComposerFiles,
        *,
        launch: bool,
        build: bool,
    ) -> Layer:
        self._emitter.process(f"Reusing cached layer {layer.path}")
        self._emitter.break_()

        self._apply_types(layer, launch=launch, build=build, label="Setting cached layer types")
        self._list_debug(layer.path)

        # Some packages install files outside vendor/ from their install hooks,
        # so install runs again over the cached files unless switched off.
        if self._config.run_install_on_cache:
            execution = self._install_execution(layer, request, files)
            self._emitter.process(f"Running 'composer {execution.describe()}' from cached files")
            self._executable.execute(execution)

        workspace_vendor = request.workspace_vendor_dir
        if workspace_vendor.exists() or workspace_vendor.is_symlink():
            self._emitter.process("Detected existing vendored packages, replacing with cached vendored packages")
            remove_tree(workspace_vendor)

        copy_tree(self._layer_vendor_dir(layer), workspace_vendor)
        return layer

    def _rebuild(
        self,
        layer: Layer,
        request: InstallRequest,
        files: ComposerFiles,
        current: LayerCacheKey,
        *,
        launch: bool,
        build: bool,
    ) -> Layer:
        self._emitter.process(f"Building new layer {layer.path}")

        layer = self._layers.reset(layer)
        self._apply_types(layer, launch=launch, build=build, label="Setting layer types")

        config_execution = Execution.from_parts(
            args=("config", "autoloader-suffix", AUTOLOADER_SUFFIX),
            dir=layer.path,
            env=composer_environment(
                self._config.ambient_env,
                ("COMPOSER", str(files.json_path)),
                ("COMPOSER_HOME", str(self._composer_home(layer))),
                ("COMPOSER_VENDOR_DIR", DEFAULT_VENDOR_DIR),
                ("PHPRC", str(request.php_ini_path)),
                ("PATH", request.path),
            ),
        )
        self._emitter.process(f"Running 'composer {config_execution.describe()}'")
        self._executable.execute(config_execution)

        install_execution = self._install_execution(layer, request, files)
        self._emitter.process(f"Running 'composer {install_execution.describe()}'")
        self._executable.execute(install_execution)

        layer_vendor = self._layer_vendor_dir(layer)
        self._emitter.process(f"Copying from {request.workspace_vendor_dir} => to {layer_vendor}")
        copy_tree(request.workspace_vendor_dir, layer_vendor)
        self._list_debug(layer_vendor)

        layer.metadata = current.to_metadata()
        return layer

    def _install_execution(self, layer: Layer, request: InstallRequest, files: ComposerFiles) -> Execution:
        # composer cannot follow a symlinked vendor dir, so install into the workspace
        return Execution.from_parts(
            args=("install", *self._config.install_options),
            dir=request.working_dir,
            env=composer_environment(
                self._config.ambient_env,
                ("COMPOSER", str(files.json_path)),
                ("COMPOSER_HOME", str(self._composer_home(layer))),
                ("COMPOSER_VENDOR_DIR", str(request.workspace_vendor_dir)),
                ("PHPRC", str(request.php_ini_path)),
                ("PATH", request.path),
            ),
        )

    def _apply_types(self, layer: Layer, *, launch: bool, build: bool, label: str) -> None:
        layer.launch, layer.build = launch, build
        # later builds copy vendor/ back out of this layer
        layer.cache = True
        self._emitter.debug.subprocess(
            f"{label}: launch=[{str(layer.launch).lower()}], "
            f"build=[{str(layer.build).lower()}], cache=[{str(layer.cache).lower()}]"
        )

    def _list_debug(self, directory: Path) -> None:
        if self._emitter.debug_enabled:
            self._emitter.debug.listing(f"Listing files in {directory}:", list_names(directory))

    @staticmethod
    def _composer_home(layer: Layer) -> Path:
        return layer.path / ".composer"

    @staticmethod
    def _layer_vendor_dir(layer: Layer) -> Path:
        return layer.path / DEFAULT_VENDOR_DIR


__all__ = ["ComposerInstaller", "InstallRequest", "is_cache_hit"]
