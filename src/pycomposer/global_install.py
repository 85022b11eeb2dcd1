# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install global composer packages needed by composer scripts."""

from __future__ import annotations

from pathlib import Path

from .config import BuildConfig
from .constants import DEFAULT_VENDOR_DIR, GLOBAL_LAYER_NAME, NO_PROGRESS_FLAG
from .environment import composer_environment
from .executable import Executable
from .filesystem import list_names
from .layers import LayerStore
from .logging import Emitter
from .models import Execution


def run_composer_global_if_required(
    emitter: Emitter,
    layers: LayerStore,
    executable: Executable,
    config: BuildConfig,
    *,
    php_ini_path: Path,
    path: str,
) -> Path | None:
    """Run ``composer global require`` when ``BP_COMPOSER_INSTALL_GLOBAL`` is set.

    Packages land in an isolated ``composer-global`` layer that serves as
    ``COMPOSER_HOME``. Returns the layer's ``vendor/bin`` directory so callers
    can put it on ``PATH``, or ``None`` when no global packages are configured.

    Raises:
        SubprocessExecutionError: If ``composer global require`` fails.
    """

    if not config.global_packages:
        return None

    layer = layers.reset(layers.get(GLOBAL_LAYER_NAME))

    args = ("global", "require", NO_PROGRESS_FLAG, *config.global_packages)
    execution = Execution.from_parts(
        args=args,
        dir=layer.path,
        env=composer_environment(
            config.ambient_env,
            ("COMPOSER_HOME", str(layer.path)),
            ("PHPRC", str(php_ini_path)),
            ("COMPOSER_VENDOR_DIR", DEFAULT_VENDOR_DIR),
            ("PATH", path),
        ),
    )
    emitter.process(f"Running 'composer {execution.describe()}'")
    executable.execute(execution)

    global_bin = layer.path / DEFAULT_VENDOR_DIR / "bin"

    if emitter.debug_enabled and global_bin.is_dir():
        emitter.debug.listing("Adding global Composer packages to PATH:", list_names(global_bin))

    return global_bin


__all__ = ["run_composer_global_if_required"]
