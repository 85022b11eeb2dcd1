# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""php.ini used by composer's own PHP process."""

from __future__ import annotations

from pathlib import Path

from .config import BuildConfig
from .constants import BASELINE_EXTENSION, COMPOSER_PHP_INI_FILENAME, PHP_INI_LAYER_NAME
from .filesystem import write_text_atomic
from .layers import LayerStore
from .logging import Emitter


def render_composer_php_ini(extension_dir: str) -> str:
    return f'[PHP]\nextension_dir = "{extension_dir}"\nextension = {BASELINE_EXTENSION}.so'


def write_composer_php_ini(emitter: Emitter, layers: LayerStore, config: BuildConfig) -> Path:
    """Reset the php.ini layer, write ``composer-php.ini`` into it and return its path.

    The file pre-loads the baseline extension so composer can fetch over TLS.
    It is exported as ``PHPRC`` to every composer invocation.
    """

    layer = layers.reset(layers.get(PHP_INI_LAYER_NAME))
    ini_path = layer.path / COMPOSER_PHP_INI_FILENAME
    contents = render_composer_php_ini(config.php_extension_dir)

    emitter.debug.process("Writing php.ini for composer")
    emitter.debug.subprocess(f"Writing {ini_path.name} to {ini_path}")
    emitter.debug.subprocess(f"Writing php.ini contents:\n'{contents}'")

    write_text_atomic(ini_path, contents)
    return ini_path


__all__ = ["render_composer_php_ini", "write_composer_php_ini"]
