# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build configuration resolved once from the process environment."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    COMPOSER_ENV,
    COMPOSER_VENDOR_DIR_ENV,
    DEBUG_LEVEL,
    DEFAULT_COMPOSER_JSON,
    DEFAULT_INSTALL_FLAGS,
    DEFAULT_VENDOR_DIR,
    INSTALL_GLOBAL_ENV,
    INSTALL_OPTIONS_ENV,
    LOG_LEVEL_ENV,
    NO_PROGRESS_FLAG,
    PHP_EXTENSION_DIR_ENV,
    RUN_INSTALL_ON_CACHE_ENV,
)

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def parse_bool(name: str, raw: str) -> bool:
    """Parse ``raw`` as a strict boolean read from variable ``name``.

    Args:
        name: Environment variable the value came from.
        raw: Raw value exactly as found in the environment.

    Returns:
        bool: Parsed boolean value.

    Raises:
        ConfigError: If ``raw`` is not one of the accepted spellings.
    """

    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(f"error when parsing env var {name!r}: invalid boolean value {raw!r}")


class BuildConfig(BaseModel):
    """Immutable snapshot of every environment setting the build consults."""

    model_config = ConfigDict(frozen=True)

    composer_json: str = DEFAULT_COMPOSER_JSON
    install_options: tuple[str, ...] = (NO_PROGRESS_FLAG, *DEFAULT_INSTALL_FLAGS)
    global_packages: tuple[str, ...] = ()
    run_install_on_cache: bool = True
    vendor_dir: str = DEFAULT_VENDOR_DIR
    log_level: str = "INFO"
    php_extension_dir: str = ""
    path: str = ""
    ambient_env: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> BuildConfig:
        """Build the configuration from ``env`` (``os.environ`` by default).

        Raises:
            ConfigError: If ``BP_RUN_COMPOSER_INSTALL`` is not a valid boolean.
        """

        environment = dict(os.environ if env is None else env)

        install_options = (NO_PROGRESS_FLAG, *DEFAULT_INSTALL_FLAGS)
        raw_options = environment.get(INSTALL_OPTIONS_ENV)
        if raw_options is not None:
            install_options = (NO_PROGRESS_FLAG, *shlex.split(raw_options))

        run_install_on_cache = True
        raw_run_install = environment.get(RUN_INSTALL_ON_CACHE_ENV)
        if raw_run_install is not None:
            run_install_on_cache = parse_bool(RUN_INSTALL_ON_CACHE_ENV, raw_run_install)

        return cls(
            composer_json=environment.get(COMPOSER_ENV) or DEFAULT_COMPOSER_JSON,
            install_options=install_options,
            global_packages=tuple(environment.get(INSTALL_GLOBAL_ENV, "").split()),
            run_install_on_cache=run_install_on_cache,
            vendor_dir=environment.get(COMPOSER_VENDOR_DIR_ENV) or DEFAULT_VENDOR_DIR,
            log_level=environment.get(LOG_LEVEL_ENV) or "INFO",
            php_extension_dir=environment.get(PHP_EXTENSION_DIR_ENV, ""),
            path=environment.get("PATH", ""),
            ambient_env=environment,
        )

    @property
    def debug(self) -> bool:
        """Return ``True`` when debug output was requested."""

        return self.log_level.upper() == DEBUG_LEVEL


__all__ = ["BuildConfig", "ConfigError", "parse_bool"]
