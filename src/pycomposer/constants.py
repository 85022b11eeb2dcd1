# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Names shared across the composer build pipeline."""

from __future__ import annotations

from typing import Final

# Environment variables
COMPOSER_ENV: Final[str] = "COMPOSER"
COMPOSER_VENDOR_DIR_ENV: Final[str] = "COMPOSER_VENDOR_DIR"
INSTALL_OPTIONS_ENV: Final[str] = "BP_COMPOSER_INSTALL_OPTIONS"
INSTALL_GLOBAL_ENV: Final[str] = "BP_COMPOSER_INSTALL_GLOBAL"
RUN_INSTALL_ON_CACHE_ENV: Final[str] = "BP_RUN_COMPOSER_INSTALL"
LOG_LEVEL_ENV: Final[str] = "BP_LOG_LEVEL"
PHP_EXTENSION_DIR_ENV: Final[str] = "PHP_EXTENSION_DIR"
STACK_ID_ENV: Final[str] = "CNB_STACK_ID"

# Layers
PACKAGES_LAYER_NAME: Final[str] = "composer-packages"
GLOBAL_LAYER_NAME: Final[str] = "composer-global"
PHP_INI_LAYER_NAME: Final[str] = "composer-php-ini"

# Layer metadata keys
STACK_KEY: Final[str] = "stack"
LOCK_SHA_KEY: Final[str] = "composer-lock-sha"

DEFAULT_COMPOSER_JSON: Final[str] = "composer.json"
DEFAULT_VENDOR_DIR: Final[str] = "vendor"
NO_PROGRESS_FLAG: Final[str] = "--no-progress"
DEFAULT_INSTALL_FLAGS: Final[tuple[str, ...]] = ("--no-dev",)

# Must never change between builds so cached autoloaders stay valid.
AUTOLOADER_SUFFIX: Final[str] = "PycomposerAutoloaderSuffix"

# Loaded by the composer php.ini, so check-platform-reqs never reports it.
BASELINE_EXTENSION: Final[str] = "openssl"
PLATFORM_PSEUDO_REQUIREMENTS: Final[frozenset[str]] = frozenset({"php", "php-64bit"})
MISSING_STATUS: Final[str] = "missing"
EXTENSION_PREFIX: Final[str] = "ext-"
REPORT_AVAILABLE_EXIT_CODE: Final[int] = 2

COMPOSER_PHP_INI_FILENAME: Final[str] = "composer-php.ini"
EXTENSIONS_INI_DIR: Final[str] = ".php.ini.d"
EXTENSIONS_INI_FILENAME: Final[str] = "composer-extensions.ini"

DEBUG_LEVEL: Final[str] = "DEBUG"
