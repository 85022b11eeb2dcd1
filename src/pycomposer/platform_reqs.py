# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn ``composer check-platform-reqs`` output into a PHP extensions ini file.

Every requirement reported as ``missing`` becomes an ``extension = <name>.so``
line in ``<working dir>/.php.ini.d/composer-extensions.ini``, which the PHP
runtime picks up through ``PHP_INI_SCAN_DIR``. Exit status 2 from composer
means the report lists missing requirements and is not a failure.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .config import BuildConfig
from .constants import (
    BASELINE_EXTENSION,
    EXTENSION_PREFIX,
    EXTENSIONS_INI_DIR,
    EXTENSIONS_INI_FILENAME,
    MISSING_STATUS,
    PLATFORM_PSEUDO_REQUIREMENTS,
    REPORT_AVAILABLE_EXIT_CODE,
)
from .environment import composer_environment
from .executable import Executable
from .filesystem import write_text_atomic
from .logging import Emitter
from .models import Execution
from .process_utils import SubprocessExecutionError


def parse_missing_extensions(output: str) -> list[str]:
    """Return the extension names ``output`` reports as missing, in order.

    Each line holds whitespace-separated fields: the requirement name first
    (``ext-`` prefixed for extensions) and the status last. The ``php`` and
    ``php-64bit`` requirements describe the interpreter and are skipped.
    """

    missing: list[str] = []
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        name = fields[0].removeprefix(EXTENSION_PREFIX)
        status = fields[-1]
        if name in PLATFORM_PSEUDO_REQUIREMENTS:
            continue
        if status == MISSING_STATUS:
            missing.append(name)
    return missing


def extension_report(output: str) -> list[str]:
    """Return the baseline extension followed by every missing extension."""

    return [BASELINE_EXTENSION, *parse_missing_extensions(output)]


def render_extensions_ini(extensions: Iterable[str]) -> str:
    return "".join(f"extension = {extension}.so\n" for extension in extensions)


def extensions_ini_path(working_dir: Path) -> Path:
    return working_dir / EXTENSIONS_INI_DIR / EXTENSIONS_INI_FILENAME


def run_check_platform_reqs(
    emitter: Emitter,
    executable: Executable,
    config: BuildConfig,
    *,
    working_dir: Path,
    php_ini_path: Path,
    path: str,
) -> list[str]:
    """Run ``composer check-platform-reqs`` and write the extensions ini file.

    Returns:
        list[str]: Extensions written to the ini file.

    Raises:
        SubprocessExecutionError: If composer exits with any status other than 0 or 2.
    """

    execution = Execution.from_parts(
        args=("check-platform-reqs",),
        dir=working_dir,
        env=composer_environment(
            config.ambient_env,
            ("PHPRC", str(php_ini_path)),
            ("PATH", path),
        ),
    )
    emitter.process(f"Running 'composer {execution.describe()}'")

    try:
        output = executable.execute(execution).output
    except SubprocessExecutionError as exc:
        if exc.returncode != REPORT_AVAILABLE_EXIT_CODE:
            raise
        output = exc.stdout or ""

    extensions = extension_report(output)
    emitter.process(f"Found extensions '{', '.join(extensions)}'")

    write_text_atomic(extensions_ini_path(working_dir), render_extensions_ini(extensions))
    return extensions


__all__ = [
    "extension_report",
    "extensions_ini_path",
    "parse_missing_extensions",
    "render_extensions_ini",
    "run_check_platform_reqs",
]
