# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Environment construction for composer invocations."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

NON_INTERACTIVE: tuple[str, str] = ("COMPOSER_NO_INTERACTION", "1")


def composer_environment(base: Mapping[str, str], *pairs: tuple[str, str]) -> dict[str, str]:
    """Return ``base`` with non-interactive mode and ``pairs`` applied in order.

    The result is a complete environment; when a key repeats, the later value wins.
    """

    env = dict(base)
    for key, value in (NON_INTERACTIVE, *pairs):
        env[key] = value
    return env


def prepend_search_path(directory: Path | None, path: str) -> str:
    """Return ``path`` with ``directory`` placed first when one is given."""

    if directory is None:
        return path
    if not path:
        return str(directory)
    return f"{directory}{os.pathsep}{path}"


__all__ = ["NON_INTERACTIVE", "composer_environment", "prepend_search_path"]
