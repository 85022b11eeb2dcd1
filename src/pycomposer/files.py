# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the composer manifest and lockfile for a project."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import BuildConfig


@dataclass(frozen=True, slots=True)
class ComposerFiles:
    """Paths to ``composer.json`` and its lockfile."""

    json_path: Path
    lock_path: Path
    json_exists: bool
    lock_exists: bool


def lockfile_name(composer_json: str) -> str:
    """Return the lockfile name paired with ``composer_json``.

    ``composer.json`` pairs with ``composer.lock``; names without a ``.json``
    suffix simply gain ``.lock``.
    """

    if composer_json.endswith(".json"):
        return f"{composer_json[: -len('.json')]}.lock"
    return f"{composer_json}.lock"


def find_composer_files(working_dir: Path, config: BuildConfig) -> ComposerFiles:
    """Resolve the manifest and lockfile for ``working_dir``.

    ``COMPOSER`` may name an absolute path or one relative to the working directory.
    """

    json_path = Path(config.composer_json)
    if not json_path.is_absolute():
        json_path = working_dir / json_path
    lock_path = json_path.with_name(lockfile_name(json_path.name))
    return ComposerFiles(
        json_path=json_path,
        lock_path=lock_path,
        json_exists=json_path.is_file(),
        lock_exists=lock_path.is_file(),
    )


def workspace_vendor_dir(working_dir: Path, config: BuildConfig) -> Path:
    """Return the vendor directory for ``working_dir``.

    ``COMPOSER_VENDOR_DIR`` always resolves under the working directory; a
    leading root such as ``/deps`` is taken as ``<working dir>/deps``.
    """

    vendor = Path(config.vendor_dir)
    if vendor.is_absolute():
        vendor = vendor.relative_to(vendor.anchor)
    return working_dir / vendor


__all__ = ["ComposerFiles", "find_composer_files", "lockfile_name", "workspace_vendor_dir"]
