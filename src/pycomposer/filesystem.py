# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem helpers for layer and workspace synchronisation."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


def write_text_atomic(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a sibling temporary file and rename.

    Readers observe either the previous file or the complete new one.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        handle.write(content)
        temp_name = handle.name
    try:
        os.chmod(temp_name, 0o644)
        os.replace(temp_name, path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise


def copy_tree(source: Path, destination: Path) -> None:
    """Copy the directory ``source`` to ``destination``, keeping symlinks as links.

    Raises:
        OSError: If ``source`` is missing or the copy fails.
    """

    shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)


def remove_tree(path: Path) -> None:
    """Delete ``path`` whether it is a directory, file or symlink."""

    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


def list_names(directory: Path) -> list[str]:
    """Return the sorted entry names of ``directory``."""

    return sorted(entry.name for entry in directory.iterdir())


__all__ = ["copy_tree", "list_names", "remove_tree", "write_text_atomic"]
