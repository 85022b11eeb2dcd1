# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content fingerprints for lockfiles."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Protocol

_CHUNK_SIZE = 1 << 16


class Calculator(Protocol):
    """Compute a checksum over the contents of ``paths``."""

    def sum(self, *paths: Path) -> str: ...


class ChecksumCalculator:
    """SHA-256 over the concatenated bytes of each path, in order.

    Only file contents contribute; names, locations and timestamps do not.
    """

    def sum(self, *paths: Path) -> str:
        """Return the hex digest for ``paths``.

        Raises:
            OSError: If any path cannot be read.
        """

        hasher = hashlib.sha256()
        for path in paths:
            with Path(path).open("rb") as handle:
                for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                    hasher.update(chunk)
        return hasher.hexdigest()


__all__ = ["Calculator", "ChecksumCalculator"]
