# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wall-clock measurement for build phases."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

ResultT = TypeVar("ResultT")


class Clock:
    """Measure how long a callable takes using a monotonic timer."""

    def __init__(self, timer: Callable[[], float] = time.perf_counter) -> None:
        self._timer = timer

    def measure(self, func: Callable[[], ResultT]) -> tuple[ResultT, float]:
        """Run ``func`` and return its result with the elapsed seconds.

        Exceptions raised by ``func`` propagate without a measurement.
        """

        start = self._timer()
        result = func()
        return result, self._timer() - start


def format_duration(seconds: float) -> str:
    """Return ``seconds`` rounded to whole milliseconds, e.g. ``"125ms"``."""

    return f"{round(seconds * 1000)}ms"


__all__ = ["Clock", "format_duration"]
