# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build plan loading and layer type merging."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlanEntry(BaseModel):
    """A single ``[[entries]]`` item of the build plan."""

    model_config = ConfigDict(frozen=True)

    name: str
    metadata: dict[str, Any] = Field(default_factory=dict)


def load_plan(path: Path | None) -> tuple[PlanEntry, ...]:
    """Return the entries declared in the TOML plan at ``path``.

    A missing path yields an empty plan.
    """

    if path is None or not path.exists():
        return ()
    with path.open("rb") as handle:
        document = tomllib.load(handle)
    entries = document.get("entries", [])
    return tuple(PlanEntry.model_validate(entry) for entry in entries if isinstance(entry, Mapping))


def merge_layer_types(name: str, entries: Iterable[PlanEntry]) -> tuple[bool, bool]:
    """Return ``(launch, build)`` requested by any plan entry called ``name``."""

    launch = build = False
    for entry in entries:
        if entry.name != name:
            continue
        launch = launch or entry.metadata.get("launch") is True
        build = build or entry.metadata.get("build") is True
    return launch, build


__all__ = ["PlanEntry", "load_plan", "merge_layer_types"]
