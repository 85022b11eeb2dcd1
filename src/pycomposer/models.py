# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared by the composer build pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Execution(BaseModel):
    """A composer invocation: arguments, working directory and full environment."""

    model_config = ConfigDict(frozen=True)

    args: tuple[str, ...]
    dir: Path
    env: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_parts(cls, *, args: Sequence[str], dir: Path, env: Mapping[str, str]) -> Execution:
        return cls(
            args=tuple(args),
            dir=dir,
            env={str(k): str(v) for k, v in env.items()},
        )

    def describe(self) -> str:
        """Return the arguments joined the way they are logged."""

        return " ".join(self.args)


class ExecutionResult(BaseModel):
    """Outcome of a successful execution with merged stdout/stderr output."""

    model_config = ConfigDict(frozen=True)

    returncode: int = 0
    output: str = ""


class BuildpackInfo(BaseModel):
    """Name and version printed in the build title."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str


__all__ = ["BuildpackInfo", "Execution", "ExecutionResult"]
