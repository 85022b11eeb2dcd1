# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""On-disk layer store and the typed cache key kept in layer metadata."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import LOCK_SHA_KEY, STACK_KEY
from .filesystem import remove_tree, write_text_atomic

LOGGER = logging.getLogger(__name__)

_RECORD_SUFFIX = ".json"


class Layer(BaseModel):
    """A layer directory plus the types and metadata persisted beside it."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    path: Path
    launch: bool = False
    build: bool = False
    cache: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)


class LayerCacheKey(BaseModel):
    """Stack and lockfile checksum that produced a layer's contents.

    Two keys are equal only when both fields match exactly.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True, extra="ignore")

    stack: str = Field(alias=STACK_KEY)
    lock_sha: str = Field(alias=LOCK_SHA_KEY)

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any]) -> LayerCacheKey | None:
        """Return the key stored in ``metadata`` or ``None`` when absent.

        Missing fields and values of the wrong type both mean no usable cache.
        """

        try:
            return cls.model_validate(dict(metadata))
        except ValidationError:
            return None

    def to_metadata(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class _LayerTypes(BaseModel):
    launch: bool = False
    build: bool = False
    cache: bool = False


class _LayerRecord(BaseModel):
    types: _LayerTypes = Field(default_factory=_LayerTypes)
    metadata: dict[str, Any] = Field(default_factory=dict)


class LayerStore:
    """Manage layers stored as ``<root>/<name>/`` with ``<root>/<name>.json`` records."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def get(self, name: str) -> Layer:
        """Return the layer called ``name``, creating its directory on first use."""

        path = self._root / name
        path.mkdir(parents=True, exist_ok=True)
        record = self._read_record(name)
        return Layer(
            name=name,
            path=path,
            launch=record.types.launch,
            build=record.types.build,
            cache=record.types.cache,
            metadata=dict(record.metadata),
        )

    def reset(self, layer: Layer) -> Layer:
        """Empty ``layer``'s directory and return it with cleared types and metadata."""

        self._record_path(layer.name).unlink(missing_ok=True)
        remove_tree(layer.path)
        layer.path.mkdir(parents=True, exist_ok=True)
        return Layer(name=layer.name, path=layer.path)

    def persist(self, layer: Layer) -> None:
        """Write ``layer``'s types and metadata to its record file."""

        record = _LayerRecord(
            types=_LayerTypes(launch=layer.launch, build=layer.build, cache=layer.cache),
            metadata=layer.metadata,
        )
        write_text_atomic(self._record_path(layer.name), record.model_dump_json(indent=2))

    def _record_path(self, name: str) -> Path:
        return self._root / f"{name}{_RECORD_SUFFIX}"

    def _read_record(self, name: str) -> _LayerRecord:
        path = self._record_path(name)
        if not path.is_file():
            return _LayerRecord()
        try:
            return _LayerRecord.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError):
            LOGGER.debug("ignoring unreadable layer record %s", path)
            return _LayerRecord()


__all__ = ["Layer", "LayerCacheKey", "LayerStore"]
