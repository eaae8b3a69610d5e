"""Emission sinks for generated units and the index of generated output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .logging import get_logger
from .models import GeneratedUnit, GenerationMarker

INDEX_FILE_NAME = ".matchergen-index.json"
_INDEX_VERSION = 1

logger = get_logger("emit")


class FilerError(RuntimeError):
    """Raised when a generated unit cannot be written."""


class Filer(Protocol):
    """Receives generated units from the processor."""

    def write(self, unit: GeneratedUnit) -> None:
        ...


class MemoryFiler:
    """Keeps generated units in memory, keyed by qualified type name."""

    def __init__(self) -> None:
        self.units: Dict[str, GeneratedUnit] = {}

    def write(self, unit: GeneratedUnit) -> None:
        if unit.qualified_name in self.units:
            raise FilerError(f"Attempt to recreate a file for type {unit.qualified_name}")
        self.units[unit.qualified_name] = unit

    def source_of(self, qualified_name: str) -> str:
        return self.units[qualified_name].source


class GeneratedIndex:
    """Records what was generated, from which declarations, and with which marker.

    The index is the build-dependency metadata for incremental builds and the
    way markers of earlier output are read back on the next build.
    """

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    def record(self, unit: GeneratedUnit) -> None:
        self._entries[unit.qualified_name] = {
            "package": unit.package,
            "type_name": unit.type_name,
            "file": unit.relative_path,
            "marker": unit.marker.to_dict(),
            "originating_elements": list(unit.originating_elements),
            "nested": list(unit.nested_names),
        }
        self._dirty = True

    def units(self) -> List[GeneratedUnit]:
        """Previously generated units, without their sources."""
        units: List[GeneratedUnit] = []
        for entry in self._entries.values():
            marker = _marker_from_dict(entry.get("marker"))
            if marker is None:
                continue
            units.append(
                GeneratedUnit(
                    package=str(entry["package"]),
                    type_name=str(entry["type_name"]),
                    source="",
                    marker=marker,
                    originating_elements=_str_list(entry.get("originating_elements")),
                    nested_names=_str_list(entry.get("nested")),
                )
            )
        return units

    def dependents_of(self, element: str) -> List[str]:
        """Generated types that must be regenerated when ``element`` changes."""
        return sorted(
            name
            for name, entry in self._entries.items()
            if element in _str_list(entry.get("originating_elements"))
        )

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {"version": _INDEX_VERSION, "entries": self._entries}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except OSError as exc:
            raise FilerError(f"Cannot write generation index {self._path}: {exc}") from exc
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable generation index %s: %s", path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _INDEX_VERSION:
            logger.debug("Ignoring generation index %s with unknown version", path)
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        root = path.parent
        for key, raw in entries.items():
            if not isinstance(key, str) or not isinstance(raw, dict):
                continue
            if not {"package", "type_name", "file", "marker"} <= raw.keys():
                continue
            # Output deleted since the last build no longer marks anything.
            if not (root / str(raw["file"])).exists():
                continue
            self._entries[key] = raw


class DirectoryFiler:
    """Writes units below an output directory and maintains the index there."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.index = GeneratedIndex(root / INDEX_FILE_NAME)
        self.written: List[Path] = []
        self._names: Dict[str, Path] = {}

    def write(self, unit: GeneratedUnit) -> None:
        if unit.qualified_name in self._names:
            raise FilerError(f"Attempt to recreate a file for type {unit.qualified_name}")
        target = self.root / unit.relative_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(unit.source, encoding="utf-8")
        except OSError as exc:
            raise FilerError(f"Error writing matcher for {unit.qualified_name}: {exc}") from exc
        self._names[unit.qualified_name] = target
        self.written.append(target)
        self.index.record(unit)
        logger.debug("Wrote %s", target)

    def persist(self) -> None:
        self.index.persist()


def _marker_from_dict(payload: object) -> Optional[GenerationMarker]:
    if not isinstance(payload, dict):
        return None
    value = payload.get("value")
    date = payload.get("date", "")
    version = payload.get("schema_version", 1)
    if not isinstance(value, str) or not isinstance(date, str) or not isinstance(version, int):
        return None
    return GenerationMarker(generator_id=value, timestamp=date, schema_version=version)


def _str_list(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


__all__ = [
    "DirectoryFiler",
    "Filer",
    "FilerError",
    "GeneratedIndex",
    "INDEX_FILE_NAME",
    "MemoryFiler",
]
