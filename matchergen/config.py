"""Configuration loading for matchergen (.matchergen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import ConfigurationSource
from .processor import DEFAULT_GENERATOR_ID

CONFIG_FILE_NAME = ".matchergen.yml"
DEFAULT_OUTPUT_DIR = Path("build") / "generated-sources" / "matchers"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MatcherGenConfig:
    """Represents the settings defined in .matchergen.yml."""

    root: Path
    generator_id: str = DEFAULT_GENERATOR_ID
    output_dir: Optional[Path] = None
    indent: str = "  "
    header: Optional[str] = None
    declarations: List[Path] = field(default_factory=list)
    configurations: List[ConfigurationSource] = field(default_factory=list)

    @property
    def resolved_output_dir(self) -> Path:
        return self.output_dir or (self.root / DEFAULT_OUTPUT_DIR)


def load_config(config_path: Path) -> MatcherGenConfig:
    """Load configuration from disk, returning defaults when the file is missing."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MatcherGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    generator_id = _as_str(data.get("generator_id")) or DEFAULT_GENERATOR_ID
    output_str = _as_str(data.get("output_dir"))
    indent = data.get("indent", "  ")
    if not isinstance(indent, str) or not indent or indent.strip():
        raise ConfigError("indent must be a non-empty string of whitespace")

    return MatcherGenConfig(
        root=root,
        generator_id=generator_id,
        output_dir=root / output_str if output_str else None,
        indent=indent,
        header=_as_str(data.get("header")),
        declarations=[root / entry for entry in _as_str_list(data.get("declarations"))],
        configurations=_as_configurations(data.get("configurations")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_configurations(value: Any) -> List[ConfigurationSource]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("configurations must be a list of {origin, value} mappings")
    configurations: List[ConfigurationSource] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ConfigError(f"configurations[{index}] must be a mapping")
        origin = _as_str(entry.get("origin"))
        if not origin:
            raise ConfigError(f"configurations[{index}] needs an origin")
        configurations.append(
            ConfigurationSource(origin=origin, value=tuple(_as_entries(entry.get("value"))))
        )
    return configurations


def _as_entries(value: Any) -> List[str]:
    # Malformed entries stay; the round warns about them against their origin.
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, str)]
    return []


__all__ = ["CONFIG_FILE_NAME", "ConfigError", "MatcherGenConfig", "load_config"]
