"""Tests for matchergen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from matchergen.config import ConfigError, MatcherGenConfig, load_config
from matchergen.models import ConfigurationSource
from matchergen.processor import DEFAULT_GENERATOR_ID


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, MatcherGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.generator_id == DEFAULT_GENERATOR_ID
    assert config.output_dir is None
    assert config.resolved_output_dir == tmp_path.resolve() / "build" / "generated-sources" / "matchers"
    assert config.indent == "  "
    assert config.header is None
    assert config.declarations == []
    assert config.configurations == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".matchergen.yml"
    config_file.write_text(
        """
generator_id: custom.Generator
output_dir: target/matchers
indent: "    "
header: "Generated, do not edit"
declarations:
  - model/declarations.yml
  - model/more.json
configurations:
  - origin: com.example.config.MatcherConfig
    value: [com.example.model, com.example.other.Type]
  - origin: com.example.config.Single
    value: com.example.Single
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.generator_id == "custom.Generator"
    assert config.output_dir == root / "target" / "matchers"
    assert config.resolved_output_dir == root / "target" / "matchers"
    assert config.indent == "    "
    assert config.header == "Generated, do not edit"
    assert config.declarations == [root / "model" / "declarations.yml", root / "model" / "more.json"]
    assert config.configurations == [
        ConfigurationSource(
            origin="com.example.config.MatcherConfig",
            value=("com.example.model", "com.example.other.Type"),
        ),
        ConfigurationSource(origin="com.example.config.Single", value=("com.example.Single",)),
    ]


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".matchergen.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.generator_id == DEFAULT_GENERATOR_ID



def test_malformed_configuration_entries_are_kept_as_text(tmp_path: Path) -> None:
    (tmp_path / ".matchergen.yml").write_text(
        "configurations:\n  - origin: com.example.Config\n    value: [com.example.model, 123, null]\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.configurations == [
        ConfigurationSource(origin="com.example.Config", value=("com.example.model", "123", "None"))
    ]

@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("- just\n- a list\n", "mapping at the root"),
        ("indent: 'ab'\n", "indent"),
        ("configurations: {origin: x}\n", "configurations must be a list"),
        ("configurations:\n  - value: [a]\n", "needs an origin"),
        ("configurations:\n  - plain\n", "must be a mapping"),
        ("generator_id: [unclosed\n", "Failed to parse"),
    ],
)
def test_load_config_rejects_malformed_files(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".matchergen.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)
