"""CLI parser behaviour tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from matchergen.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--verbose"])
    assert args.verbose is True


def test_cli_parses_generate_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["generate", "project", "--output", "out", "--timestamp", "2024-05-17T09:30:00+00:00", "--dry-run"]
    )
    assert args.path == "project"
    assert str(args.output) == "out"
    assert args.timestamp == datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc)
    assert args.dry_run is True


def test_cli_rejects_bad_timestamp() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--timestamp", "yesterday"])


def test_main_dry_run_prints_sources(graph, capsys) -> None:
    graph.write(
        {
            ".matchergen.yml": """
                declarations: [model.yml]
                configurations:
                  - origin: com.example.Config
                    value: [com.example.Person]
            """,
            "model.yml": """
                packages:
                  - name: com.example
                    types:
                      - name: Person
                        methods:
                          - {name: getName, returns: java.lang.String}
            """,
        }
    )

    main(["--quiet", "generate", str(graph.path()), "--dry-run", "--timestamp", "2024-05-17T09:30:00+00:00"])

    out = capsys.readouterr().out
    assert out.startswith("// com/example/PersonMatcher.java\npackage com.example;\n")
    assert "public PersonMatcher withName(final String value) {" in out


def test_main_exits_with_status_one_on_bad_config(graph, capsys) -> None:
    graph.write({".matchergen.yml": "- not a mapping\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(graph.path())])

    assert excinfo.value.code == 1
    assert "matchergen generate failed" in capsys.readouterr().err
