"""Tests for matchergen.orchestrator."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from matchergen.declarations import DeclarationError
from matchergen.diagnostics import CollectingDiagnosticSink, Severity
from matchergen.emit import INDEX_FILE_NAME
from matchergen.orchestrator import Orchestrator

TIMESTAMP = datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc)

PROJECT_FILES = {
    ".matchergen.yml": """
        output_dir: out
        declarations:
          - model.yml
        configurations:
          - origin: com.example.config.MatcherConfig
            value: [com.example.model]
    """,
    "model.yml": """
        packages:
          - name: com.example.model
            types:
              - name: Person
                methods:
                  - {name: getName, returns: java.lang.String}
                  - {name: isAdult, returns: boolean}
                types:
                  - name: Address
                    methods:
                      - {name: getStreet, returns: java.lang.String}
    """,
}


def test_run_generate_writes_matchers_and_index(graph) -> None:
    graph.write(PROJECT_FILES)
    sink = CollectingDiagnosticSink()

    outcome = Orchestrator(sink=sink).run_generate(graph.path(), timestamp=TIMESTAMP)

    out = graph.path().resolve() / "out"
    source_path = out / "com" / "example" / "model" / "PersonMatcher.java"
    assert outcome.output_dir == out
    assert outcome.written == [source_path]
    assert outcome.warnings == []
    source = source_path.read_text(encoding="utf-8")
    assert 'date = "2024-05-17T09:30:00+00:00"' in source
    assert "public static class AddressMatcher extends TypeSafeMatcher<Person.Address> {" in source

    index = json.loads((out / INDEX_FILE_NAME).read_text(encoding="utf-8"))
    assert list(index["entries"]) == ["com.example.model.PersonMatcher"]


def test_second_build_skips_previously_generated_matchers(graph) -> None:
    graph.write(PROJECT_FILES)
    Orchestrator().run_generate(graph.path(), timestamp=TIMESTAMP)

    sink = CollectingDiagnosticSink()
    outcome = Orchestrator(sink=sink).run_generate(graph.path(), timestamp=TIMESTAMP)

    assert [unit.type_name for unit in outcome.units] == ["PersonMatcher"]
    skipped = [d.element for d in sink.of(Severity.NOTE) if d.message.startswith("Generation skipped")]
    assert skipped == [
        "com.example.model.PersonMatcher",
        "com.example.model.PersonMatcher.AddressMatcher",
    ]
    assert not (graph.path() / "out" / "com" / "example" / "model" / "PersonMatcherMatcher.java").exists()


def test_dry_run_writes_nothing(graph, tmp_path) -> None:
    graph.write(PROJECT_FILES)
    override = tmp_path / "elsewhere"

    outcome = Orchestrator().run_generate(graph.path(), output=override, timestamp=TIMESTAMP, dry_run=True)

    assert outcome.dry_run is True
    assert outcome.written == []
    assert [unit.type_name for unit in outcome.units] == ["PersonMatcher"]
    assert not override.exists()


def test_configuration_markers_from_documents_are_processed(graph) -> None:
    graph.write(
        {
            "model.yml": """
                packages:
                  - name: com.example
                    types:
                      - {name: Account}
                configurations:
                  - origin: com.example.Config
                    value: [com.example.Account, com.example.Gone]
            """,
            ".matchergen.yml": "declarations: [model.yml]\n",
        }
    )
    sink = CollectingDiagnosticSink()

    outcome = Orchestrator(sink=sink).run_generate(graph.path(), timestamp=TIMESTAMP, dry_run=True)

    assert [unit.type_name for unit in outcome.units] == ["AccountMatcher"]
    assert [w.entry for w in outcome.warnings] == ["com.example.Gone"]


def test_invalid_declarations_propagate(graph) -> None:
    graph.write({".matchergen.yml": "declarations: [model.yml]\n", "model.yml": "packages: 3\n"})

    with pytest.raises(DeclarationError):
        Orchestrator().run_generate(graph.path())


def test_malformed_configuration_entries_warn_instead_of_failing(graph) -> None:
    files = dict(PROJECT_FILES)
    files[".matchergen.yml"] = """
        output_dir: out
        declarations:
          - model.yml
        configurations:
          - origin: com.example.config.MatcherConfig
            value: [com.example.model, 123]
    """
    files["model.yml"] = PROJECT_FILES["model.yml"] + """
        configurations:
          - origin: com.example.config.Documented
            value: [7]
    """
    graph.write(files)
    sink = CollectingDiagnosticSink()

    outcome = Orchestrator(sink=sink).run_generate(graph.path(), timestamp=TIMESTAMP)

    assert [unit.type_name for unit in outcome.units] == ["PersonMatcher"]
    assert sorted((w.origin, w.entry) for w in outcome.warnings) == [
        ("com.example.config.Documented", "7"),
        ("com.example.config.MatcherConfig", "123"),
    ]
