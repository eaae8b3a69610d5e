from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from matchergen.diagnostics import CollectingDiagnosticSink
from matchergen.generation import GenerationContext
from tests._fixtures.graph_builder import GraphBuilder

FIXED_TIME = datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def graph(tmp_path: Path) -> GraphBuilder:
    """Provide a declaration graph builder rooted at the pytest tmp_path."""
    return GraphBuilder(tmp_path)


@pytest.fixture
def sink() -> CollectingDiagnosticSink:
    return CollectingDiagnosticSink()


@pytest.fixture
def context(sink: CollectingDiagnosticSink) -> GenerationContext:
    return GenerationContext(sink=sink)


@pytest.fixture
def clock():
    """A clock frozen at a fixed instant, for reproducible markers."""
    return lambda: FIXED_TIME
