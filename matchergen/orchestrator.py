"""Coordinates a generation build: config, declarations, processor and output."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .codegen import JavaPrinter, MatcherCodeEmitter
from .config import MatcherGenConfig, load_config
from .declarations import InMemoryDeclarationModel, load_declarations
from .diagnostics import Diagnostic, DiagnosticSink, LoggingDiagnosticSink, Severity
from .emit import INDEX_FILE_NAME, DirectoryFiler, Filer, GeneratedIndex, MemoryFiler
from .logging import get_logger
from .models import GeneratedUnit
from .processor import MatcherGenerationProcessor


@dataclass
class GenerationOutcome:
    """Result of a generate run."""

    output_dir: Path
    units: List[GeneratedUnit] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    dry_run: bool = False

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]


class Orchestrator:
    """Runs one build of the matcher generator over a project directory."""

    def __init__(self, sink: DiagnosticSink | None = None) -> None:
        self.sink = sink
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: Union[str, Path],
        *,
        output: Optional[Path] = None,
        timestamp: Optional[datetime] = None,
        dry_run: bool = False,
    ) -> GenerationOutcome:
        """Generate matchers for every configuration declared by the project."""
        project_path = Path(path).expanduser().resolve()
        self.logger.info("Starting generate run for %s", project_path)
        config = load_config(project_path)
        output_dir = output.expanduser().resolve() if output is not None else config.resolved_output_dir

        model, document_configurations = load_declarations(config.declarations)
        previous = GeneratedIndex(output_dir / INDEX_FILE_NAME).units()
        for unit in previous:
            model.declare_generated(unit)
        self.logger.debug("Index lists %d previously generated units", len(previous))

        configurations = [*document_configurations, *config.configurations]
        self.logger.debug(
            "Loaded %d declaration documents with %d configurations",
            len(config.declarations),
            len(configurations),
        )

        filer: Filer = MemoryFiler() if dry_run else DirectoryFiler(output_dir)
        processor = self._build_processor(config, model, filer, timestamp)
        result = processor.process(configurations)

        outcome = GenerationOutcome(
            output_dir=output_dir,
            units=result.units,
            diagnostics=result.diagnostics,
            dry_run=dry_run,
        )
        if isinstance(filer, DirectoryFiler):
            filer.persist()
            outcome.written = list(filer.written)
        self.logger.info(
            "Generated %d matcher units (%d warnings)", len(outcome.units), len(outcome.warnings)
        )
        return outcome

    def _build_processor(
        self,
        config: MatcherGenConfig,
        model: InMemoryDeclarationModel,
        filer: Filer,
        timestamp: Optional[datetime],
    ) -> MatcherGenerationProcessor:
        emitter = MatcherCodeEmitter(JavaPrinter(indent=config.indent), header=config.header)
        return MatcherGenerationProcessor(
            model,
            filer,
            generator_id=config.generator_id,
            clock=(lambda: timestamp) if timestamp is not None else None,
            sink=self.sink or LoggingDiagnosticSink(),
            emitter=emitter,
        )


__all__ = ["GenerationOutcome", "Orchestrator"]
