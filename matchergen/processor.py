"""Round processing: from configuration markers to emitted matcher units."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable, Iterable, List, Set, Tuple

from .codegen import MatcherCodeEmitter
from .declarations.base import DeclarationModel
from .diagnostics import CollectingDiagnosticSink, Diagnostic, DiagnosticSink
from .emit import Filer
from .generation import (
    CandidateSet,
    ConfigurationResolver,
    GenerationContext,
    MatcherSpecBuilder,
    PropertyExtractor,
    SelfGenerationGuard,
    TypeGraphExpander,
    candidate_set,
)
from .logging import get_logger
from .models import ConfigurationSource, GeneratedUnit, GenerationMarker, TypeDescriptor

Clock = Callable[[], datetime]

DEFAULT_GENERATOR_ID = "matchergen.processor.MatcherGenerationProcessor"
STARTED_NOTE = "Annotation processor for hamcrest matcher generation started"


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class RoundResult:
    """Units emitted and diagnostics reported during one round."""

    units: List[GeneratedUnit] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


class _RoundSink:
    def __init__(self, downstream: DiagnosticSink) -> None:
        self.downstream = downstream
        self.diagnostics: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        self.downstream.report(diagnostic)


class MatcherGenerationProcessor:
    """Drives one generation pass per build round.

    The clock is the only source of wall-clock time; it is sampled once per
    round so every unit of a round carries the same marker.
    """

    def __init__(
        self,
        model: DeclarationModel,
        filer: Filer,
        *,
        generator_id: str = DEFAULT_GENERATOR_ID,
        clock: Clock | None = None,
        sink: DiagnosticSink | None = None,
        emitter: MatcherCodeEmitter | None = None,
    ) -> None:
        self.model = model
        self.filer = filer
        self.generator_id = generator_id
        self.clock = clock or utc_now
        self.sink = sink or CollectingDiagnosticSink()
        self.emitter = emitter or MatcherCodeEmitter()
        self.resolver = ConfigurationResolver(model)
        self.expander = TypeGraphExpander(model)
        self.guard = SelfGenerationGuard(generator_id)
        self.extractor = PropertyExtractor(model)
        self.builder = MatcherSpecBuilder(model, self.extractor)
        self.logger = get_logger("processor")

    def process(
        self,
        configurations: Iterable[ConfigurationSource],
        *,
        processing_over: bool = False,
    ) -> RoundResult:
        if processing_over:
            return RoundResult()

        round_sink = _RoundSink(self.sink)
        context = GenerationContext(sink=round_sink)
        context.note(STARTED_NOTE)

        selections: List[Tuple[GenerationContext, CandidateSet]] = []
        for configuration in configurations:
            scoped = context.for_configuration(configuration)
            roots = self.resolver.resolve(configuration.value, scoped)
            selections.append((scoped, self.expander.expand(roots, scoped)))

        # Scoped contexts share this mapping, so nested lookups see the global set.
        context.candidates.update(
            (name, descriptor)
            for name, descriptor in candidate_set(*(expanded for _, expanded in selections)).items()
            if not self.guard.is_self_generated(descriptor)
        )
        self.logger.debug("Global candidate set holds %d types", len(context.candidates))

        marker = GenerationMarker(generator_id=self.generator_id, timestamp=self.clock().isoformat())
        result = RoundResult(diagnostics=round_sink.diagnostics)
        emitted: Set[str] = set()
        for scoped, expanded in selections:
            targets = self.guard.filter(expanded, scoped)
            for descriptor in targets.values():
                if descriptor.enclosing_name is not None or descriptor.qualified_name in emitted:
                    continue
                try:
                    unit = self.generate(descriptor, marker, scoped)
                except ValueError as exc:
                    scoped.warn(
                        f"Cannot generate a matcher for '{descriptor.qualified_name}': {exc}",
                        element=descriptor.qualified_name,
                    )
                    continue
                self.filer.write(unit)
                emitted.add(descriptor.qualified_name)
                result.units.append(unit)
        self.logger.debug("Round emitted %d matcher units", len(result.units))
        return result

    def generate(
        self, descriptor: TypeDescriptor, marker: GenerationMarker, context: GenerationContext
    ) -> GeneratedUnit:
        origins: List[str] = [context.origin] if context.origin else []
        spec = self.builder.build(
            descriptor,
            self.extractor.extract(descriptor),
            marker,
            origins,
            context,
        )
        unit = self.emitter.emit(spec)
        self.logger.debug("Generated %s for %s", unit.qualified_name, descriptor.qualified_name)
        return unit


__all__ = [
    "DEFAULT_GENERATOR_ID",
    "MatcherGenerationProcessor",
    "RoundResult",
    "STARTED_NOTE",
    "utc_now",
]
