"""Generation core: resolve, expand, guard, extract and build."""

from .builder import MatcherSpecBuilder
from .context import CandidateSet, GenerationContext, candidate_set
from .expander import TypeGraphExpander
from .guard import SelfGenerationGuard
from .properties import PropertyExtractor, property_name
from .resolver import ConfigurationResolver

__all__ = [
    "CandidateSet",
    "ConfigurationResolver",
    "GenerationContext",
    "MatcherSpecBuilder",
    "PropertyExtractor",
    "SelfGenerationGuard",
    "TypeGraphExpander",
    "candidate_set",
    "property_name",
]
