"""Core domain models and types.

Barrel export for clean imports across the application.
"""

from .types import (
    MacroTable,
    FeatureExpression,
    FeatureReplacement,
    CharacterRule,
    FeatureRule,
    SCARule,
    SCARuleSet,
    SCAConfig,
    StepLogEntry,
    SoundChangeResult,
    BatchResult,
    LexiconEntry,
    SimilarityResult,
    PhonemeInventory,
    parse_rule,
)
from .features import PHONEME_FEATURES

__all__ = [
    "MacroTable",
    "FeatureExpression",
    "FeatureReplacement",
    "CharacterRule",
    "FeatureRule",
    "SCARule",
    "SCARuleSet",
    "SCAConfig",
    "StepLogEntry",
    "SoundChangeResult",
    "BatchResult",
    "LexiconEntry",
    "SimilarityResult",
    "PhonemeInventory",
    "parse_rule",
    "PHONEME_FEATURES",
]
