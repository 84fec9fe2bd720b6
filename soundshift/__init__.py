"""SoundShift - sound-change application and phonetic search for constructed languages.

Phoneme tokenization, a feature-based phonological model, an ordered
sound-change rule engine and weighted phonetic similarity search.
"""

__version__ = "0.1.0"

# Observability exports for convenience
from soundshift.observ import get_logger, timer, timed
from soundshift.errors import (
    SoundShiftError,
    ErrorCode,
    ValidationError,
    InvalidRuleError,
    InvalidFeatureExpressionError,
    ResourceNotFoundError,
    ProcessingError,
    MalformedPatternError,
)
from soundshift.services import (
    tokenize,
    phoneme_distance,
    fuzzy_search,
    apply_sound_changes,
    matching_phonemes,
    apply_feature_replacement,
)

__all__ = [
    # Version
    "__version__",
    # Logging
    "get_logger",
    "timer",
    "timed",
    # Errors
    "SoundShiftError",
    "ErrorCode",
    "ValidationError",
    "InvalidRuleError",
    "InvalidFeatureExpressionError",
    "ResourceNotFoundError",
    "ProcessingError",
    "MalformedPatternError",
    # Core operations
    "tokenize",
    "phoneme_distance",
    "fuzzy_search",
    "apply_sound_changes",
    "matching_phonemes",
    "apply_feature_replacement",
]
