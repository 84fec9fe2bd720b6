"""Service layer implementations.

Barrel export for business logic services.
"""

from .features import (
    FeatureIndex,
    get_feature_index,
    matching_phonemes,
    apply_feature_replacement,
    parse_feature_expression,
)
from .tokenizer import tokenize, join_phonemes
from .sca import (
    SoundChangeService,
    apply_sound_changes,
    batch_apply_sound_changes,
    build_macros_from_inventory,
)
from .phonetic import (
    PhoneticService,
    phoneme_distance,
    weighted_edit_distance,
    normalized_distance,
    fuzzy_search,
)

__all__ = [
    "FeatureIndex",
    "get_feature_index",
    "matching_phonemes",
    "apply_feature_replacement",
    "parse_feature_expression",
    "tokenize",
    "join_phonemes",
    "SoundChangeService",
    "apply_sound_changes",
    "batch_apply_sound_changes",
    "build_macros_from_inventory",
    "PhoneticService",
    "phoneme_distance",
    "weighted_edit_distance",
    "normalized_distance",
    "fuzzy_search",
]
