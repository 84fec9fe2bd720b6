"""Phonetic similarity service.

Feature-weighted phoneme distance, weighted edit distance over phoneme
tokens, and fuzzy lexicon search built on both.
"""

from typing import Iterable, Optional

from soundshift.config import get_settings
from soundshift.core.contracts import IPhoneticAnalyzer
from soundshift.core.features import (
    MANNER_FEATURES,
    PLACE_FEATURES,
    TYPE_FEATURES,
    VOICING_FEATURES,
)
from soundshift.core.types import LexiconEntry, SimilarityResult
from soundshift.observ import get_logger
from soundshift.services.features import FeatureIndex, get_feature_index
from soundshift.services.tokenizer import tokenize

logger = get_logger(__name__)

MANNER_WEIGHT = 0.40
PLACE_WEIGHT = 0.35
VOICING_WEIGHT = 0.15
OTHER_WEIGHT = 0.10

# Insertion/deletion cost in the edit distance
GAP_COST = 0.6

_CLASSIFIED = TYPE_FEATURES | MANNER_FEATURES | PLACE_FEATURES | VOICING_FEATURES


def phoneme_distance(a: str, b: str, index: Optional[FeatureIndex] = None) -> float:
    """Distance in [0, 1] between two phonemes.

    Unknown phonemes only compare by identity. Consonant vs vowel is
    always 1.
    """
    if a == b:
        return 0.0

    index = index or get_feature_index()
    fa = index.features_of(a)
    fb = index.features_of(b)
    if fa is None or fb is None:
        return 1.0

    if fa & TYPE_FEATURES != fb & TYPE_FEATURES:
        return 1.0

    diff = 0.0
    total = 0.0

    # Manner and place: any shared tag counts as a match
    diff += 0.0 if fa & fb & MANNER_FEATURES else MANNER_WEIGHT
    total += MANNER_WEIGHT

    diff += 0.0 if fa & fb & PLACE_FEATURES else PLACE_WEIGHT
    total += PLACE_WEIGHT

    diff += 0.0 if fa & VOICING_FEATURES == fb & VOICING_FEATURES else VOICING_WEIGHT
    total += VOICING_WEIGHT

    other_a = fa - _CLASSIFIED
    other_b = fb - _CLASSIFIED
    all_other = other_a | other_b
    overlap = len(other_a & other_b) / len(all_other) if all_other else 1.0
    diff += (1.0 - overlap) * OTHER_WEIGHT
    total += OTHER_WEIGHT

    return min(diff / total, 1.0)


def weighted_edit_distance(
    tokens_a: list[str],
    tokens_b: list[str],
    index: Optional[FeatureIndex] = None,
) -> float:
    """Edit distance over phoneme tokens.

    Substitution costs ``phoneme_distance``; insertion and deletion cost
    ``GAP_COST``.
    """
    index = index or get_feature_index()
    m, n = len(tokens_a), len(tokens_b)
    dp = [[0.0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        dp[i][0] = i * GAP_COST
    for j in range(1, n + 1):
        dp[0][j] = j * GAP_COST

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            substitution = dp[i - 1][j - 1] + phoneme_distance(tokens_a[i - 1], tokens_b[j - 1], index)
            deletion = dp[i - 1][j] + GAP_COST
            insertion = dp[i][j - 1] + GAP_COST
            dp[i][j] = min(substitution, deletion, insertion)

    return dp[m][n]


def normalized_distance(
    tokens_a: list[str],
    tokens_b: list[str],
    index: Optional[FeatureIndex] = None,
) -> float:
    """Edit distance scaled by the longest sequence's gap cost, capped at 1."""
    max_len = max(len(tokens_a), len(tokens_b))
    if max_len == 0:
        return 0.0
    raw = weighted_edit_distance(tokens_a, tokens_b, index)
    return min(raw / (max_len * GAP_COST), 1.0)


def fuzzy_search(
    query: str,
    words: Iterable[LexiconEntry],
    inventory: Iterable[str],
    threshold: Optional[float] = None,
    index: Optional[FeatureIndex] = None,
) -> list[SimilarityResult]:
    """Find lexicon entries whose IPA sounds like ``query``.

    Results are sorted by ascending distance; ties keep lexicon order.
    """
    if threshold is None:
        threshold = get_settings().fuzzy_threshold

    query = query.strip() if query else ""
    if not query:
        return []

    inventory = list(inventory)
    query_tokens = tokenize(query, inventory)
    if not query_tokens:
        return []

    index = index or get_feature_index()
    results: list[SimilarityResult] = []
    scanned = 0

    for entry in words:
        if not entry.phonetic_ipa:
            continue
        entry_tokens = tokenize(entry.phonetic_ipa, inventory)
        if not entry_tokens:
            continue
        scanned += 1
        distance = normalized_distance(query_tokens, entry_tokens, index)
        if distance <= threshold:
            results.append(SimilarityResult(entry=entry, distance=distance))

    results.sort(key=lambda r: r.distance)
    logger.debug(
        "fuzzy_search_completed",
        query=query,
        scanned=scanned,
        matched=len(results),
        threshold=threshold,
    )
    return results


class PhoneticService(IPhoneticAnalyzer):
    """Phonetic comparison and lexicon search over a shared feature index."""

    def __init__(self, index: Optional[FeatureIndex] = None):
        self._index = index or get_feature_index()

    def compute_distance(self, phoneme_a: str, phoneme_b: str) -> float:
        return phoneme_distance(phoneme_a, phoneme_b, self._index)

    def batch_compute_distance(self, pairs: list[tuple[str, str]]) -> list[float]:
        return [self.compute_distance(a, b) for a, b in pairs]

    def edit_distance(self, tokens_a: list[str], tokens_b: list[str]) -> float:
        return weighted_edit_distance(tokens_a, tokens_b, self._index)

    def word_distance(self, word_a: str, word_b: str, inventory: Iterable[str]) -> float:
        """Normalized distance between two IPA strings."""
        inventory = list(inventory)
        return normalized_distance(
            tokenize(word_a, inventory),
            tokenize(word_b, inventory),
            self._index,
        )

    def search(
        self,
        query: str,
        words: Iterable[LexiconEntry],
        inventory: Iterable[str],
        threshold: Optional[float] = None,
    ) -> list[SimilarityResult]:
        return fuzzy_search(query, words, inventory, threshold, self._index)
