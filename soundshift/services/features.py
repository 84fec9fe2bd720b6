"""Feature index over the static phonological model.

The index is built once per model and never mutated afterwards, so one
instance can be shared by every service that needs feature lookups.
"""

from functools import lru_cache
from typing import Iterable, Mapping, Optional

from soundshift.core.features import PHONEME_FEATURES
from soundshift.core.types import FeatureExpression, FeatureReplacement
from soundshift.errors import InvalidFeatureExpressionError
from soundshift.observ import get_logger

logger = get_logger(__name__)


class FeatureIndex:
    """Inverted feature → phoneme index with feature-based resolution."""

    def __init__(self, model: Mapping[str, Iterable[str]] = PHONEME_FEATURES):
        self._features: dict[str, frozenset[str]] = {
            phoneme: frozenset(features) for phoneme, features in model.items()
        }
        self._order: tuple[str, ...] = tuple(self._features)

        index: dict[str, set[str]] = {}
        for phoneme, features in self._features.items():
            for feature in features:
                index.setdefault(feature, set()).add(phoneme)
        self._index: dict[str, frozenset[str]] = {
            feature: frozenset(phonemes) for feature, phonemes in index.items()
        }

        logger.debug(
            "feature_index_built",
            phonemes=len(self._order),
            features=len(self._index),
        )

    @property
    def phonemes(self) -> tuple[str, ...]:
        """All known phonemes in enumeration order."""
        return self._order

    def features_of(self, phoneme: str) -> Optional[frozenset[str]]:
        return self._features.get(phoneme)

    def matches(self, phoneme: str, expr: FeatureExpression) -> bool:
        """Check a phoneme against an expression; unknown phonemes never match."""
        features = self._features.get(phoneme)
        if features is None:
            return False
        if any(f not in features for f in expr.positive):
            return False
        return not any(f in features for f in expr.negative)

    def phonemes_matching(self, expr: FeatureExpression) -> list[str]:
        """Resolve an expression to phonemes, in enumeration order."""
        candidates: Optional[set[str]] = None

        for feature in expr.positive:
            phonemes = self._index.get(feature)
            if phonemes is None:
                return []
            if candidates is None:
                candidates = set(phonemes)
            else:
                candidates &= phonemes

        if candidates is None:
            candidates = set(self._order)

        for feature in expr.negative:
            candidates -= self._index.get(feature, frozenset())

        return [p for p in self._order if p in candidates]

    def resolve_by_features(self, target: Iterable[str]) -> Optional[str]:
        """Find the phoneme whose feature set is closest to ``target``.

        Linear Jaccard scan over the whole model, O(model size) per call.
        The first phoneme in enumeration order wins exact ties. Returns
        None only when the model is empty.
        """
        target = frozenset(target)
        best_match: Optional[str] = None
        best_score = -1.0

        for phoneme in self._order:
            features = self._features[phoneme]
            union = len(target | features)
            score = len(target & features) / union if union else 0.0
            if score > best_score:
                best_score = score
                best_match = phoneme

        return best_match

    def apply_feature_replacement(self, phoneme: str, repl: FeatureReplacement) -> str:
        """Rewrite a phoneme's features and resolve the nearest phoneme.

        Unknown phonemes are returned unchanged.
        """
        features = self._features.get(phoneme)
        if features is None:
            return phoneme

        current = (features - set(repl.remove_features)) | set(repl.set_features)
        return self.resolve_by_features(current) or phoneme


@lru_cache(maxsize=1)
def get_feature_index() -> FeatureIndex:
    """Get the shared index over the built-in model, built on first use."""
    return FeatureIndex()


def matching_phonemes(expr: FeatureExpression, index: Optional[FeatureIndex] = None) -> list[str]:
    """List every known phoneme matching ``expr``."""
    return (index or get_feature_index()).phonemes_matching(expr)


def apply_feature_replacement(
    phoneme: str,
    repl: FeatureReplacement,
    index: Optional[FeatureIndex] = None,
) -> str:
    return (index or get_feature_index()).apply_feature_replacement(phoneme, repl)


def parse_feature_expression(text: str) -> FeatureExpression:
    """Parse ``"[+voiced, -stop]"`` into a FeatureExpression.

    Brackets are optional and unprefixed names count as positive.
    """
    if not text or not text.strip():
        return FeatureExpression()

    cleaned = text.strip()
    if cleaned.startswith("["):
        cleaned = cleaned[1:]
    if cleaned.endswith("]"):
        cleaned = cleaned[:-1]

    positive: list[str] = []
    negative: list[str] = []
    for part in (p.strip() for p in cleaned.split(",")):
        if not part:
            continue
        if part.startswith("-"):
            target, name = negative, part[1:].strip()
        else:
            target, name = positive, part.removeprefix("+").strip()
        if not name:
            raise InvalidFeatureExpressionError(text, f"empty feature name in {part!r}")
        target.append(name)

    overlap = set(positive) & set(negative)
    if overlap:
        raise InvalidFeatureExpressionError(
            text, f"features both required and excluded: {', '.join(sorted(overlap))}"
        )

    return FeatureExpression(positive=positive, negative=negative)
