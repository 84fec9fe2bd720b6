"""Service contracts and interfaces.

Defines protocols for dependency injection and testing.
"""

from typing import Iterable, Optional, Protocol
from .types import (
    LexiconEntry,
    MacroTable,
    SCARuleSet,
    SimilarityResult,
    SoundChangeResult,
)


class IPhoneticAnalyzer(Protocol):
    """Contract for phonetic distance computation services."""

    def compute_distance(self, phoneme_a: str, phoneme_b: str) -> float:
        """Compute distance in [0, 1] between two phonemes."""
        ...

    def search(
        self,
        query: str,
        words: Iterable[LexiconEntry],
        inventory: Iterable[str],
        threshold: Optional[float] = None,
    ) -> list[SimilarityResult]:
        """Rank lexicon entries by phonetic similarity to a query."""
        ...


class ISoundChanger(Protocol):
    """Contract for sound-change application services."""

    def apply(
        self,
        word: str,
        rule_sets: list[SCARuleSet],
        macros: MacroTable,
        inventory: Optional[list[str]] = None,
    ) -> SoundChangeResult:
        """Apply ordered rule sets to a word."""
        ...
