"""Shared fixtures for the test suite."""

import pytest

from soundshift.core.features import PHONEME_FEATURES
from soundshift.core.types import LexiconEntry


@pytest.fixture
def model_inventory():
    """Every phoneme of the built-in feature model."""
    return list(PHONEME_FEATURES)


@pytest.fixture
def small_inventory():
    return ["p", "t", "k", "b", "d", "g", "m", "n", "s", "tʃ", "a", "e", "i", "o", "u"]


@pytest.fixture
def lexicon():
    return [
        LexiconEntry(entry_id="w1", con_word_romanized="kata", phonetic_ipa="kata"),
        LexiconEntry(entry_id="w2", con_word_romanized="mosu", phonetic_ipa="mosu"),
        LexiconEntry(entry_id="w3", con_word_romanized="pata", phonetic_ipa="pata"),
        LexiconEntry(entry_id="w4", con_word_romanized="gata", phonetic_ipa="gata"),
        LexiconEntry(entry_id="w5", con_word_romanized="draft", phonetic_ipa=""),
    ]
