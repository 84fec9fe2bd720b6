"""Test suite for phonetic distance and fuzzy search."""

import pytest

from soundshift.core.types import LexiconEntry
from soundshift.services.phonetic import (
    GAP_COST,
    PhoneticService,
    fuzzy_search,
    normalized_distance,
    phoneme_distance,
    weighted_edit_distance,
)


class TestPhonemeDistance:
    """Feature-weighted distance between two phonemes."""

    def test_identity(self):
        assert phoneme_distance("p", "p") == 0.0
        assert phoneme_distance("X", "X") == 0.0

    def test_place_only(self):
        assert phoneme_distance("p", "k") == pytest.approx(0.35)

    def test_voicing_only(self):
        assert phoneme_distance("p", "b") == pytest.approx(0.15)

    def test_consonant_vs_vowel(self):
        assert phoneme_distance("p", "a") == 1.0

    def test_unknown_phonemes(self):
        assert phoneme_distance("X", "Y") == 1.0
        assert phoneme_distance("X", "p") == 1.0

    def test_vowels_pay_manner_and_place(self):
        # vowels carry no manner/place tags, so those never match
        assert phoneme_distance("i", "y") == pytest.approx(0.8)

    def test_symmetric(self):
        for a, b in [("p", "z"), ("i", "o"), ("tʃ", "s"), ("m", "ŋ")]:
            assert phoneme_distance(a, b) == pytest.approx(phoneme_distance(b, a))

    def test_bounded(self):
        for a, b in [("p", "ʕ"), ("a", "ɒ"), ("ts", "w")]:
            assert 0.0 <= phoneme_distance(a, b) <= 1.0


class TestEditDistance:
    """Weighted edit distance over token sequences."""

    def test_empty(self):
        assert weighted_edit_distance([], []) == 0.0
        assert normalized_distance([], []) == 0.0

    def test_gap(self):
        assert weighted_edit_distance(["a"], []) == pytest.approx(GAP_COST)
        assert weighted_edit_distance([], ["a", "b"]) == pytest.approx(2 * GAP_COST)

    def test_substitution(self):
        assert weighted_edit_distance(["p", "a"], ["b", "a"]) == pytest.approx(0.15)

    def test_prefers_cheaper_path(self):
        # substituting p/a costs 1.0, deleting and inserting costs 1.2
        assert weighted_edit_distance(["p"], ["a"]) == pytest.approx(1.0)

    def test_normalized(self):
        assert normalized_distance(["p", "a"], ["b", "a"]) == pytest.approx(0.125)

    def test_normalized_is_capped(self):
        assert normalized_distance(["p"], ["a"]) == 1.0

    def test_identical(self):
        tokens = ["k", "a", "t", "a"]
        assert normalized_distance(tokens, tokens) == 0.0


class TestFuzzySearch:
    """Lexicon search ranked by normalized distance."""

    def setup_method(self):
        self.service = PhoneticService()

    def test_ranked_results(self, lexicon, model_inventory):
        results = fuzzy_search("kata", lexicon, model_inventory, threshold=0.6)

        assert [r.entry.entry_id for r in results] == ["w1", "w4", "w3"]
        assert results[0].distance == 0.0
        assert results[1].distance == pytest.approx(0.0625)
        assert results[2].distance == pytest.approx(0.35 / 2.4)

    def test_threshold_excludes(self, lexicon, model_inventory):
        results = fuzzy_search("kata", lexicon, model_inventory, threshold=0.1)
        assert [r.entry.entry_id for r in results] == ["w1", "w4"]

    def test_default_threshold(self, lexicon, model_inventory):
        ids = [r.entry.entry_id for r in fuzzy_search("kata", lexicon, model_inventory)]
        assert "w2" not in ids
        assert ids[0] == "w1"

    def test_blank_query(self, lexicon, model_inventory):
        assert fuzzy_search("", lexicon, model_inventory) == []
        assert fuzzy_search("   ", lexicon, model_inventory) == []

    def test_query_is_trimmed(self, lexicon, model_inventory):
        results = fuzzy_search("  kata ", lexicon, model_inventory, threshold=0.0)
        assert [r.entry.entry_id for r in results] == ["w1"]

    def test_entries_without_ipa_skipped(self, model_inventory):
        words = [LexiconEntry(entry_id="x", con_word_romanized="kata", phonetic_ipa="")]
        assert fuzzy_search("kata", words, model_inventory, threshold=1.0) == []

    def test_ties_keep_lexicon_order(self, model_inventory):
        words = [
            LexiconEntry(entry_id="second", phonetic_ipa="ba"),
            LexiconEntry(entry_id="first", phonetic_ipa="ba"),
        ]
        results = fuzzy_search("pa", words, model_inventory, threshold=1.0)
        assert [r.entry.entry_id for r in results] == ["second", "first"]

    def test_service_search(self, lexicon, model_inventory):
        results = self.service.search("gata", lexicon, model_inventory, 0.0)
        assert [r.entry.entry_id for r in results] == ["w4"]

    def test_service_distances(self, model_inventory):
        assert self.service.batch_compute_distance([("p", "b"), ("p", "p")]) == pytest.approx([0.15, 0.0])
        assert self.service.word_distance("pa", "ba", model_inventory) == pytest.approx(0.125)

    def test_service_edit_distance(self):
        assert self.service.edit_distance(["p", "a"], ["b", "a"]) == pytest.approx(0.15)
        assert self.service.edit_distance(["a"], []) == pytest.approx(GAP_COST)
        assert self.service.edit_distance([], []) == 0.0
