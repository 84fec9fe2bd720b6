"""Test suite for the phoneme tokenizer."""

import pytest
from soundshift.services.tokenizer import tokenize, join_phonemes


class TestTokenize:
    """Greedy longest-match segmentation."""

    def test_multichar_phoneme_wins(self, small_inventory):
        assert tokenize("atʃa", small_inventory) == ["a", "tʃ", "a"]

    def test_inventory_order_does_not_matter(self):
        assert tokenize("atʃa", ["t", "ʃ", "tʃ", "a"]) == ["a", "tʃ", "a"]
        assert tokenize("atʃa", ["tʃ", "t", "ʃ", "a"]) == ["a", "tʃ", "a"]

    def test_longest_of_nested_prefixes(self):
        inventory = ["t", "tʃ", "tʃʰ", "a"]
        assert tokenize("tʃʰatʃa", inventory) == ["tʃʰ", "a", "tʃ", "a"]

    def test_unknown_symbols_become_single_characters(self):
        assert tokenize("aXYa", ["a"]) == ["a", "X", "Y", "a"]

    def test_empty_word(self, small_inventory):
        assert tokenize("", small_inventory) == []

    def test_empty_inventory(self):
        assert tokenize("abc", []) == ["a", "b", "c"]

    def test_blank_inventory_entries_ignored(self):
        assert tokenize("ab", ["", "a", "b"]) == ["a", "b"]

    @pytest.mark.parametrize("word", [
        "atʃa",
        "ŋgoʔo",
        "tsʰa d͡ʒi",
        "mixed ASCII and ɪpɐ!",
    ])
    def test_tokens_reconstruct_word(self, word, model_inventory):
        """Concatenating tokens always gives back the input."""
        assert join_phonemes(tokenize(word, model_inventory)) == word

    def test_deterministic(self, model_inventory):
        assert tokenize("dʒatsa", model_inventory) == tokenize("dʒatsa", model_inventory)
        assert tokenize("dʒatsa", model_inventory) == ["dʒ", "a", "ts", "a"]
