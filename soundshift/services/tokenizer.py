"""Phoneme tokenizer.

Greedy longest-match segmentation against a phoneme inventory, so that
multi-character phonemes (tʃ, dʒ, ts, ...) come out as single tokens.
"""

from typing import Iterable


def tokenize(word: str, inventory: Iterable[str]) -> list[str]:
    """Split ``word`` into phoneme tokens.

    Inventory entries are tried longest first at each position; a symbol
    that matches nothing becomes a single-character token, so
    ``"".join(tokenize(word, inv)) == word`` for every input.
    """
    if not word:
        return []

    candidates = sorted((p for p in inventory if p), key=len, reverse=True)
    tokens: list[str] = []
    pos = 0

    while pos < len(word):
        for phoneme in candidates:
            if word.startswith(phoneme, pos):
                tokens.append(phoneme)
                pos += len(phoneme)
                break
        else:
            tokens.append(word[pos])
            pos += 1

    return tokens


def join_phonemes(tokens: Iterable[str]) -> str:
    return "".join(tokens)
