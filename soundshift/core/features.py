"""Static phonological feature model.

Maps IPA symbols to categorical feature tags. Insertion order is the
enumeration order used for tie-breaking everywhere a "first match" matters:
stops, nasals, trills, taps, fricatives, approximants, laterals,
lateral fricatives, affricates, then vowels.
"""

from types import MappingProxyType
from typing import Mapping


TYPE_FEATURES = frozenset({"consonant", "vowel"})

MANNER_FEATURES = frozenset({
    "stop", "fricative", "nasal", "trill", "tap", "lateral",
    "approximant", "affricate",
})

PLACE_FEATURES = frozenset({
    "bilabial", "labiodental", "dental", "alveolar", "postalveolar",
    "retroflex", "alveolopalatal", "palatal", "velar", "uvular",
    "pharyngeal", "glottal",
})

VOICING_FEATURES = frozenset({"voiced", "voiceless"})


_FEATURES: dict[str, tuple[str, ...]] = {
    # Stops
    "p": ("consonant", "stop", "bilabial", "voiceless"),
    "b": ("consonant", "stop", "bilabial", "voiced"),
    "t": ("consonant", "stop", "alveolar", "voiceless"),
    "d": ("consonant", "stop", "alveolar", "voiced"),
    "ʈ": ("consonant", "stop", "retroflex", "voiceless"),
    "ɖ": ("consonant", "stop", "retroflex", "voiced"),
    "c": ("consonant", "stop", "palatal", "voiceless"),
    "ɟ": ("consonant", "stop", "palatal", "voiced"),
    "k": ("consonant", "stop", "velar", "voiceless"),
    "ɡ": ("consonant", "stop", "velar", "voiced"),
    "g": ("consonant", "stop", "velar", "voiced"),
    "q": ("consonant", "stop", "uvular", "voiceless"),
    "ɢ": ("consonant", "stop", "uvular", "voiced"),
    "ʔ": ("consonant", "stop", "glottal", "voiceless"),

    # Nasals
    "m": ("consonant", "nasal", "bilabial", "voiced"),
    "ɱ": ("consonant", "nasal", "labiodental", "voiced"),
    "n": ("consonant", "nasal", "alveolar", "voiced"),
    "ɳ": ("consonant", "nasal", "retroflex", "voiced"),
    "ɲ": ("consonant", "nasal", "palatal", "voiced"),
    "ŋ": ("consonant", "nasal", "velar", "voiced"),
    "ɴ": ("consonant", "nasal", "uvular", "voiced"),

    # Trills
    "r": ("consonant", "trill", "alveolar", "voiced"),
    "ʀ": ("consonant", "trill", "uvular", "voiced"),
    "ʙ": ("consonant", "trill", "bilabial", "voiced"),

    # Taps
    "ɾ": ("consonant", "tap", "alveolar", "voiced"),
    "ɽ": ("consonant", "tap", "retroflex", "voiced"),

    # Fricatives
    "ɸ": ("consonant", "fricative", "bilabial", "voiceless"),
    "β": ("consonant", "fricative", "bilabial", "voiced"),
    "f": ("consonant", "fricative", "labiodental", "voiceless"),
    "v": ("consonant", "fricative", "labiodental", "voiced"),
    "θ": ("consonant", "fricative", "dental", "voiceless"),
    "ð": ("consonant", "fricative", "dental", "voiced"),
    "s": ("consonant", "fricative", "alveolar", "voiceless"),
    "z": ("consonant", "fricative", "alveolar", "voiced"),
    "ʃ": ("consonant", "fricative", "postalveolar", "voiceless"),
    "ʒ": ("consonant", "fricative", "postalveolar", "voiced"),
    "ʂ": ("consonant", "fricative", "retroflex", "voiceless"),
    "ʐ": ("consonant", "fricative", "retroflex", "voiced"),
    "ɕ": ("consonant", "fricative", "alveolopalatal", "voiceless"),
    "ʑ": ("consonant", "fricative", "alveolopalatal", "voiced"),
    "ç": ("consonant", "fricative", "palatal", "voiceless"),
    "ʝ": ("consonant", "fricative", "palatal", "voiced"),
    "x": ("consonant", "fricative", "velar", "voiceless"),
    "ɣ": ("consonant", "fricative", "velar", "voiced"),
    "χ": ("consonant", "fricative", "uvular", "voiceless"),
    "ʁ": ("consonant", "fricative", "uvular", "voiced"),
    "ħ": ("consonant", "fricative", "pharyngeal", "voiceless"),
    "ʕ": ("consonant", "fricative", "pharyngeal", "voiced"),
    "h": ("consonant", "fricative", "glottal", "voiceless"),
    "ɦ": ("consonant", "fricative", "glottal", "voiced"),

    # Approximants
    "ʋ": ("consonant", "approximant", "labiodental", "voiced"),
    "ɹ": ("consonant", "approximant", "alveolar", "voiced"),
    "ɻ": ("consonant", "approximant", "retroflex", "voiced"),
    "j": ("consonant", "approximant", "palatal", "voiced"),
    "ɰ": ("consonant", "approximant", "velar", "voiced"),
    "w": ("consonant", "approximant", "labiovelar", "voiced"),

    # Laterals
    "l": ("consonant", "lateral", "alveolar", "voiced"),
    "ɭ": ("consonant", "lateral", "retroflex", "voiced"),
    "ʎ": ("consonant", "lateral", "palatal", "voiced"),
    "ʟ": ("consonant", "lateral", "velar", "voiced"),

    # Lateral fricatives
    "ɬ": ("consonant", "lateral_fricative", "alveolar", "voiceless"),
    "ɮ": ("consonant", "lateral_fricative", "alveolar", "voiced"),

    # Affricates
    "ts": ("consonant", "affricate", "alveolar", "voiceless"),
    "dz": ("consonant", "affricate", "alveolar", "voiced"),
    "tʃ": ("consonant", "affricate", "postalveolar", "voiceless"),
    "dʒ": ("consonant", "affricate", "postalveolar", "voiced"),
    "tɕ": ("consonant", "affricate", "alveolopalatal", "voiceless"),
    "dʑ": ("consonant", "affricate", "alveolopalatal", "voiced"),

    # Vowels
    "i": ("vowel", "close", "front", "unrounded"),
    "y": ("vowel", "close", "front", "rounded"),
    "ɨ": ("vowel", "close", "central", "unrounded"),
    "ʉ": ("vowel", "close", "central", "rounded"),
    "ɯ": ("vowel", "close", "back", "unrounded"),
    "u": ("vowel", "close", "back", "rounded"),
    "ɪ": ("vowel", "near_close", "front", "unrounded"),
    "ʏ": ("vowel", "near_close", "front", "rounded"),
    "ʊ": ("vowel", "near_close", "back", "rounded"),
    "e": ("vowel", "close_mid", "front", "unrounded"),
    "ø": ("vowel", "close_mid", "front", "rounded"),
    "ɘ": ("vowel", "close_mid", "central", "unrounded"),
    "ɵ": ("vowel", "close_mid", "central", "rounded"),
    "ɤ": ("vowel", "close_mid", "back", "unrounded"),
    "o": ("vowel", "close_mid", "back", "rounded"),
    "ə": ("vowel", "mid", "central", "unrounded"),
    "ɛ": ("vowel", "open_mid", "front", "unrounded"),
    "œ": ("vowel", "open_mid", "front", "rounded"),
    "ɜ": ("vowel", "open_mid", "central", "unrounded"),
    "ɞ": ("vowel", "open_mid", "central", "rounded"),
    "ʌ": ("vowel", "open_mid", "back", "unrounded"),
    "ɔ": ("vowel", "open_mid", "back", "rounded"),
    "æ": ("vowel", "near_open", "front", "unrounded"),
    "ɐ": ("vowel", "near_open", "central", "unrounded"),
    "a": ("vowel", "open", "front", "unrounded"),
    "ɶ": ("vowel", "open", "front", "rounded"),
    "ä": ("vowel", "open", "central", "unrounded"),
    "ɑ": ("vowel", "open", "back", "unrounded"),
    "ɒ": ("vowel", "open", "back", "rounded"),
}

# Read-only view; the model is never mutated at runtime
PHONEME_FEATURES: Mapping[str, tuple[str, ...]] = MappingProxyType(_FEATURES)
