"""Sound-change application service.

Applies ordered rule sets to word forms. Rules come in two modes:

- character: literal targets replaced inside a regex built from the
  rule's context, with ``#`` as word boundary and macros (``V``, ``C``, ...)
  expanded to alternations
- feature: phonemes matched and rewritten by feature expressions over
  the tokenized word

Each rule transforms the current word once, left to right; rules that
change nothing leave no trace in the changelog.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

import regex

from soundshift.core.contracts import ISoundChanger
from soundshift.core.types import (
    BatchResult,
    CharacterRule,
    FeatureRule,
    MacroTable,
    SCARuleSet,
    SoundChangeResult,
    StepLogEntry,
)
from soundshift.errors import MalformedPatternError
from soundshift.observ import get_logger, timed
from soundshift.services.features import FeatureIndex, get_feature_index
from soundshift.services.tokenizer import join_phonemes, tokenize

logger = get_logger(__name__)

WORD_BOUNDARY = "#"


@dataclass
class RuleOutcome:
    """Result of applying a single rule to a word."""
    result: str
    changed: bool
    feature_details: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════════════
# Macros & pattern construction
# ═════════════════════════════════════════════════════════════════════════════

def build_macros_from_inventory(
    consonants: Iterable[str],
    vowels: Iterable[str],
    extra_macros: Optional[MacroTable] = None,
) -> MacroTable:
    """Default ``V``/``C`` macros, overridable by user-defined ones."""
    macros: MacroTable = {"V": list(vowels), "C": list(consonants)}
    macros.update(extra_macros or {})
    return macros


def expand_context_pattern(pattern: str, macros: MacroTable) -> str:
    """Replace macro names in a context with non-capturing alternations.

    Members are escaped and ordered longest first. Everything else in the
    context is kept as regex syntax. A bare ``#`` is returned untouched.
    """
    if not pattern or pattern == WORD_BOUNDARY:
        return pattern

    expansions = {
        name: "(?:" + "|".join(
            regex.escape(member)
            for member in sorted(members, key=len, reverse=True)
        ) + ")"
        for name, members in macros.items()
        if name and members
    }
    if not expansions:
        return pattern

    names = sorted(expansions, key=len, reverse=True)
    name_pattern = regex.compile("|".join(regex.escape(n) for n in names))
    return name_pattern.sub(lambda m: expansions[m.group(0)], pattern)


def build_rule_pattern(target: str, before: str, after: str) -> str:
    """Combine an escaped target with already-expanded contexts."""
    escaped = regex.escape(target)

    if before == WORD_BOUNDARY and after == WORD_BOUNDARY:
        return rf"^{escaped}\Z"
    if before == WORD_BOUNDARY:
        return f"^{escaped}(?={after})" if after else f"^{escaped}"
    if after == WORD_BOUNDARY:
        return rf"(?<={before}){escaped}\Z" if before else rf"{escaped}\Z"

    lookbehind = f"(?<={before})" if before else ""
    lookahead = f"(?={after})" if after else ""
    return f"{lookbehind}{escaped}{lookahead}"


def _compile(pattern: str, rule_id: str) -> "regex.Pattern":
    try:
        return regex.compile(pattern)
    except regex.error as e:
        raise MalformedPatternError(pattern, rule_id, str(e)) from e


def _has_exception(word: str, exceptions: Iterable[str]) -> bool:
    return any(ex in word for ex in exceptions if ex)


# ═════════════════════════════════════════════════════════════════════════════
# Rule application
# ═════════════════════════════════════════════════════════════════════════════

def apply_character_rule(word: str, rule: CharacterRule, macros: MacroTable) -> RuleOutcome:
    """Apply each target/replacement pair of a character-mode rule in turn."""
    targets = rule.target.split()
    replacements = rule.replacement.split()
    outcome = RuleOutcome(result=word, changed=False)

    if not targets:
        return outcome

    while len(replacements) < len(targets):
        replacements.append(replacements[-1] if replacements else "")

    before = expand_context_pattern(rule.context_before, macros)
    after = expand_context_pattern(rule.context_after, macros)

    for target, replacement in zip(targets, replacements):
        if _has_exception(outcome.result, rule.exceptions):
            continue

        pattern = build_rule_pattern(target, before, after)
        try:
            compiled = _compile(pattern, rule.rule_id)
        except MalformedPatternError as e:
            logger.warning(
                "sca_pattern_invalid",
                rule_id=rule.rule_id,
                pattern=pattern,
                reason=e.context.get("reason"),
            )
            outcome.warnings.append(e.message)
            continue

        new_result = compiled.sub(lambda _m, r=replacement: r, outcome.result)
        if new_result != outcome.result:
            outcome.changed = True
            outcome.result = new_result

    return outcome


def apply_feature_rule(
    word: str,
    rule: FeatureRule,
    inventory: Optional[list[str]] = None,
    index: Optional[FeatureIndex] = None,
) -> RuleOutcome:
    """Rewrite every token matching the rule's feature target in context."""
    if rule.target_features is None or rule.replacement_features is None:
        return RuleOutcome(result=word, changed=False)

    index = index or get_feature_index()
    known = inventory if inventory else index.phonemes
    tokens = tokenize(word, known)
    result_tokens = list(tokens)
    details: list[str] = []

    before_expr = rule.context_before_features
    after_expr = rule.context_after_features
    replacement = rule.replacement_features

    for i, token in enumerate(tokens):
        if not index.matches(token, rule.target_features):
            continue

        if before_expr is not None and not before_expr.is_empty:
            if i == 0 or not index.matches(tokens[i - 1], before_expr):
                continue

        if after_expr is not None and not after_expr.is_empty:
            if i == len(tokens) - 1 or not index.matches(tokens[i + 1], after_expr):
                continue

        if _has_exception(word, rule.exceptions):
            continue

        new_phoneme = index.apply_feature_replacement(token, replacement)
        if new_phoneme != token:
            applied = ", ".join(filter(None, [
                ",".join(f"+{f}" for f in replacement.set_features),
                ",".join(f"-{f}" for f in replacement.remove_features),
            ]))
            details.append(f"{token}→{new_phoneme} [{applied}]")
            result_tokens[i] = new_phoneme

    return RuleOutcome(
        result=join_phonemes(result_tokens),
        changed=bool(details),
        feature_details=details,
    )


def apply_rule(
    word: str,
    rule: Union[CharacterRule, FeatureRule],
    macros: MacroTable,
    inventory: Optional[list[str]] = None,
    index: Optional[FeatureIndex] = None,
) -> RuleOutcome:
    """Route a rule to its mode's implementation."""
    if isinstance(rule, FeatureRule):
        return apply_feature_rule(word, rule, inventory, index)
    return apply_character_rule(word, rule, macros)


def describe_rule(rule: Union[CharacterRule, FeatureRule]) -> str:
    if rule.description:
        return rule.description
    if isinstance(rule, FeatureRule):
        return f"{rule.target_features} → {rule.replacement_features}"
    return f"{rule.target} → {rule.replacement}"


def apply_sound_changes(
    word: str,
    rule_sets: Iterable[SCARuleSet],
    macros: MacroTable,
    inventory: Optional[list[str]] = None,
    index: Optional[FeatureIndex] = None,
) -> SoundChangeResult:
    """Apply rule sets in ascending ``order`` and log every change.

    Later rule sets always see the output of earlier ones.
    """
    changelog: list[StepLogEntry] = []
    warnings: list[str] = []
    current = word

    for rule_set in sorted(rule_sets, key=lambda rs: rs.order):
        for rule in rule_set.rules:
            outcome = apply_rule(current, rule, macros, inventory, index)
            warnings.extend(outcome.warnings)
            if not outcome.changed:
                continue

            changelog.append(StepLogEntry(
                rule_id=rule.rule_id,
                description=describe_rule(rule),
                before=current,
                after=outcome.result,
                feature_detail="; ".join(outcome.feature_details) or None,
            ))
            logger.debug(
                "sca_rule_applied",
                rule_id=rule.rule_id,
                ruleset_id=rule_set.ruleset_id,
                before=current,
                after=outcome.result,
            )
            current = outcome.result

    return SoundChangeResult(result=current, changelog=changelog, warnings=warnings)


@timed(logger)
def batch_apply_sound_changes(
    words: Iterable[str],
    rule_sets: Iterable[SCARuleSet],
    macros: MacroTable,
    inventory: Optional[list[str]] = None,
    index: Optional[FeatureIndex] = None,
) -> list[BatchResult]:
    """Apply the same rule sets to many words."""
    ordered = sorted(rule_sets, key=lambda rs: rs.order)
    results = []
    for word in words:
        outcome = apply_sound_changes(word, ordered, macros, inventory, index)
        results.append(BatchResult(word=word, result=outcome.result, changelog=outcome.changelog))
    return results


class SoundChangeService(ISoundChanger):
    """Applies sound changes against a shared feature index."""

    def __init__(self, index: Optional[FeatureIndex] = None):
        self._index = index or get_feature_index()

    def apply(
        self,
        word: str,
        rule_sets: list[SCARuleSet],
        macros: MacroTable,
        inventory: Optional[list[str]] = None,
    ) -> SoundChangeResult:
        return apply_sound_changes(word, rule_sets, macros, inventory, self._index)

    def apply_batch(
        self,
        words: Iterable[str],
        rule_sets: list[SCARuleSet],
        macros: MacroTable,
        inventory: Optional[list[str]] = None,
    ) -> list[BatchResult]:
        return batch_apply_sound_changes(words, rule_sets, macros, inventory, self._index)
