"""Test suite for the sound-change engine."""

import pytest

from soundshift.core.types import (
    CharacterRule,
    FeatureExpression,
    FeatureReplacement,
    FeatureRule,
    SCARuleSet,
)
from soundshift.services.sca import (
    SoundChangeService,
    apply_character_rule,
    apply_feature_rule,
    apply_sound_changes,
    batch_apply_sound_changes,
    build_macros_from_inventory,
    build_rule_pattern,
    describe_rule,
    expand_context_pattern,
)

VOWELS = ["a", "e", "i", "o", "u"]


def char_rule(rule_id="r1", **fields):
    return CharacterRule(rule_id=rule_id, **fields)


def voicing_rule(rule_id="voice", **fields):
    return FeatureRule(
        rule_id=rule_id,
        target_features=FeatureExpression(positive=["stop", "voiceless"]),
        replacement_features=FeatureReplacement(set_features=["voiced"], remove_features=["voiceless"]),
        **fields,
    )


def one_set(*rules, order=0, ruleset_id="rs1"):
    return SCARuleSet(ruleset_id=ruleset_id, order=order, rules=list(rules))


class TestMacros:
    """Macro tables and context expansion."""

    def test_defaults_from_inventory(self):
        macros = build_macros_from_inventory(["p", "t"], ["a"])
        assert macros == {"V": ["a"], "C": ["p", "t"]}

    def test_user_macros_override_defaults(self):
        macros = build_macros_from_inventory(["p"], ["a"], {"V": ["i"], "N": ["m", "n"]})
        assert macros == {"V": ["i"], "C": ["p"], "N": ["m", "n"]}

    def test_members_longest_first(self):
        assert expand_context_pattern("V", {"V": ["a", "aa"]}) == "(?:aa|a)"

    def test_longer_macro_name_wins(self):
        macros = {"N": ["n"], "NV": ["m"]}
        assert expand_context_pattern("NV", macros) == "(?:m)"

    def test_expansion_is_single_pass(self):
        # "C" inside V's expansion must not be expanded again
        macros = {"V": ["C"], "C": ["p"]}
        assert expand_context_pattern("V", macros) == "(?:C)"

    def test_members_are_escaped(self):
        assert expand_context_pattern("V", {"V": ["a."]}) == r"(?:a\.)"

    def test_boundary_and_empty_untouched(self):
        assert expand_context_pattern("#", {"#": ["x"]}) == "#"
        assert expand_context_pattern("", {"V": VOWELS}) == ""

    def test_empty_macro_ignored(self):
        assert expand_context_pattern("V", {"V": []}) == "V"


class TestRulePattern:
    """Assembling target and context into one regex."""

    @pytest.mark.parametrize("before,after,expected", [
        ("", "", "p"),
        ("#", "", "^p"),
        ("", "#", r"p\Z"),
        ("#", "#", r"^p\Z"),
        ("#", "a", "^p(?=a)"),
        ("a", "#", r"(?<=a)p\Z"),
        ("a", "e", "(?<=a)p(?=e)"),
    ])
    def test_contexts(self, before, after, expected):
        assert build_rule_pattern("p", before, after) == expected

    def test_target_is_literal(self):
        assert build_rule_pattern("a.", "", "") == r"a\."


class TestCharacterRules:
    """Character-mode rules applied through apply_sound_changes."""

    def test_word_initial(self):
        rule = char_rule(target="p", replacement="b", context_before="#")
        result = apply_sound_changes("pata", [one_set(rule)], {})

        assert result.result == "bata"
        assert len(result.changelog) == 1
        step = result.changelog[0]
        assert (step.rule_id, step.before, step.after) == ("r1", "pata", "bata")
        assert step.description == "p → b"
        assert step.feature_detail is None

    def test_intervocalic_lenition(self):
        rule = char_rule(
            target="p t k", replacement="b d g",
            context_before="V", context_after="V",
            description="intervocalic voicing",
        )
        result = apply_sound_changes("apata", [one_set(rule)], {"V": VOWELS})

        assert result.result == "abada"
        assert [s.description for s in result.changelog] == ["intervocalic voicing"]

    def test_short_replacement_list_is_padded(self):
        rule = char_rule(target="p t k", replacement="f")
        assert apply_sound_changes("pataka", [one_set(rule)], {}).result == "fafafa"

    def test_empty_replacement_deletes(self):
        rule = char_rule(target="h", replacement="")
        assert apply_sound_changes("aha", [one_set(rule)], {}).result == "aa"

    def test_word_final(self):
        rule = char_rule(target="a", replacement="ə", context_after="#")
        assert apply_sound_changes("pata", [one_set(rule)], {}).result == "patə"

    def test_whole_word(self):
        rule = char_rule(target="pa", replacement="ba", context_before="#", context_after="#")
        assert apply_sound_changes("pa", [one_set(rule)], {}).result == "ba"
        assert apply_sound_changes("papa", [one_set(rule)], {}).result == "papa"

    def test_trailing_newline_is_not_word_end(self):
        final = char_rule(target="a", replacement="e", context_after="#")
        whole = char_rule(target="pa", replacement="ba", context_before="#", context_after="#")

        assert apply_sound_changes("pa\n", [one_set(final)], {}).result == "pa\n"
        assert apply_sound_changes("pa\n", [one_set(whole)], {}).result == "pa\n"
        assert apply_sound_changes("pa", [one_set(final)], {}).result == "pe"

    def test_no_rescan_of_replacement(self):
        rule = char_rule(target="a", replacement="aa")
        assert apply_sound_changes("pa", [one_set(rule)], {}).result == "paa"

    def test_replacement_is_literal(self):
        rule = char_rule(target="a", replacement=r"\1")
        assert apply_sound_changes("pa", [one_set(rule)], {}).result == "p\\1"

    def test_variable_width_lookbehind(self):
        rule = char_rule(target="p", replacement="b", context_before="V")
        result = apply_sound_changes("aapa", [one_set(rule)], {"V": ["aa", "a"]})
        assert result.result == "aaba"

    def test_exception_blocks_rule(self):
        rule = char_rule(target="p", replacement="b", exceptions=["pat"])
        assert apply_sound_changes("pata", [one_set(rule)], {}).result == "pata"
        assert apply_sound_changes("papu", [one_set(rule)], {}).result == "babu"

    def test_blank_exception_ignored(self):
        rule = char_rule(target="p", replacement="b", exceptions=[""])
        assert apply_sound_changes("pa", [one_set(rule)], {}).result == "ba"

    def test_empty_target_is_noop(self):
        outcome = apply_character_rule("pa", char_rule(target="", replacement="b"), {})
        assert not outcome.changed
        assert outcome.result == "pa"

    def test_unchanged_rule_not_logged(self):
        rule = char_rule(target="z", replacement="s")
        result = apply_sound_changes("pata", [one_set(rule)], {})
        assert result.result == "pata"
        assert result.changelog == []

    def test_malformed_context_reports_warning(self):
        broken = char_rule("broken", target="p", replacement="b", context_before="(")
        later = char_rule("later", target="t", replacement="d")
        result = apply_sound_changes("pata", [one_set(broken, later)], {})

        assert result.result == "pada"
        assert len(result.warnings) == 1
        assert "broken" in result.warnings[0]
        assert [s.rule_id for s in result.changelog] == ["later"]


class TestRuleOrdering:
    """Rule sets apply in ascending order and feed each other."""

    def test_sets_sorted_by_order(self):
        late = one_set(char_rule("b2v", target="b", replacement="v"), order=2, ruleset_id="late")
        early = one_set(char_rule("p2b", target="p", replacement="b"), order=1, ruleset_id="early")

        result = apply_sound_changes("pa", [late, early], {})

        assert result.result == "va"
        assert [(s.rule_id, s.before, s.after) for s in result.changelog] == [
            ("p2b", "pa", "ba"),
            ("b2v", "ba", "va"),
        ]

    def test_negative_order_runs_first(self):
        late = one_set(char_rule("b2v", target="b", replacement="v"), order=0, ruleset_id="late")
        early = one_set(char_rule("p2b", target="p", replacement="b"), order=-5, ruleset_id="early")

        assert apply_sound_changes("pa", [late, early], {}).result == "va"

    def test_rules_within_set_in_list_order(self):
        rs = one_set(
            char_rule("a", target="p", replacement="b"),
            char_rule("b", target="b", replacement="m"),
        )
        assert apply_sound_changes("pa", [rs], {}).result == "ma"

    def test_no_rule_sets(self):
        result = apply_sound_changes("pata", [], {})
        assert result.result == "pata"
        assert result.changelog == []
        assert result.warnings == []


class TestFeatureRules:
    """Feature-mode rules over tokenized words."""

    def test_voicing(self):
        result = apply_sound_changes("p", [one_set(voicing_rule())], {})

        assert result.result == "b"
        step = result.changelog[0]
        assert step.feature_detail == "p→b [+voiced, -voiceless]"
        assert step.description == "[+stop, +voiceless] → [+voiced, -voiceless]"

    def test_every_matching_token_changes(self):
        outcome = apply_feature_rule("pataka", voicing_rule())
        # velar resolves to U+0261, the first voiced velar stop in the model
        assert outcome.result == "badaɡa"
        assert outcome.feature_details == [
            "p→b [+voiced, -voiceless]",
            "t→d [+voiced, -voiceless]",
            "k→ɡ [+voiced, -voiceless]",
        ]

    def test_contexts(self):
        vowel = FeatureExpression(positive=["vowel"])
        rule = voicing_rule(context_before_features=vowel, context_after_features=vowel)

        assert apply_feature_rule("apa", rule).result == "aba"
        assert apply_feature_rule("pa", rule).result == "pa"
        assert apply_feature_rule("ap", rule).result == "ap"

    def test_affricate_token(self):
        rule = FeatureRule(
            rule_id="r",
            target_features=FeatureExpression(positive=["voiceless"]),
            replacement_features=FeatureReplacement(set_features=["voiced"], remove_features=["voiceless"]),
        )
        assert apply_feature_rule("atʃa", rule).result == "adʒa"

    def test_unknown_symbols_pass_through(self):
        assert apply_feature_rule("Xpa", voicing_rule()).result == "Xba"

    def test_manner_change(self):
        rule = FeatureRule(
            rule_id="nasalize",
            target_features=FeatureExpression(positive=["bilabial", "stop", "voiceless"]),
            replacement_features=FeatureReplacement(
                set_features=["nasal", "voiced"],
                remove_features=["stop", "voiceless"],
            ),
        )
        assert apply_feature_rule("pa", rule).result == "ma"

    def test_custom_inventory(self):
        # with tʃ missing from the inventory, t and ʃ are separate tokens
        outcome = apply_feature_rule("tʃa", voicing_rule(), inventory=["t", "ʃ", "a"])
        assert outcome.result == "dʃa"

    def test_exception_blocks_rule(self):
        rule = voicing_rule(exceptions=["pa"])
        assert apply_feature_rule("pa", rule).result == "pa"

    def test_incomplete_rule_is_noop(self):
        rule = FeatureRule(rule_id="draft", target_features=FeatureExpression(positive=["stop"]))
        outcome = apply_feature_rule("pa", rule)
        assert not outcome.changed
        assert outcome.result == "pa"

    def test_mixed_modes_in_one_set(self):
        rs = one_set(voicing_rule(), char_rule("b2v", target="b", replacement="v"))
        result = apply_sound_changes("pa", [rs], {})
        assert result.result == "va"
        assert result.changelog[0].feature_detail is not None
        assert result.changelog[1].feature_detail is None


class TestDescribeRule:

    def test_explicit_description_wins(self):
        assert describe_rule(char_rule(target="p", replacement="b", description="lenition")) == "lenition"

    def test_character_default(self):
        assert describe_rule(char_rule(target="p t", replacement="b d")) == "p t → b d"

    def test_feature_default(self):
        assert describe_rule(voicing_rule()) == "[+stop, +voiceless] → [+voiced, -voiceless]"


class TestBatchAndService:
    """Batch application and the service wrapper."""

    def setup_method(self):
        self.rule_sets = [one_set(char_rule(target="p", replacement="b"))]

    def test_batch(self):
        results = batch_apply_sound_changes(["pa", "ta"], self.rule_sets, {})

        assert [(r.word, r.result) for r in results] == [("pa", "ba"), ("ta", "ta")]
        assert results[0].changed
        assert not results[1].changed

    def test_batch_empty(self):
        assert batch_apply_sound_changes([], self.rule_sets, {}) == []

    def test_service(self):
        service = SoundChangeService()
        assert service.apply("pa", self.rule_sets, {}).result == "ba"
        assert [r.result for r in service.apply_batch(["pa", "pi"], self.rule_sets, {})] == ["ba", "bi"]
