"""Core type definitions for the sound-change and similarity system.

Provides immutable domain models with strict typing.
All entities are Pydantic models for validation and serialization.
"""

from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from soundshift.errors import InvalidRuleError
from soundshift.observ import get_logger

logger = get_logger(__name__)


MacroTable = dict[str, list[str]]


# ═════════════════════════════════════════════════════════════════════════════
# Feature expressions
# ═════════════════════════════════════════════════════════════════════════════

class FeatureExpression(BaseModel):
    """Feature pattern such as ``[+voiced, -stop]``."""
    model_config = ConfigDict(frozen=True)

    positive: list[str] = Field(default_factory=list)
    negative: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_disjoint(self) -> "FeatureExpression":
        overlap = set(self.positive) & set(self.negative)
        if overlap:
            raise ValueError(f"features both required and excluded: {sorted(overlap)}")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.positive and not self.negative

    def __str__(self) -> str:
        parts = [f"+{f}" for f in self.positive] + [f"-{f}" for f in self.negative]
        return f"[{', '.join(parts)}]"


class FeatureReplacement(BaseModel):
    """Features to add and subtract when rewriting a phoneme."""
    model_config = ConfigDict(frozen=True)

    set_features: list[str] = Field(default_factory=list)
    remove_features: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        parts = [f"+{f}" for f in self.set_features] + [f"-{f}" for f in self.remove_features]
        return f"[{', '.join(parts)}]"


# ═════════════════════════════════════════════════════════════════════════════
# Sound-change rules
# ═════════════════════════════════════════════════════════════════════════════

class CharacterRule(BaseModel):
    """Literal target/replacement rule with regex-built context.

    ``target`` and ``replacement`` hold whitespace-separated alternatives
    (``"p t k"`` → ``"b d g"``). ``#`` in a context is a word boundary and
    macro names expand to alternations of their members.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Literal["character"] = "character"
    rule_id: str
    description: str = ""
    target: str = ""
    replacement: str = ""
    context_before: str = ""
    context_after: str = ""
    exceptions: list[str] = Field(default_factory=list)


class FeatureRule(BaseModel):
    """Rule matching and rewriting phonemes by feature expressions.

    A rule still being authored may lack its target or replacement;
    the engine treats such a rule as a no-op.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Literal["feature"] = "feature"
    rule_id: str
    description: str = ""
    target_features: Optional[FeatureExpression] = None
    replacement_features: Optional[FeatureReplacement] = None
    context_before_features: Optional[FeatureExpression] = None
    context_after_features: Optional[FeatureExpression] = None
    exceptions: list[str] = Field(default_factory=list)


SCARule = Annotated[Union[CharacterRule, FeatureRule], Field(discriminator="mode")]

_CHARACTER_FIELDS = ("target", "replacement", "context_before", "context_after")
_FEATURE_FIELDS = (
    "target_features",
    "replacement_features",
    "context_before_features",
    "context_after_features",
)
_SHARED_FIELDS = ("rule_id", "description", "exceptions")

_RULE_ADAPTER: TypeAdapter = TypeAdapter(SCARule)


def normalize_rule_record(record: dict[str, Any]) -> dict[str, Any]:
    """Route a raw rule record to exactly one rule variant.

    Records carrying ``mode`` are passed through. Records in the flat
    ``feature_mode`` shape are routed on that flag; fields belonging to
    the other variant are dropped, with a warning when they were populated.
    """
    if "mode" in record:
        return record

    rule_id = str(record.get("rule_id", ""))
    if not rule_id:
        raise InvalidRuleError("<unnamed>", "rule_id is required")

    feature_mode = bool(record.get("feature_mode", False))
    keep, drop = (
        (_FEATURE_FIELDS, _CHARACTER_FIELDS) if feature_mode
        else (_CHARACTER_FIELDS, _FEATURE_FIELDS)
    )

    ignored = [name for name in drop if record.get(name)]
    if ignored:
        logger.warning(
            "rule_fields_ignored",
            rule_id=rule_id,
            mode="feature" if feature_mode else "character",
            ignored=ignored,
        )

    normalized = {
        name: record[name]
        for name in (*_SHARED_FIELDS, *keep)
        if record.get(name) is not None
    }
    normalized["mode"] = "feature" if feature_mode else "character"
    return normalized


def parse_rule(record: Union[dict[str, Any], CharacterRule, FeatureRule]) -> Union[CharacterRule, FeatureRule]:
    """Validate one rule record into its variant."""
    if isinstance(record, (CharacterRule, FeatureRule)):
        return record
    return _RULE_ADAPTER.validate_python(normalize_rule_record(record))


class SCARuleSet(BaseModel):
    """Ordered group of rules; sets apply in ascending ``order``."""
    model_config = ConfigDict(frozen=True)

    ruleset_id: str
    name: str = ""
    order: int = 0
    rules: list[SCARule] = Field(default_factory=list)

    @field_validator("rules", mode="before")
    @classmethod
    def _route_rule_records(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [normalize_rule_record(r) if isinstance(r, dict) else r for r in value]
        return value


class SCAConfig(BaseModel):
    """All rule sets for one language."""
    model_config = ConfigDict(frozen=True)

    language_id: str = ""
    rule_sets: list[SCARuleSet] = Field(default_factory=list)


class StepLogEntry(BaseModel):
    """One rule that changed the word."""
    model_config = ConfigDict(frozen=True)

    rule_id: str
    description: str
    before: str
    after: str
    feature_detail: Optional[str] = None


class SoundChangeResult(BaseModel):
    """Final word plus the changelog of every rule that fired."""
    model_config = ConfigDict(frozen=True)

    result: str
    changelog: list[StepLogEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class BatchResult(BaseModel):
    """Outcome of applying the rule sets to one word of a batch."""
    model_config = ConfigDict(frozen=True)

    word: str
    result: str
    changelog: list[StepLogEntry] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changelog)


# ═════════════════════════════════════════════════════════════════════════════
# Lexicon & inventory
# ═════════════════════════════════════════════════════════════════════════════

class LexiconEntry(BaseModel):
    """Lexicon entry as far as search is concerned."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    entry_id: str
    con_word_romanized: str = ""
    phonetic_ipa: str = ""
    language_id: str = ""
    tags: list[str] = Field(default_factory=list)


class SimilarityResult(BaseModel):
    """Lexicon entry paired with its normalized distance to a query."""
    model_config = ConfigDict(frozen=True)

    entry: LexiconEntry
    distance: float = Field(ge=0.0, le=1.0)


class PhonemeInventory(BaseModel):
    """Phoneme inventory of a language, as supplied by the phonology config."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    consonants: list[str] = Field(default_factory=list)
    vowels: list[str] = Field(default_factory=list)
    macros: MacroTable = Field(default_factory=dict)

    def all_phonemes(self) -> list[str]:
        return [*self.consonants, *self.vowels]

    def build_macros(self) -> MacroTable:
        """``V``/``C`` from the inventory, overridden by user-defined macros."""
        return {"V": list(self.vowels), "C": list(self.consonants), **self.macros}
