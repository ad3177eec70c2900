import os
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_LEXICON_PATH = os.path.join(os.path.dirname(__file__), "data", "lexicon.yml")
SUPPORTED_VERSION = 1


class LexiconError(Exception):
    pass


class ScoringConfig(BaseModel):
    slow_wpm: int = 120
    fast_wpm: int = 180
    filler_penalty: int = 10
    pace_bonus: int = 20
    structured_band: Tuple[int, int] = (6, 8)
    unstructured_band: Tuple[int, int] = (3, 5)
    evidence_band: Tuple[int, int] = (6, 8)
    no_evidence_band: Tuple[int, int] = (3, 5)
    persuasion_divisor: int = 10
    persuasion_bonus: int = 2
    point_proven_above: int = 6


class StructureTerms(BaseModel):
    intro: List[str]
    conclusion: List[str]
    transitions: List[str]
    sequence: List[str]


class EvidenceTerms(BaseModel):
    keywords: List[str]
    types: Dict[str, List[str]]
    default_type: str = "anecdotal"


class StarTerms(BaseModel):
    situation: List[str]
    task: List[str]
    action: List[str]
    result: List[str]


class FeedbackPool(BaseModel):
    present: List[str] = Field(min_length=1)
    absent: List[str] = Field(min_length=1)


class PhraseRule(BaseModel):
    triggers: List[str] = Field(min_length=1)
    alternatives: Dict[str, List[str]]
    improvement: str


class VocabularyLevels(BaseModel):
    advanced: List[str]
    intermediate: List[str]
    advanced_ratio: float = 0.05
    intermediate_ratio: float = 0.08


class CategoryBlock(BaseModel):
    category: Optional[str] = None
    suggestions: List[str]
    usage: str


class VocabularyCategories(BaseModel):
    topics: Dict[str, CategoryBlock]
    levels: Dict[str, CategoryBlock]


class Lexicon(BaseModel):
    """All keyword tables the heuristics read, loaded from one YAML asset."""

    version: int
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    fillers: List[str]
    hesitations: List[str]
    structure: StructureTerms
    emphasis: List[str]
    evidence: EvidenceTerms
    persuasive: List[str]
    star: StarTerms
    star_feedback: Dict[str, FeedbackPool]
    domains: Dict[str, List[str]]
    weak_words: Dict[str, Dict[str, List[str]]]
    phrases: List[PhraseRule]
    topics: Dict[str, List[str]]
    vocabulary_levels: VocabularyLevels
    vocabulary_categories: VocabularyCategories

    model_config = ConfigDict(frozen=True)


def _check_consistency(lexicon: Lexicon) -> None:
    for element in ("situation", "task", "action", "result"):
        if element not in lexicon.star_feedback:
            raise LexiconError(f"star_feedback is missing element '{element}'")
    for word, table in lexicon.weak_words.items():
        if "general" not in table:
            raise LexiconError(f"weak word '{word}' needs a 'general' synonym list")
    for rule in lexicon.phrases:
        if "general" not in rule.alternatives:
            raise LexiconError(f"phrase rule {rule.triggers} needs 'general' alternatives")
    for level in ("basic", "intermediate", "advanced"):
        if level not in lexicon.vocabulary_categories.levels:
            raise LexiconError(f"vocabulary_categories.levels is missing '{level}'")


def load_lexicon(path: str) -> Lexicon:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Dict[str, Any] = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise LexiconError(f"Could not read lexicon at {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise LexiconError(f"Lexicon at {path} must be a mapping")
    if raw.get("version") != SUPPORTED_VERSION:
        raise LexiconError(
            f"Unsupported lexicon version {raw.get('version')!r} (expected {SUPPORTED_VERSION})"
        )

    try:
        lexicon = Lexicon.model_validate(raw)
    except ValidationError as exc:
        raise LexiconError(f"Invalid lexicon at {path}: {exc}") from exc

    _check_consistency(lexicon)
    return lexicon


# Loaded once per process; the tables are read-only
_lexicon: Optional[Lexicon] = None


def get_lexicon() -> Lexicon:
    global _lexicon
    if _lexicon is None:
        path = os.environ.get("SPEECHCOACH_LEXICON_PATH", "").strip() or DEFAULT_LEXICON_PATH
        _lexicon = load_lexicon(path)
    return _lexicon
