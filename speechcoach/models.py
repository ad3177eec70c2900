import logging
import math
import re
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .scoring import clamp

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_CODE_RE = re.compile(r"`([^`]+)`")
_HEADING_RE = re.compile(r"^\s*#+\s+", re.MULTILINE)
_PERCENT_RE = re.compile(r"^\d{1,3}%$")


def _to_float(value: Any, default: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def _unit_interval(value: Any) -> float:
    return min(1.0, max(0.0, _to_float(value, 0.0)))


def _plain_text(value: Any) -> str:
    if value is None:
        return ""
    text = _TAG_RE.sub("", str(value))
    text = _HEADING_RE.sub("", _CODE_RE.sub(r"\1", _BOLD_RE.sub(r"\1", text)))
    return " ".join(text.split())


def _bounded(lo: int, hi: int):
    return BeforeValidator(lambda v: clamp(v, lo, hi))


def _capped(n: int):
    return AfterValidator(lambda items: list(items)[:n])


def _percentage(value: Any) -> str:
    text = str(value or "").strip()
    return text if _PERCENT_RE.match(text) else "0%"


UnitFloat = Annotated[float, BeforeValidator(_unit_interval)]
PlainStr = Annotated[str, BeforeValidator(_plain_text)]
PlainStrList = List[PlainStr]
Score100 = Annotated[int, _bounded(0, 100)]
Score10 = Annotated[int, _bounded(1, 10)]
Count = Annotated[int, _bounded(0, 10**9)]


# -----------------------------
# Input (ingestion boundary)
# -----------------------------


class WordTiming(BaseModel):
    text: str = ""
    start_ms: float = 0.0
    end_ms: float = 0.0
    confidence: UnitFloat = 1.0


class Sentiment(BaseModel):
    label: str = "neutral"
    confidence: UnitFloat = 0.0


DEFAULT_CONFIDENCE = 0.8


def _first(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _parse_word(raw: Any) -> Optional[WordTiming]:
    if not isinstance(raw, dict):
        return None
    text = _first(raw, "text", "word")
    if text is None:
        return None
    return WordTiming(
        text=str(text),
        start_ms=_to_float(_first(raw, "startMs", "start_ms", "start"), 0.0),
        end_ms=_to_float(_first(raw, "endMs", "end_ms", "end"), 0.0),
        confidence=_to_float(raw.get("confidence"), 1.0),
    )


def _parse_sentiment(payload: Dict[str, Any]) -> Optional[Sentiment]:
    raw = payload.get("sentiment")
    if raw is None:
        results = payload.get("sentiment_analysis_results")
        if isinstance(results, list) and results:
            raw = results[0]
    if isinstance(raw, str) and raw.strip():
        return Sentiment(label=raw.strip(), confidence=DEFAULT_CONFIDENCE)
    if isinstance(raw, dict):
        label = _first(raw, "label", "sentiment")
        if label is None or not str(label).strip():
            return None
        return Sentiment(label=str(label).strip(), confidence=_first(raw, "confidence", "score"))
    return None


class AnalysisInput(BaseModel):
    """Transcription payload with every optional field resolved to a default."""

    transcript: str = ""
    words: List[WordTiming] = Field(default_factory=list)
    duration_seconds: float = 0.0
    confidence: UnitFloat = DEFAULT_CONFIDENCE
    sentiment: Optional[Sentiment] = None
    summary: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalysisInput":
        if isinstance(payload, AnalysisInput):
            return payload
        if not isinstance(payload, dict):
            if payload is not None:
                logger.warning("Ignoring non-mapping analysis payload of type %s", type(payload).__name__)
            payload = {}

        transcript = _first(payload, "transcript", "text")
        raw_words = _first(payload, "words")
        words = [w for w in (_parse_word(r) for r in raw_words) if w is not None] if isinstance(raw_words, list) else []
        duration = _to_float(_first(payload, "durationSeconds", "duration_seconds", "duration", "audio_duration"), 0.0)
        confidence = _first(payload, "confidence")
        summary = _first(payload, "summary")
        if isinstance(summary, list):
            summary = " ".join(str(s) for s in summary)

        try:
            return cls(
                transcript=str(transcript) if transcript is not None else "",
                words=words,
                duration_seconds=max(0.0, duration),
                confidence=_to_float(confidence, DEFAULT_CONFIDENCE),
                sentiment=_parse_sentiment(payload),
                summary=str(summary).strip() if summary is not None and str(summary).strip() else None,
            )
        except ValidationError as exc:
            logger.warning("Analysis payload failed validation, using defaults: %s", exc)
            return cls()

    def tokens_source(self) -> str:
        """Text the filler/word-count heuristics read: word texts when present."""
        if self.words:
            return " ".join(w.text for w in self.words)
        return self.transcript

    def content_text(self) -> str:
        """Text the content heuristics read: the transcript, or word texts when it is blank."""
        if self.transcript.strip():
            return self.transcript
        return self.tokens_source()


# -----------------------------
# Output contract
# -----------------------------


class _Contract(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PaceAnalysis(_Contract):
    words_per_minute: Count = 0
    assessment: Literal["Slow", "GoodPace", "Fast"] = "Slow"


class FillerWords(_Contract):
    count: Count = 0
    percentage: Annotated[str, BeforeValidator(_percentage)] = "0%"
    examples: Annotated[PlainStrList, _capped(5)] = Field(default_factory=list)


class ToneAnalysis(_Contract):
    primary_tone: PlainStr = "neutral"
    confidence_level: Literal["Low", "Medium", "High"] = "Medium"
    emotions: PlainStrList = Field(default_factory=lambda: ["neutral"])


class MainPoint(_Contract):
    identified: PlainStr = ""
    clarity: Score10 = 5
    feedback: PlainStr = ""


class ArgumentStructure(_Contract):
    has_structure: bool = False
    structure: PlainStr = ""
    effectiveness: Score10 = 4
    suggestions: PlainStr = ""


class EvidenceAndExamples(_Contract):
    has_evidence: bool = False
    evidence_quality: Score10 = 4
    evidence_types: PlainStrList = Field(default_factory=list)
    suggestions: PlainStr = ""


class Persuasiveness(_Contract):
    point_proven: bool = False
    persuasion_score: Score10 = 5
    strengths: PlainStrList = Field(default_factory=list)
    weaknesses: PlainStrList = Field(default_factory=list)
    improvements: PlainStr = ""


class StarAnalysis(_Contract):
    situation: PlainStr = ""
    task: PlainStr = ""
    action: PlainStr = ""
    result: PlainStr = ""
    overall_star_score: Score10 = 2


class ContentEvaluation(_Contract):
    main_point: MainPoint = Field(default_factory=MainPoint)
    argument_structure: ArgumentStructure = Field(default_factory=ArgumentStructure)
    evidence_and_examples: EvidenceAndExamples = Field(default_factory=EvidenceAndExamples)
    persuasiveness: Persuasiveness = Field(default_factory=Persuasiveness)
    star_analysis: StarAnalysis = Field(default_factory=StarAnalysis)


class GenerativeOverride(_Contract):
    """What the generative backend may replace in a heuristic result."""

    content_evaluation: ContentEvaluation
    speech_summary: Optional[PlainStr] = None


class WordImprovement(_Contract):
    original: PlainStr
    suggestions: PlainStrList
    context: PlainStr


class PhraseAlternative(_Contract):
    original: PlainStr
    alternatives: PlainStrList
    improvement: PlainStr


class VocabularyCategory(_Contract):
    category: PlainStr
    suggestions: PlainStrList
    usage: PlainStr


class VocabularySuggestions(_Contract):
    word_improvements: Annotated[List[WordImprovement], _capped(4)] = Field(default_factory=list)
    phrase_alternatives: Annotated[List[PhraseAlternative], _capped(4)] = Field(default_factory=list)
    vocabulary_enhancement: Annotated[List[VocabularyCategory], _capped(3)] = Field(default_factory=list)


class AnalysisResult(_Contract):
    overall_score: Score100 = 0
    clarity_score: Score100 = 0
    pace_analysis: PaceAnalysis = Field(default_factory=PaceAnalysis)
    filler_words: FillerWords = Field(default_factory=FillerWords)
    tone_analysis: ToneAnalysis = Field(default_factory=ToneAnalysis)
    suggestions: Annotated[PlainStrList, _capped(5)] = Field(default_factory=list)
    strengths: Annotated[PlainStrList, _capped(4)] = Field(default_factory=list)
    content_evaluation: ContentEvaluation = Field(default_factory=ContentEvaluation)
    vocabulary_suggestions: VocabularySuggestions = Field(default_factory=VocabularySuggestions)
    speech_summary: PlainStr = ""
    transcript: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
