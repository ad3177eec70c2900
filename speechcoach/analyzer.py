import asyncio
import logging
import os
from typing import Any, Optional

from .evidence import analyze_evidence, analyze_persuasiveness
from .feedback import general_suggestions, strengths
from .generative import BackendState, GenerationError, GenerativeBackend, build_prompt, parse_generation
from .lexicon_loader import Lexicon, get_lexicon
from .logger import timed
from .metrics import compute_metrics
from .models import (
    AnalysisInput,
    AnalysisResult,
    ArgumentStructure,
    ContentEvaluation,
    EvidenceAndExamples,
    FillerWords,
    GenerativeOverride,
    MainPoint,
    PaceAnalysis,
    Persuasiveness,
    StarAnalysis,
    ToneAnalysis,
    VocabularySuggestions,
)
from .star import map_star
from .structure import analyze_main_point, analyze_structure
from .summary import generate_summary
from .tone import analyze_tone
from .vocabulary import detect_domains, phrase_alternatives, vocabulary_enhancement, word_improvements

logger = logging.getLogger(__name__)


def _content_evaluation(inp: AnalysisInput, lexicon: Lexicon) -> ContentEvaluation:
    main_point = analyze_main_point(inp, lexicon)
    structure = analyze_structure(inp, lexicon)
    evidence = analyze_evidence(inp, lexicon)
    persuasion = analyze_persuasiveness(inp, lexicon)
    star = map_star(inp, lexicon)
    return ContentEvaluation(
        main_point=MainPoint(
            identified=main_point.identified,
            clarity=main_point.clarity,
            feedback=main_point.feedback,
        ),
        argument_structure=ArgumentStructure(
            has_structure=structure.has_structure,
            structure=structure.structure,
            effectiveness=structure.effectiveness,
            suggestions=structure.suggestions,
        ),
        evidence_and_examples=EvidenceAndExamples(
            has_evidence=evidence.has_evidence,
            evidence_quality=evidence.evidence_quality,
            evidence_types=evidence.evidence_types,
            suggestions=evidence.suggestions,
        ),
        persuasiveness=Persuasiveness(
            point_proven=persuasion.point_proven,
            persuasion_score=persuasion.persuasion_score,
            strengths=persuasion.strengths,
            weaknesses=persuasion.weaknesses,
            improvements=persuasion.improvements,
        ),
        star_analysis=StarAnalysis(
            overall_star_score=star.overall_star_score,
            **star.feedback,
        ),
    )


def _vocabulary(inp: AnalysisInput, lexicon: Lexicon) -> VocabularySuggestions:
    text = inp.content_text()
    domains = detect_domains(text, lexicon)
    return VocabularySuggestions(
        word_improvements=word_improvements(text, lexicon, domains),
        phrase_alternatives=phrase_alternatives(text, lexicon, domains),
        vocabulary_enhancement=vocabulary_enhancement(inp, lexicon),
    )


def build_result(inp: AnalysisInput, lexicon: Lexicon) -> AnalysisResult:
    """Run every heuristic component over one normalized input."""
    with timed("Metrics"):
        metrics = compute_metrics(inp, lexicon)
        tone = analyze_tone(inp)
    with timed("Content evaluation"):
        evaluation = _content_evaluation(inp, lexicon)
    with timed("Vocabulary"):
        vocabulary = _vocabulary(inp, lexicon)
    with timed("Summary"):
        summary = generate_summary(inp, lexicon)

    return AnalysisResult(
        overall_score=metrics.overall_score,
        clarity_score=metrics.clarity_score,
        pace_analysis=PaceAnalysis(
            words_per_minute=metrics.words_per_minute,
            assessment=metrics.assessment,
        ),
        filler_words=FillerWords(
            count=metrics.filler_count,
            percentage=metrics.filler_percentage,
            examples=metrics.filler_examples,
        ),
        tone_analysis=ToneAnalysis(
            primary_tone=tone.primary_tone,
            confidence_level=tone.confidence_level,
            emotions=tone.emotions,
        ),
        suggestions=general_suggestions(inp, metrics, lexicon),
        strengths=strengths(inp, metrics, lexicon),
        content_evaluation=evaluation,
        vocabulary_suggestions=vocabulary,
        speech_summary=summary,
        transcript=inp.transcript,
    )


def _safe_build(inp: AnalysisInput, lexicon: Lexicon) -> AnalysisResult:
    try:
        return build_result(inp, lexicon)
    except Exception:
        logger.exception("Heuristic analysis failed; returning an empty report")
        return AnalysisResult(transcript=inp.transcript)


def analyze_speech(payload: Any, lexicon: Optional[Lexicon] = None) -> AnalysisResult:
    """Heuristic-only analysis of one transcription payload."""
    lexicon = lexicon or get_lexicon()
    return _safe_build(AnalysisInput.from_payload(payload), lexicon)


class SpeechAnalyzer:
    """
    Heuristic analysis with an optional generative backend layered on top.

    When a backend is attached and loads, its content evaluation and summary
    replace the heuristic ones. Anything going wrong on that path leaves the
    heuristic report as the answer.
    """

    def __init__(self, backend: Optional[GenerativeBackend] = None, lexicon: Optional[Lexicon] = None):
        self.backend = backend
        self.lexicon = lexicon or get_lexicon()

    @classmethod
    def from_env(cls) -> "SpeechAnalyzer":
        backend = None
        if os.environ.get("USE_GENERATIVE_BACKEND", "false").lower() == "true":
            backend = GenerativeBackend()
        return cls(backend=backend)

    def analyze_heuristic(self, payload: Any) -> AnalysisResult:
        return _safe_build(AnalysisInput.from_payload(payload), self.lexicon)

    async def analyze(self, payload: Any, timeout: Optional[float] = None) -> AnalysisResult:
        inp = AnalysisInput.from_payload(payload)
        result = _safe_build(inp, self.lexicon)
        if self.backend is None:
            return result

        try:
            override = await asyncio.wait_for(self._generate(inp, result), timeout)
        except asyncio.TimeoutError:
            logger.warning("Generative backend timed out after %ss; keeping heuristic report", timeout)
            return result
        except GenerationError as exc:
            logger.warning("Generative output unusable: %s", exc)
            return result
        except Exception as exc:
            logger.warning("Generative analysis failed: %s", exc)
            return result

        if override is None:
            return result
        return result.model_copy(update={
            "content_evaluation": override.content_evaluation,
            # an upstream summary always wins; result already holds it cleaned
            "speech_summary": result.speech_summary if inp.summary else (override.speech_summary or result.speech_summary),
        })

    async def _generate(self, inp: AnalysisInput, heuristic: AnalysisResult) -> Optional[GenerativeOverride]:
        state = await self.backend.init()
        if state is not BackendState.READY:
            return None
        with timed("Generative backend"):
            text = await self.backend.generate(build_prompt(inp.content_text(), heuristic))
        return parse_generation(text, base=heuristic.content_evaluation)
