from dataclasses import dataclass
from typing import List

from .lexicon_loader import Lexicon
from .metrics import compute_metrics, hesitation_count
from .models import AnalysisInput
from .scoring import any_term, band_score, clamp, matched_terms
from .utils import split_sentences

EVIDENCE_PRESENT = "Evidence present but could be more specific and quantified."
EVIDENCE_ABSENT = "Add concrete examples, data, or case studies to support your points."
PROVEN_IMPROVEMENT = "Strong foundation - enhance with more specific evidence."
UNPROVEN_IMPROVEMENT = "Strengthen your argument with clear evidence and confident language."


@dataclass(frozen=True)
class EvidenceAnalysis:
    has_evidence: bool
    evidence_quality: int
    evidence_types: List[str]
    suggestions: str


@dataclass(frozen=True)
class PersuasionAnalysis:
    point_proven: bool
    persuasion_score: int
    strengths: List[str]
    weaknesses: List[str]
    improvements: str


def analyze_evidence(inp: AnalysisInput, lexicon: Lexicon) -> EvidenceAnalysis:
    text = inp.content_text()
    hits = matched_terms(text, lexicon.evidence.keywords)
    has_evidence = bool(hits)

    types = [name for name, terms in lexicon.evidence.types.items() if any_term(text, terms)]
    if not types:
        types = [lexicon.evidence.default_type]

    sc = lexicon.scoring
    if has_evidence:
        quality = band_score(sc.evidence_band, len(hits) - 1)
    else:
        quality = band_score(sc.no_evidence_band, min(len(split_sentences(text)), 3) - 1)

    return EvidenceAnalysis(
        has_evidence=has_evidence,
        evidence_quality=quality,
        evidence_types=types,
        suggestions=EVIDENCE_PRESENT if has_evidence else EVIDENCE_ABSENT,
    )


def analyze_persuasiveness(inp: AnalysisInput, lexicon: Lexicon) -> PersuasionAnalysis:
    text = inp.content_text()
    sc = lexicon.scoring
    persuasive = any_term(text, lexicon.persuasive)
    has_evidence = any_term(text, lexicon.evidence.keywords)
    hesitant = hesitation_count(inp, lexicon) > 0
    sentence_count = len(split_sentences(text))

    overall = compute_metrics(inp, lexicon).overall_score
    score = clamp(overall // sc.persuasion_divisor + (sc.persuasion_bonus if persuasive else 0), 1, 10)
    proven = score > sc.point_proven_above

    strengths: List[str] = []
    if len(text.strip()) > 100:
        strengths.append("Sufficient detail provided")
    if not hesitant:
        strengths.append("Clear articulation")
    if persuasive:
        strengths.append("Uses persuasive language")
    if has_evidence:
        strengths.append("Well-supported arguments")
    if not strengths:
        strengths.append("Conversational tone")

    weaknesses: List[str] = []
    if hesitant:
        weaknesses.append("Contains filler words")
    if not persuasive:
        weaknesses.append("Could use stronger persuasive language")
    if sentence_count < 2:
        weaknesses.append("Needs more detailed explanation")
    if not has_evidence:
        weaknesses.append("Needs more supporting evidence")

    return PersuasionAnalysis(
        point_proven=proven,
        persuasion_score=score,
        strengths=strengths[:3],
        weaknesses=weaknesses[:3],
        improvements=PROVEN_IMPROVEMENT if proven else UNPROVEN_IMPROVEMENT,
    )
