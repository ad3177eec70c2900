from dataclasses import dataclass
from typing import List

from .lexicon_loader import Lexicon
from .metrics import clarity_score, filler_count, hesitation_count
from .models import AnalysisInput
from .scoring import any_term, band_score, clamp
from .utils import split_sentences, truncate

STRUCTURED_SUGGESTION = "Good structural elements present. Consider strengthening transitions."
UNSTRUCTURED_SUGGESTION = "Add clear introduction, main points, and conclusion for better structure."


@dataclass(frozen=True)
class StructureAnalysis:
    has_structure: bool
    structure: str
    effectiveness: int
    suggestions: str
    has_intro: bool = False
    has_conclusion: bool = False
    has_transitions: bool = False


@dataclass(frozen=True)
class MainPointAnalysis:
    identified: str
    clarity: int
    feedback: str


def analyze_structure(inp: AnalysisInput, lexicon: Lexicon) -> StructureAnalysis:
    text = inp.content_text()
    sentences = split_sentences(text)
    terms = lexicon.structure

    has_intro = any_term(text, terms.intro)
    has_conclusion = any_term(text, terms.conclusion)
    has_transitions = any_term(text, terms.transitions)
    has_structure = len(sentences) > 2 and (has_intro or has_conclusion or has_transitions)

    if has_intro and has_conclusion:
        label = "Structured presentation"
    elif has_transitions:
        label = "Sequential narrative"
    elif "?" in text:
        label = "Interactive discussion"
    else:
        label = "Conversational style"

    if has_structure:
        # one step per extra kind of marker used
        kinds = sum([has_intro, has_conclusion, has_transitions])
        effectiveness = band_score(lexicon.scoring.structured_band, kinds - 1)
    else:
        # longer unstructured answers still read better than fragments
        effectiveness = band_score(lexicon.scoring.unstructured_band, min(len(sentences), 3) - 1)

    return StructureAnalysis(
        has_structure=has_structure,
        structure=label,
        effectiveness=effectiveness,
        suggestions=STRUCTURED_SUGGESTION if has_structure else UNSTRUCTURED_SUGGESTION,
        has_intro=has_intro,
        has_conclusion=has_conclusion,
        has_transitions=has_transitions,
    )


def identify_main_point(sentences: List[str]) -> str:
    if not sentences:
        return "No clear main point identified"
    substantive = sorted((s for s in sentences if len(s) > 20), key=len, reverse=True)
    return truncate(substantive[0] if substantive else sentences[0], 100)


def main_point_feedback(clarity: int, filler_count: int) -> str:
    if clarity >= 8:
        return "Main point is very clear and well-articulated"
    if clarity >= 6:
        return "Main point is reasonably clear but could be more focused"
    if filler_count > 3:
        return "Reduce filler words to improve main point clarity"
    return "Main point needs to be stated more clearly and directly"


def analyze_main_point(inp: AnalysisInput, lexicon: Lexicon) -> MainPointAnalysis:
    text = inp.content_text()
    sentences = split_sentences(text)
    hesitations = hesitation_count(inp, lexicon)

    clarity = clarity_score(inp) // 10
    if any_term(text, lexicon.emphasis):
        clarity += 1
    if hesitations:
        clarity -= 1
    if len(sentences) > 3:
        clarity += 1
    clarity = clamp(clarity, 1, 10)

    return MainPointAnalysis(
        identified=identify_main_point(sentences),
        clarity=clarity,
        feedback=main_point_feedback(clarity, filler_count(inp, lexicon)),
    )
