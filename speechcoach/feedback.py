from typing import List

from .lexicon_loader import Lexicon
from .metrics import SpeechMetrics
from .models import AnalysisInput
from .scoring import any_term

MAX_SUGGESTIONS = 5
MAX_STRENGTHS = 4


def general_suggestions(inp: AnalysisInput, metrics: SpeechMetrics, lexicon: Lexicon) -> List[str]:
    text = inp.content_text()
    sc = lexicon.scoring
    out: List[str] = []

    if metrics.words_per_minute < sc.slow_wpm:
        out.append("Consider speaking at a slightly faster pace to maintain audience engagement")
    elif metrics.words_per_minute > sc.fast_wpm:
        out.append("Slow down your speech pace to improve clarity and comprehension")
    else:
        out.append("Your speaking pace is well-balanced and engaging")

    if metrics.filler_count > 3:
        out.append('Work on reducing filler words like "um" and "uh" for more professional delivery')
    elif metrics.filler_count > 0:
        out.append("Good job minimizing filler words - continue this practice")
    else:
        out.append("Excellent! No filler words detected in your speech")

    if any_term(text, lexicon.evidence.keywords):
        out.append("Good use of evidence and examples to support your arguments")
    else:
        out.append("Consider adding specific examples, data, or case studies to strengthen your points")

    if metrics.clarity_score < 80:
        out.append("Focus on clear articulation and pronunciation for better understanding")
    else:
        out.append("Your speech clarity is excellent - maintain this level")

    if any_term(text, lexicon.structure.sequence):
        out.append("Good use of structure and transitions in your speech")
    else:
        out.append("Consider adding transition words to improve the flow of your speech")

    return out[:MAX_SUGGESTIONS]


def strengths(inp: AnalysisInput, metrics: SpeechMetrics, lexicon: Lexicon) -> List[str]:
    text = inp.content_text()
    out: List[str] = []
    if metrics.clarity_score > 85:
        out.append("Excellent speech clarity and articulation")
    if metrics.assessment == "GoodPace":
        out.append("Well-balanced speaking pace")
    if metrics.filler_count <= 2:
        out.append("Minimal use of filler words")
    if any_term(text, lexicon.evidence.keywords):
        out.append("Good use of evidence and examples")
    if any_term(text, lexicon.structure.sequence):
        out.append("Clear speech structure with good transitions")
    if not out:
        out.append("Good overall communication effort")
    return out[:MAX_STRENGTHS]
