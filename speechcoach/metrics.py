from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .lexicon_loader import Lexicon
from .models import AnalysisInput
from .scoring import clamp
from .utils import normalize_token, round_half_up, split_words


@dataclass(frozen=True)
class SpeechMetrics:
    word_count: int = 0
    words_per_minute: int = 0
    assessment: str = "Slow"
    filler_count: int = 0
    filler_percentage: str = "0%"
    filler_examples: List[str] = field(default_factory=list)
    clarity_score: int = 0
    overall_score: int = 0


def word_count(inp: AnalysisInput) -> int:
    if inp.words:
        return len(inp.words)
    return len(split_words(inp.transcript))


def pace(count: int, duration_seconds: float, lexicon: Lexicon) -> Tuple[int, str]:
    if duration_seconds <= 0:
        wpm = 0
    else:
        wpm = max(0, round_half_up(count / (duration_seconds / 60.0)))
    sc = lexicon.scoring
    if wpm < sc.slow_wpm:
        assessment = "Slow"
    elif wpm > sc.fast_wpm:
        assessment = "Fast"
    else:
        assessment = "GoodPace"
    return wpm, assessment


def _tokens(inp: AnalysisInput) -> List[str]:
    return [t for t in (normalize_token(w) for w in split_words(inp.tokens_source())) if t]


def count_fillers(tokens: Sequence[str], fillers: Sequence[str]) -> Tuple[int, List[str]]:
    """
    Whole-token match for single-word fillers, consecutive-token match for
    multi-word ones. Returns (total occurrences, distinct fillers ordered by
    first appearance).
    """
    patterns = [tuple(f.lower().split()) for f in dict.fromkeys(fillers) if f.strip()]
    counter: Counter = Counter()
    first_seen: Dict[str, int] = {}
    for i in range(len(tokens)):
        for pattern in patterns:
            if tuple(tokens[i:i + len(pattern)]) == pattern:
                name = " ".join(pattern)
                counter[name] += 1
                first_seen.setdefault(name, i)
    ordered = sorted(first_seen, key=lambda name: first_seen[name])
    return int(sum(counter.values())), ordered


def filler_count(inp: AnalysisInput, lexicon: Lexicon) -> int:
    total, _ = count_fillers(_tokens(inp), lexicon.fillers)
    return total


def hesitation_count(inp: AnalysisInput, lexicon: Lexicon) -> int:
    total, _ = count_fillers(_tokens(inp), lexicon.hesitations)
    return total


def clarity_score(inp: AnalysisInput) -> int:
    return clamp(round_half_up(inp.confidence * 100), 0, 100)


def overall_score(clarity: int, filler_count: int, assessment: str, lexicon: Lexicon) -> int:
    sc = lexicon.scoring
    filler_term = clamp(100 - filler_count * sc.filler_penalty, 0, 100)
    pace_term = clamp(sc.pace_bonus if assessment == "GoodPace" else 0, 0, 100)
    return clamp(round_half_up((clamp(clarity, 0, 100) + filler_term + pace_term) / 3), 0, 100)


def compute_metrics(inp: AnalysisInput, lexicon: Lexicon) -> SpeechMetrics:
    count = word_count(inp)
    wpm, assessment = pace(count, inp.duration_seconds, lexicon)

    filler_count, distinct = count_fillers(_tokens(inp), lexicon.fillers)
    if count > 0:
        percentage = f"{clamp(round_half_up(filler_count / count * 100), 0, 100)}%"
    else:
        percentage = "0%"

    clarity = clarity_score(inp)
    return SpeechMetrics(
        word_count=count,
        words_per_minute=wpm,
        assessment=assessment,
        filler_count=filler_count,
        filler_percentage=percentage,
        filler_examples=distinct[:5],
        clarity_score=clarity,
        overall_score=overall_score(clarity, filler_count, assessment, lexicon),
    )
