"""
STAR (Situation / Task / Action / Result) mapping.

Each element is present when any of its lexicon terms appears. Feedback text is
drawn from a small fixed pool per element and presence state; the variant is
chosen by a hash of the transcript so identical input always reads the same.
"""

from dataclasses import dataclass
from typing import Dict

from .lexicon_loader import Lexicon
from .models import AnalysisInput
from .scoring import any_term, clamp
from .utils import round_half_up, stable_hash

STAR_ELEMENTS = ("situation", "task", "action", "result")


@dataclass(frozen=True)
class StarMapping:
    presence: Dict[str, bool]
    feedback: Dict[str, str]
    overall_star_score: int

    @property
    def present_count(self) -> int:
        return sum(1 for v in self.presence.values() if v)


def star_score(present_count: int) -> int:
    return clamp(round_half_up(present_count / 4 * 6) + 2, 1, 10)


def pick_feedback(lexicon: Lexicon, element: str, present: bool, transcript: str) -> str:
    pool = lexicon.star_feedback[element]
    variants = pool.present if present else pool.absent
    return variants[stable_hash(transcript, element) % len(variants)]


def map_star(inp: AnalysisInput, lexicon: Lexicon) -> StarMapping:
    text = inp.content_text()
    presence = {e: any_term(text, getattr(lexicon.star, e)) for e in STAR_ELEMENTS}
    feedback = {e: pick_feedback(lexicon, e, presence[e], text) for e in STAR_ELEMENTS}
    return StarMapping(
        presence=presence,
        feedback=feedback,
        overall_star_score=star_score(sum(presence.values())),
    )
