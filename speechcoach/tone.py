from dataclasses import dataclass, field
from typing import List

from .models import AnalysisInput


@dataclass(frozen=True)
class Tone:
    primary_tone: str = "neutral"
    confidence_level: str = "Medium"
    emotions: List[str] = field(default_factory=lambda: ["neutral"])


def confidence_level(confidence: float) -> str:
    if confidence >= 0.8:
        return "High"
    if confidence >= 0.5:
        return "Medium"
    return "Low"


def analyze_tone(inp: AnalysisInput) -> Tone:
    # Tone comes from upstream sentiment; without it, fall back to how sure
    # the transcription itself was.
    if inp.sentiment is None:
        return Tone(confidence_level=confidence_level(inp.confidence))
    label = inp.sentiment.label.strip().lower() or "neutral"
    return Tone(
        primary_tone=label,
        confidence_level=confidence_level(inp.sentiment.confidence),
        emotions=[label],
    )
