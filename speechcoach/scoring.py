import math
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

# -----------------------------
# Term matching
# -----------------------------


@lru_cache(maxsize=1024)
def _term_re(term: str, whole_word: bool) -> "re.Pattern[str]":
    body = r"\s+".join(re.escape(part) for part in term.lower().split())
    tail = r"(?![a-z0-9])" if whole_word else ""
    return re.compile(r"(?<![a-z0-9])" + body + tail, re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    """
    True if `term` starts at a word boundary in `text` (so "examples" hits
    "example" but "showcase" does not hit "case"). Case-insensitive.
    """
    if not text or not term.strip():
        return False
    return _term_re(term, False).search(text) is not None


def contains_word(text: str, term: str) -> bool:
    """Whole-word variant of contains_term."""
    if not text or not term.strip():
        return False
    return _term_re(term, True).search(text) is not None


def find_word(text: str, term: str) -> Optional[str]:
    """First whole-word occurrence of term, as written in text."""
    if not text or not term.strip():
        return None
    m = _term_re(term, True).search(text)
    return m.group(0) if m else None


def matched_terms(text: str, terms: Iterable[str]) -> List[str]:
    """Distinct lexicon terms present in text, in lexicon order."""
    return [t for t in dict.fromkeys(terms) if contains_term(text, t)]


def count_occurrences(text: str, terms: Iterable[str]) -> int:
    if not text:
        return 0
    return sum(len(_term_re(t, False).findall(text)) for t in dict.fromkeys(terms) if t.strip())


def any_term(text: str, terms: Sequence[str]) -> bool:
    return any(contains_term(text, t) for t in terms)


# -----------------------------
# Bounded scores
# -----------------------------


def clamp(value, lo: int, hi: int) -> int:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return lo
    if math.isnan(v):
        return lo
    return int(max(lo, min(hi, v)))


def band_score(band: Tuple[int, int], signal: int) -> int:
    """
    Deterministic score inside [low, high]: the band floor plus one step per
    unit of input signal (marker kinds, evidence hits, ...), capped at high.
    """
    low, high = band
    return clamp(low + max(0, int(signal)), low, high)
