import hashlib
import math
import re
from typing import List, Optional, Tuple

SENT_SPLIT_RE = re.compile(r"[.!?]+")
WORD_RE = re.compile(r"\S+")
EDGE_PUNCT = ",.!?;:\"'()[]{}"


def split_sentences(text: str) -> List[str]:
    """Split on terminal punctuation; empty fragments are dropped."""
    parts = SENT_SPLIT_RE.split(text or "")
    return [p.strip() for p in parts if p.strip()]


def split_words(text: str) -> List[str]:
    return WORD_RE.findall(text or "")


def normalize_token(raw: str) -> str:
    return str(raw or "").lower().strip().strip(EDGE_PUNCT)


def word_window(text: str, term: str, radius: int = 3) -> Optional[Tuple[str, str]]:
    """
    Locate the first whole-word occurrence of `term` (single or multi word)
    and return (original_casing, surrounding window of +/- radius words).
    """
    words = split_words(text)
    target = [t for t in term.lower().split() if t]
    if not words or not target:
        return None
    normalized = [normalize_token(w) for w in words]
    span = len(target)
    for i in range(len(normalized) - span + 1):
        if normalized[i:i + span] == target:
            original = " ".join(w.strip(EDGE_PUNCT) for w in words[i:i + span])
            lo = max(0, i - radius)
            hi = min(len(words), i + span + radius)
            return original, " ".join(words[lo:hi])
    return None


def truncate(text: str, max_len: int) -> str:
    value = (text or "").strip()
    if len(value) <= max_len:
        return value
    return value[:max_len].rstrip() + "..."


def truncate_center(text: str, max_len: int) -> str:
    """Keep head+tail so the opening and closing of a speech survive."""
    if not text or len(text) <= max_len:
        return text or ""
    head = max_len * 2 // 3
    tail = max_len - head
    return text[:head] + "\n...\n" + text[-tail:]


def stable_hash(*parts: str) -> int:
    h = hashlib.sha256("::".join(p or "" for p in parts).encode("utf-8")).hexdigest()
    return int(h[:12], 16)


def round_half_up(value: float) -> int:
    if value is None or not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))
