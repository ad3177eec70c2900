"""
Vocabulary and phrase suggestions.

Domain context picks which synonym list a suggestion draws from: the
transcript is scored against each domain's marker list and the best-ranked
domain that defines an entry wins, falling back to the `general` list.
"""

from typing import Dict, List, Sequence

from .lexicon_loader import CategoryBlock, Lexicon
from .models import AnalysisInput, PhraseAlternative, VocabularyCategory, WordImprovement
from .scoring import contains_word, count_occurrences, find_word
from .utils import normalize_token, split_sentences, split_words, word_window

MAX_WORD_IMPROVEMENTS = 4
MAX_PHRASE_ALTERNATIVES = 4
MAX_ENHANCEMENTS = 3


def _ranked_by_hits(text: str, table: Dict[str, List[str]]) -> List[str]:
    hits = {name: count_occurrences(text, terms) for name, terms in table.items()}
    # sorted() is stable, so equal counts keep lexicon order
    return sorted((name for name, n in hits.items() if n > 0), key=lambda name: -hits[name])


def detect_domains(text: str, lexicon: Lexicon) -> List[str]:
    return _ranked_by_hits(text, lexicon.domains) or ["general"]


def extract_topics(text: str, lexicon: Lexicon) -> List[str]:
    return _ranked_by_hits(text, lexicon.topics)


def pick_for_domain(table: Dict[str, List[str]], domains: Sequence[str]) -> List[str]:
    for domain in domains:
        if domain in table:
            return list(table[domain])
    return list(table["general"])


def word_improvements(text: str, lexicon: Lexicon, domains: Sequence[str]) -> List[WordImprovement]:
    out: List[WordImprovement] = []
    for word, table in lexicon.weak_words.items():
        if len(out) >= MAX_WORD_IMPROVEMENTS:
            break
        if not contains_word(text, word):
            continue
        found = word_window(text, word)
        if found is None:
            continue
        original, context = found
        out.append(WordImprovement(
            original=original,
            suggestions=pick_for_domain(table, domains),
            context=context,
        ))
    return out


def phrase_alternatives(text: str, lexicon: Lexicon, domains: Sequence[str]) -> List[PhraseAlternative]:
    out: List[PhraseAlternative] = []
    emitted = set()
    for sentence in split_sentences(text):
        for idx, rule in enumerate(lexicon.phrases):
            if idx in emitted or len(out) >= MAX_PHRASE_ALTERNATIVES:
                continue
            for trigger in rule.triggers:
                original = find_word(sentence, trigger)
                if original:
                    out.append(PhraseAlternative(
                        original=original.rstrip(","),
                        alternatives=pick_for_domain(rule.alternatives, domains),
                        improvement=rule.improvement,
                    ))
                    emitted.add(idx)
                    break
    return out


def vocabulary_level(inp: AnalysisInput, lexicon: Lexicon) -> str:
    tokens = [t for t in (normalize_token(w) for w in split_words(inp.content_text())) if t]
    if not tokens:
        return "basic"
    levels = lexicon.vocabulary_levels
    advanced = set(levels.advanced)
    intermediate = set(levels.intermediate)
    n_adv = sum(1 for t in tokens if t in advanced)
    n_int = sum(1 for t in tokens if t in intermediate)
    if n_adv / len(tokens) >= levels.advanced_ratio:
        return "advanced"
    if (n_adv + n_int) / len(tokens) >= levels.intermediate_ratio:
        return "intermediate"
    return "basic"


def _block(name: str, block: CategoryBlock) -> VocabularyCategory:
    return VocabularyCategory(
        category=block.category or name,
        suggestions=list(block.suggestions),
        usage=block.usage,
    )


def vocabulary_enhancement(inp: AnalysisInput, lexicon: Lexicon) -> List[VocabularyCategory]:
    categories = lexicon.vocabulary_categories
    topics = [t for t in extract_topics(inp.content_text(), lexicon) if t in categories.topics]
    # the level block always makes the cut
    blocks = [_block(t, categories.topics[t]) for t in topics[:MAX_ENHANCEMENTS - 1]]
    level = vocabulary_level(inp, lexicon)
    blocks.append(_block(level, categories.levels[level]))
    return blocks
