from speechcoach.lexicon_loader import DEFAULT_LEXICON_PATH, load_lexicon
from speechcoach.models import AnalysisInput
from speechcoach.structure import (
    STRUCTURED_SUGGESTION,
    UNSTRUCTURED_SUGGESTION,
    analyze_main_point,
    analyze_structure,
)

LEX = load_lexicon(DEFAULT_LEXICON_PATH)


def _inp(text, **extra):
    return AnalysisInput.from_payload({"transcript": text, **extra})


def test_structured_presentation():
    s = analyze_structure(_inp(
        "First, we looked at the numbers. Then we built a prototype. Finally, we shipped it."
    ), LEX)
    assert s.has_structure
    assert s.structure == "Structured presentation"
    assert s.effectiveness == 8
    assert s.suggestions == STRUCTURED_SUGGESTION


def test_sequential_narrative():
    s = analyze_structure(_inp("We met. Then we talked for hours. It went on and on."), LEX)
    assert s.has_structure
    assert s.structure == "Sequential narrative"
    assert s.effectiveness == 6


def test_markers_need_more_than_two_sentences():
    s = analyze_structure(_inp("First we met. Finally we left."), LEX)
    assert not s.has_structure
    assert s.structure == "Structured presentation"
    assert s.effectiveness == 4
    assert s.suggestions == UNSTRUCTURED_SUGGESTION


def test_interactive_discussion():
    s = analyze_structure(_inp("What do you think? I am not sure."), LEX)
    assert s.structure == "Interactive discussion"
    assert not s.has_structure
    assert 3 <= s.effectiveness <= 5


def test_empty_structure():
    s = analyze_structure(_inp(""), LEX)
    assert s.structure == "Conversational style"
    assert s.effectiveness == 3


def test_main_point_is_longest_sentence():
    mp = analyze_main_point(_inp("Short one. This sentence is definitely the longest of them all."), LEX)
    assert mp.identified == "This sentence is definitely the longest of them all"
    assert mp.clarity == 8
    assert mp.feedback == "Main point is very clear and well-articulated"


def test_main_point_penalizes_hesitation():
    mp = analyze_main_point(_inp("Um I guess. It was, um, fine.", confidence=0.5), LEX)
    assert mp.identified == "Um I guess"
    assert mp.clarity == 4
    assert mp.feedback == "Main point needs to be stated more clearly and directly"


def test_main_point_truncates_and_handles_empty():
    long_sentence = "word " * 40
    mp = analyze_main_point(_inp(long_sentence), LEX)
    assert mp.identified.endswith("...")
    assert len(mp.identified) <= 103
    assert analyze_main_point(_inp(""), LEX).identified == "No clear main point identified"


def test_sentence_bonus_counts_only_non_empty_sentences():
    # a trailing terminator does not add a fourth sentence
    three = analyze_main_point(_inp("We met. We talked. We left.", confidence=0.8), LEX)
    four = analyze_main_point(_inp("We met. We talked. We left. We slept.", confidence=0.8), LEX)
    assert three.clarity == 8
    assert four.clarity == 9


def test_blank_transcript_reads_word_texts():
    words = [{"text": w} for w in "First we met. Then we talked. Finally we left.".split()]
    s = analyze_structure(_inp("", words=words), LEX)
    assert s.has_structure
    assert s.structure == "Structured presentation"
