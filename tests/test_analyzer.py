from speechcoach.analyzer import SpeechAnalyzer, analyze_speech
from speechcoach.lexicon_loader import DEFAULT_LEXICON_PATH, load_lexicon
from speechcoach.summary import EMPTY_SUMMARY

LEX = load_lexicon(DEFAULT_LEXICON_PATH)

SAMPLES = [
    None,
    {},
    {"transcript": "", "words": [], "durationSeconds": 0},
    {"transcript": "um " * 40, "durationSeconds": 1, "confidence": 3},
    {"text": "First, the project goal. Then we implemented it. Finally the result was a success!",
     "audio_duration": "abc", "confidence": -2, "words": "nope"},
    {"transcript": "I think we should improve performance of the api. " * 30, "durationSeconds": 45,
     "sentiment": {"label": "POSITIVE", "confidence": 0.99}, "summary": None},
]


def _assert_in_ranges(r):
    assert 0 <= r.overall_score <= 100
    assert 0 <= r.clarity_score <= 100
    assert r.pace_analysis.words_per_minute >= 0
    assert r.filler_words.count >= 0
    assert r.filler_words.percentage.endswith("%")
    assert set(r.filler_words.examples) <= set(LEX.fillers)
    assert len(r.suggestions) <= 5 and len(r.strengths) <= 4
    ce = r.content_evaluation
    for score in (
        ce.main_point.clarity,
        ce.argument_structure.effectiveness,
        ce.evidence_and_examples.evidence_quality,
        ce.persuasiveness.persuasion_score,
        ce.star_analysis.overall_star_score,
    ):
        assert 1 <= score <= 10
    vs = r.vocabulary_suggestions
    assert len(vs.word_improvements) <= 4
    assert len(vs.phrase_alternatives) <= 4
    assert len(vs.vocabulary_enhancement) <= 3


def test_every_sample_stays_in_range():
    for payload in SAMPLES:
        _assert_in_ranges(analyze_speech(payload, lexicon=LEX))


def test_heuristic_pipeline_is_idempotent():
    for payload in SAMPLES:
        assert analyze_speech(payload, lexicon=LEX) == analyze_speech(payload, lexicon=LEX)


def test_empty_transcript():
    r = analyze_speech({"transcript": "", "words": [], "durationSeconds": 0}, lexicon=LEX)
    assert r.pace_analysis.words_per_minute == 0
    assert r.filler_words.count == 0
    assert r.overall_score == 60
    assert r.speech_summary == EMPTY_SUMMARY
    assert r.transcript == ""


def test_technical_think_suggestion():
    r = analyze_speech({
        "transcript": "I think we should improve performance. The api and database are slow.",
        "durationSeconds": 10,
    }, lexicon=LEX)
    think = [w for w in r.vocabulary_suggestions.word_improvements if w.original.lower() == "think"]
    assert think[0].suggestions == LEX.weak_words["think"]["technical"]


def test_no_star_terms():
    r = analyze_speech({"transcript": "I like turtles."}, lexicon=LEX)
    star = r.content_evaluation.star_analysis
    assert star.overall_star_score == 2
    assert star.situation in LEX.star_feedback["situation"].absent
    assert star.task in LEX.star_feedback["task"].absent
    assert star.action in LEX.star_feedback["action"].absent
    assert star.result in LEX.star_feedback["result"].absent


def test_upstream_summary_and_sentiment_flow_through():
    r = analyze_speech({
        "transcript": "We shipped the release.",
        "summary": "A short update on the release.",
        "sentiment": {"label": "NEGATIVE", "confidence": 0.2},
    }, lexicon=LEX)
    assert r.speech_summary == "A short update on the release."
    assert r.tone_analysis.primary_tone == "negative"
    assert r.tone_analysis.confidence_level == "Low"


def test_payload_round_trip_keys():
    payload = analyze_speech({"transcript": "Hello there."}, lexicon=LEX).to_payload()
    assert set(payload) == {
        "overallScore", "clarityScore", "paceAnalysis", "fillerWords", "toneAnalysis",
        "suggestions", "strengths", "contentEvaluation", "vocabularySuggestions",
        "speechSummary", "transcript",
    }
    assert set(payload["contentEvaluation"]) == {
        "mainPoint", "argumentStructure", "evidenceAndExamples", "persuasiveness", "starAnalysis",
    }


def test_analyzer_without_backend_matches_heuristic():
    analyzer = SpeechAnalyzer(lexicon=LEX)
    payload = {"transcript": "First we met. Then we talked. Finally we agreed."}
    assert analyzer.analyze_heuristic(payload) == analyze_speech(payload, lexicon=LEX)


def test_main_point_keeps_comparison_signs():
    text = "Latency stayed < 5 ms for users > 90 percent of the time in the study."
    mp = analyze_speech({"transcript": text}, lexicon=LEX).content_evaluation.main_point
    assert mp.identified == "Latency stayed < 5 ms for users > 90 percent of the time in the study"


def test_blank_transcript_falls_back_to_word_texts():
    words = [{"text": w} for w in "First we gathered the survey data. Then we shipped it. Finally it worked.".split()]
    r = analyze_speech({"transcript": "", "words": words, "durationSeconds": 6}, lexicon=LEX)
    assert r.transcript == ""
    assert r.content_evaluation.evidence_and_examples.has_evidence
    assert r.content_evaluation.argument_structure.has_structure
    assert r.speech_summary != EMPTY_SUMMARY
